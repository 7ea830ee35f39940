"""
Pytest configuration and shared fixtures for querycache tests.

Provides recording fakes for the database and cache collaborators plus
SQLite-backed fixtures for integration tests.
"""

from __future__ import annotations

from collections.abc import Generator, Mapping, Sequence
from pathlib import Path
from typing import Any, Callable

import pytest

from querycache.core.trace import QueryTrace
from querycache.services.cached_db import CachedDatabaseManager
from querycache.services.sqlite_cache import SQLiteCacheStore
from querycache.services.sqlite_db import SQLiteDatabaseManager
from querycache.shared.errors import DatabaseError

USERS = [
    {"id": 1, "name": "alice", "team": "red"},
    {"id": 2, "name": "bob", "team": "blue"},
    {"id": 3, "name": "carol", "team": "red"},
]


class FakeDatabase:
    """Database collaborator double that records every call.

    ``rows`` are filtered by the bound identifiers when the statement ends
    with an ``IN (...)`` predicate, which is enough to emulate the
    row-level re-query.
    """

    def __init__(self, rows: Sequence[dict[str, Any]] = (), key_column: str = "id") -> None:
        self.rows = [dict(row) for row in rows]
        self.key_column = key_column
        self.calls: list[tuple[str, str, Any]] = []
        self.scalar: Any = None
        self.one: Any = None
        self.counted: Any = None
        self.execute_result: Any = True
        self.affected = 0
        self.error: DatabaseError | None = None
        self.commit_error: DatabaseError | None = None

    def _record(self, method: str, statement: str = "", params: Any = None) -> None:
        self.calls.append((method, statement, params))
        if self.error is not None:
            raise self.error

    def methods(self) -> list[str]:
        return [method for method, _, _ in self.calls]

    def connect(self, settings: Mapping[str, Any]) -> str:
        self.calls.append(("connect", "", dict(settings)))
        return "connection"

    def execute(self, statement: str, params: Any = None) -> Any:
        self._record("execute", statement, params)
        return self.execute_result

    def affected_row_count(self) -> int:
        return self.affected

    def fetch_all(self, statement: str, params: Any = None) -> list[dict[str, Any]]:
        self._record("fetch_all", statement, params)
        if " IN (" in statement and params:
            wanted = {str(value) for value in params}
            return [dict(row) for row in self.rows if str(row.get(self.key_column)) in wanted]
        return [dict(row) for row in self.rows]

    def fetch_all_with_total_count(self, statement: str, params: Any = None) -> Any:
        self._record("fetch_all_with_total_count", statement, params)
        return self.counted

    def fetch_scalar(self, statement: str, params: Any = None) -> Any:
        self._record("fetch_scalar", statement, params)
        return self.scalar

    def fetch_one(self, statement: str, params: Any = None) -> Any:
        self._record("fetch_one", statement, params)
        return self.one

    def begin_transaction(self) -> None:
        self._record("begin_transaction")

    def commit(self) -> None:
        self.calls.append(("commit", "", None))
        if self.commit_error is not None:
            raise self.commit_error

    def rollback(self) -> None:
        self._record("rollback")


class FakeCache:
    """Dict-backed cache collaborator double that records every call."""

    def __init__(self, entries: Mapping[str, Any] | None = None) -> None:
        self.entries: dict[str, Any] = dict(entries or {})
        self.calls: list[tuple[str, Any]] = []
        self.error: Exception | None = None

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if self.error is not None:
            raise self.error

    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]

    def calls_to(self, method: str) -> list[tuple[Any, ...]]:
        return [args for name, args in self.calls if name == method]

    def get(self, key: str, structured: bool = False) -> Any:
        self._record("get", key, structured)
        return self.entries.get(key)

    def set(self, key: str, value: Any, ttl: int | None = None, structured: bool = False) -> bool:
        self._record("set", key, value, ttl, structured)
        self.entries[key] = value
        return True

    def get_multi(self, keys: Sequence[str], structured: bool = False) -> dict[str, Any]:
        self._record("get_multi", list(keys), structured)
        return {key: self.entries[key] for key in keys if key in self.entries}

    def set_multi(self, items: Mapping[str, Any], ttl: int | None = None, structured: bool = False) -> bool:
        self._record("set_multi", dict(items), ttl, structured)
        self.entries.update(items)
        return True


@pytest.fixture
def fake_db() -> FakeDatabase:
    """Database double preloaded with three user rows."""
    return FakeDatabase(USERS)


@pytest.fixture
def fake_cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def frozen_clock() -> Callable[[], float]:
    """Clock fixed at a known Unix timestamp."""
    return lambda: 1_700_000_000.0


@pytest.fixture
def manager(fake_db: FakeDatabase, fake_cache: FakeCache, frozen_clock: Callable[[], float]) -> CachedDatabaseManager:
    """Facade wired to the recording doubles."""
    return CachedDatabaseManager(fake_db, fake_cache, clock=frozen_clock)


@pytest.fixture
def trace() -> QueryTrace:
    return QueryTrace(collect_queries=True)


@pytest.fixture
def sqlite_db(tmp_path: Path) -> Generator[SQLiteDatabaseManager, None, None]:
    """File-backed SQLite database with a populated users table."""
    db = SQLiteDatabaseManager({"path": str(tmp_path / "app.db")})
    db.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT NOT NULL, team TEXT)")
    for user in USERS:
        db.execute(
            "INSERT INTO users (id, name, team) VALUES (?, ?, ?)",
            [user["id"], user["name"], user["team"]],
        )
    yield db
    db.close()


@pytest.fixture
def sqlite_cache(tmp_path: Path) -> Generator[SQLiteCacheStore, None, None]:
    store = SQLiteCacheStore(tmp_path / "cache.db")
    yield store
    store.close()
