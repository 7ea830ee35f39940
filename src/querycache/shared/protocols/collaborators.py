"""Collaborator protocols for dependency inversion.

The cache-aside layer never talks to a concrete driver or cache client.
It consumes these two narrow capability sets, so any object with matching
methods (the bundled SQLite adapters, a MySQL driver wrapper, a memcached
client wrapper, a test fake) can be plugged in.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from querycache.shared.types import BoundParams, Record


class DatabaseManager(Protocol):
    """Protocol for the database collaborator.

    Every method signals failure by raising
    :class:`querycache.shared.errors.DatabaseError`.

    Example:
        >>> from querycache.services.sqlite_db import SQLiteDatabaseManager
        >>> db: DatabaseManager = SQLiteDatabaseManager()
        >>> db.connect({"path": ":memory:"})
    """

    def connect(self, settings: Mapping[str, Any]) -> Any:
        """Establish the underlying connection. Settings are opaque."""

    def execute(self, statement: str, params: BoundParams | None = None) -> Any:
        """Execute a statement.

        Returns:
            The generated identifier for inserts, otherwise True
        """

    def affected_row_count(self) -> int:
        """Rows changed by the last execute() call."""

    def fetch_all(self, statement: str, params: BoundParams | None = None) -> list[Record]:
        """Return all rows of a query."""

    def fetch_all_with_total_count(
        self,
        statement: str,
        params: BoundParams | None = None,
    ) -> dict[str, Any]:
        """Return ``{"rows": [...], "total_count": n}``."""

    def fetch_scalar(self, statement: str, params: BoundParams | None = None) -> Any:
        """Return the first column of the first row."""

    def fetch_one(self, statement: str, params: BoundParams | None = None) -> Record | None:
        """Return the first row or None."""

    def begin_transaction(self) -> None:
        """Begin a transaction."""

    def commit(self) -> None:
        """Commit the current transaction."""

    def rollback(self) -> None:
        """Roll back the current transaction."""


class CacheManager(Protocol):
    """Protocol for the cache store collaborator.

    A miss is reported as ``None``. The ``structured`` flag tells the store
    that the value is a composite (row or list) rather than a scalar; this
    layer does not interpret it further.

    Faults are not converted by the cache-aside layer: whatever the store
    raises reaches the caller.
    """

    def get(self, key: str, structured: bool = False) -> Any:
        """Return the cached value or None."""

    def set(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
        structured: bool = False,
    ) -> Any:
        """Store a value; ``ttl=None`` means the store's default."""

    def get_multi(self, keys: Sequence[str], structured: bool = False) -> Mapping[str, Any]:
        """Return found keys only; absent keys are misses."""

    def set_multi(
        self,
        items: Mapping[str, Any],
        ttl: int | None = None,
        structured: bool = False,
    ) -> Any:
        """Store several values in one call."""
