"""SQLite cache store.

Key-value CacheManager implementation persisting orjson-encoded values in a
single SQLite table with absolute expiry timestamps.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
import time
from collections.abc import Generator, Mapping, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable

from querycache.config.models.cache_settings import CacheSettings
from querycache.services.sqlite_cache.operations import (
    InsertOperations,
    QueryOperations,
    UpdateOperations,
)
from querycache.services.sqlite_cache.schema import create_tables
from querycache.services.sqlite_db.transaction import TransactionManager
from querycache.shared.constants import Cache
from querycache.shared.errors import (
    CacheStoreError,
    ErrorCode,
    ErrorContext,
    create_cache_error,
)
from querycache.shared.logging import log_operation_error, log_operation_success

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


class SQLiteCacheStore:
    """SQLite-backed cache store.

    Uses WAL mode for file databases and is safe to share between threads.
    A TTL of ``None`` falls back to the configured default, a TTL of 0
    stores the entry without expiry, and expired entries read as misses
    until purged.

    Attributes:
        db_path: Path to SQLite database file
        default_ttl: TTL applied when a call passes none
        conn: SQLite database connection

    Example:
        >>> cache = SQLiteCacheStore(":memory:")
        >>> cache.set("user_1", {"id": 1, "name": "a"}, 60, True)
        True
        >>> cache.get_multi(["user_1", "user_2"], True)
        {'user_1': {'id': 1, 'name': 'a'}}
        >>> cache.close()
    """

    def __init__(
        self,
        db_path: Path | str = Cache.DEFAULT_DB_FILE,
        default_ttl: int = Cache.DEFAULT_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize SQLite cache store.

        Args:
            db_path: Path to SQLite database file, or ``:memory:``
            default_ttl: TTL in seconds used when a call gives none
            clock: Time source for expiry

        Raises:
            CacheStoreError: If database initialization fails
        """
        self.db_path = str(db_path)
        self.default_ttl = default_ttl
        self.clock = clock
        self.conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()
        self._initialize_db()

    @classmethod
    def from_settings(cls, settings: CacheSettings, clock: Callable[[], float] = time.time) -> SQLiteCacheStore:
        """Build a store from the cache settings section."""
        return cls(settings.db_path, settings.default_ttl, clock)

    def _initialize_db(self) -> None:
        """Initialize database with WAL mode and schema.

        Raises:
            CacheStoreError: If database connection or schema creation fails
        """
        context = ErrorContext(
            operation="initialize_cache_store",
            additional_data={"db_path": self.db_path},
        )

        try:
            if self.db_path != MEMORY_PATH:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

            self.conn = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                isolation_level=None,
            )

            if self.db_path != MEMORY_PATH:
                self.conn.execute("PRAGMA journal_mode=WAL")
                self.conn.execute("PRAGMA synchronous=NORMAL")

            create_tables(self.conn)

            self._query_ops = QueryOperations(self.conn, self.clock)
            self._insert_ops = InsertOperations(self.conn, self.clock)
            self._update_ops = UpdateOperations(self.conn, self.clock)
            self._transactions = TransactionManager(self.conn, self._lock)

            log_operation_success(
                logger=logger,
                operation="initialize_cache_store",
                duration_ms=0,
                context=context.additional_data,
            )

        except (sqlite3.Error, OSError) as e:
            error = CacheStoreError(
                code=ErrorCode.CACHE_ERROR,
                message=f"Failed to initialize SQLite cache store: {e!s}",
                context=context,
                original_error=e,
            )
            log_operation_error(
                logger=logger,
                error=error,
                operation="initialize_cache_store",
                additional_context=context.additional_data,
            )
            raise error from e

    def get(self, key: str, structured: bool = False) -> Any:
        """Retrieve a value.

        Returns:
            Cached value, or None on a miss or expired entry

        Raises:
            CacheStoreError: If the database operation fails
        """
        with self._translate_errors("cache_get", key, ErrorCode.CACHE_READ_FAILED):
            return self._query_ops.get(key)

    def get_multi(self, keys: Sequence[str], structured: bool = False) -> dict[str, Any]:
        """Retrieve several values.

        Returns:
            Mapping of found keys to values; misses are absent
        """
        with self._translate_errors("cache_get_multi", None, ErrorCode.CACHE_READ_FAILED):
            return self._query_ops.get_many(list(keys))

    def set(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
        structured: bool = False,
    ) -> bool:
        """Store a value.

        Args:
            key: Cache key identifier
            value: Value to cache (must be serializable by orjson)
            ttl: Time-to-live in seconds; None for the default, 0 for no expiry
            structured: Whether the value is a composite

        Raises:
            CacheStoreError: If serialization or the database operation fails
        """
        return self.set_multi({key: value}, ttl, structured)

    def set_multi(
        self,
        items: Mapping[str, Any],
        ttl: int | None = None,
        structured: bool = False,
    ) -> bool:
        """Store several values atomically."""
        if not items:
            return True

        ttl_seconds = self.default_ttl if ttl is None else ttl
        with self._translate_errors("cache_set", next(iter(items)), ErrorCode.CACHE_WRITE_FAILED):
            with self._transactions.transaction(immediate=True):
                self._insert_ops.insert_many(items, ttl_seconds, structured)
        return True

    def delete(self, key: str) -> bool:
        """Delete cache entry by key.

        Returns:
            True if deleted, False if not found
        """
        with self._translate_errors("cache_delete", key, ErrorCode.CACHE_WRITE_FAILED):
            return self._update_ops.delete(key)

    def purge_expired(self) -> int:
        """Purge expired cache entries.

        Returns:
            Number of purged entries
        """
        with self._translate_errors("cache_purge_expired", None, ErrorCode.CACHE_WRITE_FAILED):
            return self._update_ops.purge_expired()

    def clear(self) -> int:
        """Clear all cache entries.

        Returns:
            Number of cleared entries
        """
        with self._translate_errors("cache_clear", None, ErrorCode.CACHE_WRITE_FAILED):
            return self._update_ops.clear()

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            if self.conn:
                self.conn.close()
                self.conn = None
                logger.debug("Closed SQLite cache store")

    def __enter__(self) -> SQLiteCacheStore:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @contextmanager
    def _translate_errors(
        self,
        operation: str,
        cache_key: str | None,
        code: ErrorCode,
    ) -> Generator[None, None, None]:
        # one connection is shared by all threads; every operation holds its lock
        with self._lock:
            if self.conn is None:
                raise CacheStoreError(
                    code=ErrorCode.CACHE_ERROR,
                    message="Cache store is closed",
                    context=ErrorContext(operation=operation, cache_key=cache_key),
                )
            try:
                yield
            except sqlite3.Error as e:
                error = create_cache_error(e, operation, cache_key, code)
                log_operation_error(logger=logger, error=error, operation=operation)
                raise error from e


__all__ = ["SQLiteCacheStore"]
