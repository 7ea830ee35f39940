"""Services for querycache: the cached facade, resolvers and SQLite adapters."""

from querycache.services.cached_db import CachedDatabaseManager
from querycache.services.sqlite_cache import SQLiteCacheStore
from querycache.services.sqlite_db import SQLiteDatabaseManager

__all__ = [
    "CachedDatabaseManager",
    "SQLiteCacheStore",
    "SQLiteDatabaseManager",
]
