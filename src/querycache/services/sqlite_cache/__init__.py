"""SQLite cache store package."""

from querycache.services.sqlite_cache.store import SQLiteCacheStore

__all__ = ["SQLiteCacheStore"]
