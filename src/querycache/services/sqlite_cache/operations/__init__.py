"""SQLite cache store operations.

Separate operation classes for querying, inserting and deleting entries.
"""

from querycache.services.sqlite_cache.operations.insert import InsertOperations
from querycache.services.sqlite_cache.operations.query import QueryOperations
from querycache.services.sqlite_cache.operations.update import UpdateOperations

__all__ = ["InsertOperations", "QueryOperations", "UpdateOperations"]
