"""querycache - cache-aside query layer over a relational database.

Reads are served from a cache store where possible, per-row cache hits are
reconciled with a targeted ``IN (...)`` re-query, and every database outcome
is normalized into data or a ResultEnvelope.
"""

from querycache.config import Settings, get_config, load_settings
from querycache.core import (
    CacheMode,
    FetchOptions,
    QueryTrace,
    ResultEnvelope,
    WriteOptions,
    is_failure,
)
from querycache.services import (
    CachedDatabaseManager,
    SQLiteCacheStore,
    SQLiteDatabaseManager,
)
from querycache.shared.errors import (
    CacheStoreError,
    ConfigurationError,
    DatabaseError,
    QueryCacheError,
)

__version__ = "0.1.0"

__all__ = [
    "CacheMode",
    "CacheStoreError",
    "CachedDatabaseManager",
    "ConfigurationError",
    "DatabaseError",
    "FetchOptions",
    "QueryCacheError",
    "QueryTrace",
    "ResultEnvelope",
    "SQLiteCacheStore",
    "SQLiteDatabaseManager",
    "Settings",
    "WriteOptions",
    "__version__",
    "get_config",
    "is_failure",
    "load_settings",
]
