"""Cache-related constants."""

# Base time units for TTL calculations
BASE_SECOND = 1
BASE_MINUTE = 60 * BASE_SECOND
BASE_HOUR = 60 * BASE_MINUTE
BASE_DAY = 24 * BASE_HOUR


class Cache:
    """Cache configuration constants."""

    DEFAULT_TTL = BASE_HOUR
    # ttl value meaning "never expires" for the SQLite store
    NO_EXPIRY_TTL = 0

    DEFAULT_DB_FILE = "querycache_store.db"
    TABLE_NAME = "cache_entries"

    # separator between a list cache key and its version stamp
    VERSION_SEPARATOR = "_"


class CacheValidationConstants:
    """Cache validation constants."""

    SHA256_HASH_LENGTH = 64
    HASH_PREFIX_LOG_LENGTH = 16
    KEY_LOG_LENGTH = 50


__all__ = ["BASE_DAY", "BASE_HOUR", "BASE_MINUTE", "Cache", "CacheValidationConstants"]
