"""Insert operations for the SQLite cache store."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from querycache.services.sqlite_cache.operations.base import BaseOperation
from querycache.shared.constants import Cache, CacheValidationConstants

logger = logging.getLogger(__name__)


class InsertOperations(BaseOperation):
    """Insert operations for cache storage."""

    def insert_many(
        self,
        items: Mapping[str, Any],
        ttl_seconds: int,
        structured: bool = False,
    ) -> int:
        """Insert or replace entries.

        Args:
            items: Mapping of cache key to value
            ttl_seconds: Time-to-live in seconds (0 for no expiry)
            structured: Whether the values are composites

        Returns:
            Number of entries written
        """
        self._validate_connection()

        now = self.clock()
        expires_at = None if ttl_seconds == Cache.NO_EXPIRY_TTL else now + ttl_seconds

        rows = []
        for key, value in items.items():
            _, key_hash = self._generate_cache_key_hash(key)
            payload = self._serialize(key, value)
            rows.append((key, key_hash, payload, int(structured), now, expires_at, len(payload)))

        insert_sql = f"""
        INSERT OR REPLACE INTO {self.table} (
            cache_key, key_hash, payload, structured,
            created_at, expires_at, payload_size
        ) VALUES (?, ?, ?, ?, ?, ?, ?)
        """  # noqa: S608
        self.conn.executemany(insert_sql, rows)

        for key, key_hash, _, _, _, _, size in rows:
            logger.debug(
                "Cache inserted: key=%s (hash=%s...), size=%d bytes, ttl=%ds",
                key[: CacheValidationConstants.KEY_LOG_LENGTH],
                key_hash[: CacheValidationConstants.HASH_PREFIX_LOG_LENGTH],
                size,
                ttl_seconds,
            )

        return len(rows)
