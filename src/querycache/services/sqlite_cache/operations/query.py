"""Query operations for the SQLite cache store."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from querycache.services.sqlite_cache.operations.base import BaseOperation
from querycache.shared.constants import CacheValidationConstants

logger = logging.getLogger(__name__)


class QueryOperations(BaseOperation):
    """Query operations for cache retrieval."""

    def get(self, key: str) -> Any:
        """Retrieve a value from cache.

        Args:
            key: Cache key identifier

        Returns:
            Cached value if found and not expired, None otherwise
        """
        return self.get_many([key]).get(key)

    def get_many(self, keys: Sequence[str]) -> dict[str, Any]:
        """Retrieve several values in one query.

        Args:
            keys: Cache key identifiers

        Returns:
            Mapping of found keys to values; missing or expired keys are absent
        """
        self._validate_connection()

        hashes = {self._generate_cache_key_hash(key)[1]: key for key in keys}
        if not hashes:
            return {}

        placeholders = ",".join("?" for _ in hashes)
        sql = f"""
        SELECT key_hash, payload
        FROM {self.table}
        WHERE key_hash IN ({placeholders})
          AND (expires_at IS NULL OR expires_at > ?)
        """  # noqa: S608
        cursor = self.conn.execute(sql, (*hashes, self.clock()))

        found: dict[str, Any] = {}
        for key_hash, payload in cursor.fetchall():
            value = self._deserialize(key_hash, payload)
            if value is None:
                continue
            found[hashes[key_hash]] = value

        logger.debug(
            "Cache lookup: %d of %d key(s) found (first key=%s)",
            len(found),
            len(hashes),
            next(iter(hashes.values()))[: CacheValidationConstants.KEY_LOG_LENGTH],
        )
        return found
