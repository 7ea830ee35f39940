"""Update/delete operations for the SQLite cache store."""

from __future__ import annotations

import logging

from querycache.services.sqlite_cache.operations.base import BaseOperation
from querycache.shared.constants import CacheValidationConstants

logger = logging.getLogger(__name__)


class UpdateOperations(BaseOperation):
    """Update/delete operations for cache management."""

    def delete(self, key: str) -> bool:
        """Delete cache entry by key.

        Returns:
            True if deleted, False if not found
        """
        self._validate_connection()

        _, key_hash = self._generate_cache_key_hash(key)
        cursor = self.conn.execute(
            f"DELETE FROM {self.table} WHERE key_hash = ?",  # noqa: S608
            (key_hash,),
        )

        deleted = cursor.rowcount > 0
        if deleted:
            logger.debug(
                "Cache deleted: key=%s (hash=%s...)",
                key[: CacheValidationConstants.KEY_LOG_LENGTH],
                key_hash[: CacheValidationConstants.HASH_PREFIX_LOG_LENGTH],
            )

        return deleted

    def purge_expired(self) -> int:
        """Purge expired cache entries.

        Returns:
            Number of purged entries
        """
        self._validate_connection()

        cursor = self.conn.execute(
            f"DELETE FROM {self.table} WHERE expires_at IS NOT NULL AND expires_at <= ?",  # noqa: S608
            (self.clock(),),
        )

        purged_count = cursor.rowcount
        if purged_count > 0:
            logger.info("Purged %d expired cache entries", purged_count)

        return purged_count

    def clear(self) -> int:
        """Clear all cache entries.

        Returns:
            Number of cleared entries
        """
        self._validate_connection()

        cursor = self.conn.execute(f"DELETE FROM {self.table}")  # noqa: S608
        logger.info("Cleared all cache entries")

        return cursor.rowcount
