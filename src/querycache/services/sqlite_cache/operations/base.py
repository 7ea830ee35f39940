"""Base operation class for SQLite cache store operations.

This module provides shared functionality for all cache operations.
"""

from __future__ import annotations

import hashlib
import logging
import time
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable

import orjson

from querycache.shared.constants import Cache, CacheValidationConstants
from querycache.shared.errors import CacheStoreError, ErrorCode, ErrorContext

if TYPE_CHECKING:
    import sqlite3

logger = logging.getLogger(__name__)


def _encode_default(value: Any) -> Any:
    """orjson fallback for driver types it does not serialize natively."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    raise TypeError(f"Type is not JSON serializable: {type(value).__name__}")


class BaseOperation:
    """Base class for cache operations with shared functionality."""

    table = Cache.TABLE_NAME

    def __init__(
        self,
        conn: sqlite3.Connection,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize base operation.

        Args:
            conn: SQLite database connection
            clock: Time source for expiry checks
        """
        self.conn = conn
        self.clock = clock

    def _generate_cache_key_hash(self, key: str) -> tuple[str, str]:
        """Generate cache key hash for indexing.

        Args:
            key: Cache key string

        Returns:
            Tuple of (original_key, key_hash)
        """
        key_hash = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return key, key_hash

    def _validate_connection(self) -> None:
        """Validate database connection is available.

        Raises:
            CacheStoreError: If connection is not initialized
        """
        if self.conn is None:
            raise CacheStoreError(
                code=ErrorCode.CACHE_ERROR,
                message="Cache store connection not initialized",
                context=ErrorContext(operation="validate_connection"),
            )

    def _serialize(self, key: str, value: Any) -> bytes:
        """Serialize a value with orjson.

        Raises:
            CacheStoreError: If the value cannot be serialized
        """
        try:
            return orjson.dumps(value, default=_encode_default, option=orjson.OPT_NON_STR_KEYS)
        except orjson.JSONEncodeError as e:
            raise CacheStoreError(
                code=ErrorCode.CACHE_SERIALIZATION_ERROR,
                message=f"Failed to serialize cache value: {e!s}",
                context=ErrorContext(
                    operation="serialize",
                    cache_key=key[: CacheValidationConstants.KEY_LOG_LENGTH],
                ),
                original_error=e,
            ) from e

    def _deserialize(self, key_hash: str, payload: bytes | str) -> Any:
        """Deserialize a stored value.

        Returns:
            The value, or None if the payload is corrupted
        """
        try:
            return orjson.loads(payload)
        except orjson.JSONDecodeError as e:
            logger.warning(
                "Failed to deserialize cache data for key hash %s...: %s",
                key_hash[: CacheValidationConstants.HASH_PREFIX_LOG_LENGTH],
                str(e),
            )
            return None
