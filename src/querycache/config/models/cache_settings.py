"""Cache configuration model.

This module contains the cache configuration model for the SQLite cache
store: default TTL and database file location.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from querycache.shared.constants import Cache


class CacheSettings(BaseModel):
    """Cache store configuration."""

    enabled: bool = Field(default=True, description="Enable caching by default")
    default_ttl: int = Field(
        default=Cache.DEFAULT_TTL,
        ge=0,
        description="TTL in seconds used when a call gives none (0 = never expires)",
    )
    db_path: str = Field(
        default=Cache.DEFAULT_DB_FILE,
        description="SQLite file backing the cache store",
    )


__all__ = ["CacheSettings"]
