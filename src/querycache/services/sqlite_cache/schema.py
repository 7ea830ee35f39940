"""Schema creation for the SQLite cache store."""

from __future__ import annotations

import logging
import sqlite3

from querycache.shared.constants import Cache

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def create_tables(conn: sqlite3.Connection, table: str = Cache.TABLE_NAME) -> None:
    """Create the cache table and indexes if missing."""
    schema_sql = f"""
    CREATE TABLE IF NOT EXISTS {table} (
        id INTEGER PRIMARY KEY AUTOINCREMENT,

        cache_key TEXT NOT NULL,
        key_hash TEXT NOT NULL UNIQUE,

        -- orjson-encoded value
        payload BLOB NOT NULL,
        structured INTEGER NOT NULL DEFAULT 0,

        -- epoch seconds; NULL expires_at never expires
        created_at REAL NOT NULL,
        expires_at REAL,
        payload_size INTEGER,

        CHECK (length(cache_key) > 0),
        CHECK (length(key_hash) = 64)
    );

    CREATE INDEX IF NOT EXISTS idx_{table}_expires_at ON {table}(expires_at);
    """

    conn.executescript(schema_sql)
    conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")

    logger.debug("Cache schema ready (v%d)", SCHEMA_VERSION)
