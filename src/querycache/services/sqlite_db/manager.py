"""SQLite database collaborator.

Implements the DatabaseManager protocol on an autocommit sqlite3
connection so transactions are controlled explicitly through
BEGIN/COMMIT/ROLLBACK.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Generator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from querycache.config.models.database_settings import DatabaseSettings
from querycache.services.sqlite_db.dialect import count_statement, is_insert, rewrite_insert_set
from querycache.services.sqlite_db.transaction import TransactionManager
from querycache.shared.errors import (
    DatabaseError,
    ErrorCode,
    ErrorContext,
    create_database_error,
)
from querycache.shared.types import BoundParams, Record

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


class SQLiteDatabaseManager:
    """sqlite3-backed database collaborator.

    Rows are returned as plain dicts. Every ``sqlite3.Error`` is raised as
    :class:`DatabaseError` carrying the SQLite error code.

    Example:
        >>> db = SQLiteDatabaseManager()
        >>> db.connect({"path": ":memory:"})
        >>> db.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)")
        True
        >>> db.execute("INSERT `users` SET `name`=?", ["a"])
        1
    """

    def __init__(self, settings: DatabaseSettings | Mapping[str, Any] | None = None) -> None:
        self.conn: sqlite3.Connection | None = None
        self._affected = 0
        self._transactions: TransactionManager | None = None
        if settings is not None:
            self.connect(settings)

    def connect(self, settings: DatabaseSettings | Mapping[str, Any] | None = None) -> sqlite3.Connection:
        """Open the connection.

        Args:
            settings: DatabaseSettings or a mapping with ``path``/``timeout``

        Raises:
            DatabaseError: If the database cannot be opened
        """
        if settings is None:
            config = DatabaseSettings()
        elif isinstance(settings, DatabaseSettings):
            config = settings
        else:
            config = DatabaseSettings.model_validate(dict(settings))

        path = str(config.path)
        with self._translate_errors("connect"):
            if path != MEMORY_PATH:
                Path(path).parent.mkdir(parents=True, exist_ok=True)

            conn = sqlite3.connect(
                path,
                timeout=config.timeout,
                check_same_thread=False,
                isolation_level=None,
            )
            conn.row_factory = sqlite3.Row
            if path != MEMORY_PATH:
                conn.execute("PRAGMA journal_mode=WAL")

        self.close()
        self.conn = conn
        self._transactions = TransactionManager(conn)
        logger.debug("Connected to SQLite database: %s", path)
        return conn

    def execute(self, statement: str, params: BoundParams | None = None) -> Any:
        """Execute a statement.

        Returns:
            ``lastrowid`` for INSERT statements, otherwise True
        """
        conn = self._require_connection()
        sql = rewrite_insert_set(statement)
        with self._translate_errors("execute", sql):
            cursor = conn.execute(sql, params or ())
        self._affected = max(cursor.rowcount, 0)
        if is_insert(sql):
            return cursor.lastrowid
        return True

    def affected_row_count(self) -> int:
        return self._affected

    def fetch_all(self, statement: str, params: BoundParams | None = None) -> list[Record]:
        conn = self._require_connection()
        with self._translate_errors("fetch_all", statement):
            rows = conn.execute(statement, params or ()).fetchall()
        return [dict(row) for row in rows]

    def fetch_all_with_total_count(
        self,
        statement: str,
        params: BoundParams | None = None,
    ) -> dict[str, Any]:
        """Return the rows and the row count without LIMIT/OFFSET."""
        rows = self.fetch_all(statement, params)
        total = self.fetch_scalar(count_statement(statement), params)
        return {"rows": rows, "total_count": int(total or 0)}

    def fetch_scalar(self, statement: str, params: BoundParams | None = None) -> Any:
        conn = self._require_connection()
        with self._translate_errors("fetch_scalar", statement):
            row = conn.execute(statement, params or ()).fetchone()
        return row[0] if row is not None else None

    def fetch_one(self, statement: str, params: BoundParams | None = None) -> Record | None:
        conn = self._require_connection()
        with self._translate_errors("fetch_one", statement):
            row = conn.execute(statement, params or ()).fetchone()
        return dict(row) if row is not None else None

    def begin_transaction(self) -> None:
        self._require_connection()
        with self._translate_errors("begin_transaction"):
            self._require_transactions().begin()

    def commit(self) -> None:
        self._require_connection()
        with self._translate_errors("commit"):
            self._require_transactions().commit()

    def rollback(self) -> None:
        self._require_connection()
        with self._translate_errors("rollback"):
            self._require_transactions().rollback()

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            self._transactions = None
            logger.debug("Closed SQLite database connection")

    def _require_connection(self) -> sqlite3.Connection:
        if self.conn is None:
            raise DatabaseError(
                message="Database connection not initialized",
                code=ErrorCode.DATABASE_CONNECTION_ERROR,
                context=ErrorContext(operation="require_connection"),
            )
        return self.conn

    def _require_transactions(self) -> TransactionManager:
        if self._transactions is None:
            self._transactions = TransactionManager(self._require_connection())
        return self._transactions

    @contextmanager
    def _translate_errors(self, operation: str, query: str | None = None) -> Generator[None, None, None]:
        try:
            yield
        except sqlite3.Error as e:
            raise create_database_error(e, operation, query) from e


__all__ = ["SQLiteDatabaseManager"]
