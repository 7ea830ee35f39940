"""Transactions on a shared autocommit SQLite connection."""

from __future__ import annotations

import logging
import threading
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import sqlite3

logger = logging.getLogger(__name__)


class TransactionManager:
    """Explicit BEGIN/COMMIT/ROLLBACK for a connection shared by threads.

    ``lock`` is the connection's lock. :meth:`transaction` holds it from
    BEGIN to COMMIT, so a second thread waits instead of issuing a nested
    BEGIN on the same connection.

    Attributes:
        conn: Connection opened with ``isolation_level=None``
        lock: Re-entrant lock guarding ``conn``
    """

    def __init__(self, conn: sqlite3.Connection, lock: threading.RLock | None = None) -> None:
        self.conn = conn
        self.lock = lock if lock is not None else threading.RLock()

    @property
    def active(self) -> bool:
        """True while the connection has an open transaction."""
        return self.conn.in_transaction

    def begin(self, *, immediate: bool = False) -> None:
        """Begin a transaction.

        Args:
            immediate: Take the write lock up front (``BEGIN IMMEDIATE``)
        """
        self.conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
        logger.debug("Transaction started (immediate=%s)", immediate)

    def commit(self) -> None:
        self.conn.execute("COMMIT")
        logger.debug("Transaction committed")

    def rollback(self) -> None:
        """Roll back the open transaction; no-op when none is open."""
        if not self.active:
            logger.debug("Rollback skipped, no open transaction")
            return
        self.conn.execute("ROLLBACK")
        logger.debug("Transaction rolled back")

    @contextmanager
    def transaction(self, *, immediate: bool = False) -> Generator[None, None, None]:
        """Run the block in one transaction while holding ``lock``.

        Commits on success, rolls back and re-raises on exception.
        """
        with self.lock:
            self.begin(immediate=immediate)
            try:
                yield
                self.commit()
            except Exception:
                self.rollback()
                raise
