"""SQLite database collaborator.

Reference implementation of the DatabaseManager protocol on sqlite3.
"""

from querycache.services.sqlite_db.manager import SQLiteDatabaseManager
from querycache.services.sqlite_db.transaction import TransactionManager

__all__ = ["SQLiteDatabaseManager", "TransactionManager"]
