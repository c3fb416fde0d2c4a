"""Database layer for cnabledger."""

from cnabledger.database.base import Database
from cnabledger.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
