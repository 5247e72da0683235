"""Database layer for farmledger."""

from farmledger.database.base import Database
from farmledger.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
