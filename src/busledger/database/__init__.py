"""Database layer for busledger application."""

from busledger.database.base import Database
from busledger.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
