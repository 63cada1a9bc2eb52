"""Database layer for talikhata application."""

from talikhata.database.base import Database
from talikhata.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
