"""Database layer for claritybank application."""

from claritybank.database.base import Database
from claritybank.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
