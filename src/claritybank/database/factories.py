"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from claritybank.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks CLARITYBANK_DB_PATH
            environment variable, then defaults to ~/.claritybank/claritybank.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("CLARITYBANK_DB_PATH")

    if database_path is None:
        # Default to ~/.claritybank/claritybank.db
        home = Path.home()
        db_dir = home / ".claritybank"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "claritybank.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)
