"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from busledger.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks BUSLEDGER_DB_PATH
            environment variable, then defaults to ~/.busledger/busledger.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("BUSLEDGER_DB_PATH")

    if database_path is None:
        # Default to ~/.busledger/busledger.db
        home = Path.home()
        db_dir = home / ".busledger"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "busledger.db")

    database_url = f"sqlite:///{database_path}"
    db = SQLAlchemyDatabase(database_url)
    db.database_path = database_path
    return db
