"""Store factory functions for creating store instances."""

from pathlib import Path
from typing import Optional

from famfin.config import get_settings
from famfin.database.sqlalchemy_db import SQLAlchemyStore


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyStore:
    """Create a SQLite-backed store.

    Args:
        database_path: Path to SQLite database file. If None, uses the
            configured FAMFIN_DB_PATH, which defaults to ~/.famfin/famfin.db

    Returns:
        SQLAlchemyStore instance configured for SQLite
    """
    if database_path is None:
        database_path = get_settings().database_path

    Path(database_path).expanduser().parent.mkdir(parents=True, exist_ok=True)
    database_url = f"sqlite:///{Path(database_path).expanduser()}"
    return SQLAlchemyStore(database_url)
