"""Storage layer for famfin application."""

from famfin.database.base import Store
from famfin.database.memory import MemoryStore
from famfin.database.repository import LedgerRepository
from famfin.database.factories import create_sqlite_store

__all__ = ["Store", "MemoryStore", "LedgerRepository", "create_sqlite_store"]
