"""Storage module - the store contract and its SQLite implementation."""

from .base import Store
from .sqlite_store import SqliteStore, create_sqlite_store

__all__ = ["SqliteStore", "Store", "create_sqlite_store"]
