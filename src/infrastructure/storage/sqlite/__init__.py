"""SQLite storage implementations."""

from src.infrastructure.storage.sqlite.connection import ConnectionPool
from src.infrastructure.storage.sqlite.kv_store import SQLiteKeyValueStore

__all__ = [
    "ConnectionPool",
    "SQLiteKeyValueStore",
]
