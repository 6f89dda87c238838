"""Storage infrastructure implementations."""

from src.infrastructure.storage.sqlite import ConnectionPool, SQLiteKeyValueStore

__all__ = [
    "ConnectionPool",
    "SQLiteKeyValueStore",
]
