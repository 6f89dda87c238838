"""SQLite implementation of the key-value store."""

import json

import aiosqlite

from src.config import get_logger
from src.core.entities.base import utcnow
from src.core.exceptions import DatabaseError
from src.core.interfaces.kv_store import IKeyValueStore, JsonValue
from src.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)


class SQLiteKeyValueStore(IKeyValueStore):
    """JSON records in the ``kv_store`` table, keyed by namespaced string."""

    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    async def get(self, key: str) -> JsonValue | None:
        try:
            async with self.pool.acquire() as conn:
                cursor = await conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?",
                    (key,),
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise DatabaseError("get", str(e)) from e

        if row is None:
            return None
        return json.loads(row["value"])

    async def set(self, key: str, value: JsonValue) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        try:
            async with self.pool.transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, payload, utcnow().isoformat()),
                )
        except aiosqlite.Error as e:
            raise DatabaseError("set", str(e)) from e

        logger.debug("kv_set", key=key, size=len(payload))

    async def delete(self, key: str) -> bool:
        try:
            async with self.pool.transaction() as conn:
                cursor = await conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
                deleted = cursor.rowcount > 0
        except aiosqlite.Error as e:
            raise DatabaseError("delete", str(e)) from e

        logger.debug("kv_delete", key=key, deleted=deleted)
        return deleted

    async def get_by_prefix(self, prefix: str) -> list[JsonValue]:
        # substr comparison avoids LIKE wildcard escaping for ids containing % or _
        try:
            async with self.pool.acquire() as conn:
                cursor = await conn.execute(
                    """
                    SELECT value FROM kv_store
                    WHERE substr(key, 1, ?) = ?
                    ORDER BY key
                    """,
                    (len(prefix), prefix),
                )
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise DatabaseError("get_by_prefix", str(e)) from e

        return [json.loads(row["value"]) for row in rows]

    async def ping(self) -> bool:
        return await self.pool.ping()
