"""键值存储 SQLite 实现

相当于浏览器 local storage：字符串键 -> 字符串值。
写操作不自动提交事务，需由调用方管理（见 transaction.py）。
"""

from datetime import UTC, datetime

import aiosqlite


class SqliteKeyValueStorage:
    """键值存储的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def get_item(self, key: str) -> str | None:
        cursor = await self._conn.execute(
            "SELECT value FROM kv_storage WHERE key = ?",
            (key,),
        )
        row = await cursor.fetchone()
        return row[0] if row else None

    async def get_items(self, keys: list[str]) -> dict[str, str | None]:
        """批量读取，缺失的键映射为 None"""
        return {key: await self.get_item(key) for key in keys}

    async def set_item(self, key: str, value: str) -> None:
        """写入或覆盖一个键"""
        await self._conn.execute(
            """
            INSERT INTO kv_storage (key, value, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
            """,
            (key, value, datetime.now(UTC).isoformat()),
        )

    async def remove_item(self, key: str) -> None:
        await self._conn.execute("DELETE FROM kv_storage WHERE key = ?", (key,))

    async def keys(self) -> list[str]:
        cursor = await self._conn.execute("SELECT key FROM kv_storage ORDER BY key")
        rows = await cursor.fetchall()
        return [row[0] for row in rows]
