"""键值批量写入事务封装

一次变更涉及的多个存储键（例如 task-storage、project-storage、activity-storage）
在同一 SQLite 事务内提交，失败时全部回滚。
"""

from collections.abc import Mapping

import aiosqlite

from .kv_storage import SqliteKeyValueStorage


async def write_items(
    conn: aiosqlite.Connection,
    storage: SqliteKeyValueStorage,
    items: Mapping[str, str | None],
) -> None:
    """在同一事务内原子写入多个键

    Args:
        conn: 数据库连接（需与 storage 使用同一连接以保证事务性）
        storage: 键值存储
        items: key -> value；value 为 None 表示删除该键

    Raises:
        Exception: 如果事务提交失败，自动回滚
    """
    try:
        for key, value in items.items():
            if value is None:
                await storage.remove_item(key)
            else:
                await storage.set_item(key, value)
        await conn.commit()
    except Exception:
        await conn.rollback()
        raise
