"""ProjectHub Core Store -- 内存 Store + SQLite 键值持久化

提供工厂函数创建共享数据库连接的 StoreGroup。
"""

import asyncio
from collections.abc import Iterable
from pathlib import Path

import aiosqlite
import structlog

from ..config import ACTIVITY_LOG_LIMIT
from .activity_store import ActivityStore
from .issue_store import IssueStore
from .kv_storage import SqliteKeyValueStorage
from .member_store import MemberStore
from .persistence import (
    ACTIVITY_STORAGE_KEY,
    ALL_STORAGE_KEYS,
    ISSUE_STORAGE_KEY,
    MEMBER_STORAGE_KEY,
    PROJECT_STORAGE_KEY,
    SETTINGS_STORAGE_KEY,
    TASK_STORAGE_KEY,
)
from .project_store import ProjectStore
from .sqlite_init import init_db
from .state import AppState
from .task_store import TaskStore
from .transaction import write_items

log = structlog.get_logger()


class StoreGroup:
    """Store 实例组 -- 内存状态 + 共享同一个数据库连接的键值存储"""

    def __init__(
        self,
        conn: aiosqlite.Connection,
        state: AppState,
        activity_limit: int = ACTIVITY_LOG_LIMIT,
    ) -> None:
        self.conn = conn
        self.storage = SqliteKeyValueStorage(conn)
        self.state = state
        self.activity_limit = activity_limit
        # 写操作（内存变更 + 持久化）串行执行
        self.write_lock = asyncio.Lock()

    async def persist(self, keys: Iterable[str] = ALL_STORAGE_KEYS) -> None:
        """把指定键的当前状态写入存储（同一事务）"""
        await write_items(self.conn, self.storage, self.state.to_blobs(keys))

    async def reload(self) -> None:
        """从存储重新加载全部状态（导入备份后使用），保留当前操作者"""
        actor = self.state.current_actor
        blobs = await self.storage.get_items(list(ALL_STORAGE_KEYS))
        self.state = AppState.from_blobs(blobs, activity_limit=self.activity_limit)
        self.state.current_actor = actor
        log.info(
            "store_group_reloaded",
            project_count=len(self.state.project_store.projects),
            task_count=len(self.state.task_store.tasks),
            member_count=len(self.state.member_store.members),
            issue_count=len(self.state.issue_store.issues),
        )

    async def close(self) -> None:
        await self.conn.close()


async def create_store_group(
    db_path: str,
    activity_limit: int = ACTIVITY_LOG_LIMIT,
) -> StoreGroup:
    """创建 StoreGroup 并从存储加载状态

    Args:
        db_path: SQLite 数据库文件路径
        activity_limit: 活动日志保留条数上限

    Returns:
        StoreGroup 实例
    """
    # 确保数据库目录存在
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    await init_db(conn)

    group = StoreGroup(conn=conn, state=AppState(), activity_limit=activity_limit)
    await group.reload()
    return group


__all__ = [
    "StoreGroup",
    "create_store_group",
    "AppState",
    "ActivityStore",
    "ProjectStore",
    "TaskStore",
    "MemberStore",
    "IssueStore",
    "SqliteKeyValueStorage",
    "init_db",
    "write_items",
    "PROJECT_STORAGE_KEY",
    "TASK_STORAGE_KEY",
    "MEMBER_STORAGE_KEY",
    "ACTIVITY_STORAGE_KEY",
    "SETTINGS_STORAGE_KEY",
    "ISSUE_STORAGE_KEY",
    "ALL_STORAGE_KEYS",
]
