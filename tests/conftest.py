"""全局 pytest 配置 -- 内存状态与临时 SQLite 数据库 fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio
from projecthub.core.store import StoreGroup, create_store_group
from projecthub.core.store.sqlite_init import init_db
from projecthub.core.store.state import AppState


@pytest.fixture
def app_state() -> AppState:
    """空的内存状态（不连接数据库）"""
    return AppState()


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "sqlite" / "test.db"


@pytest_asyncio.fixture
async def db_conn(tmp_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """已初始化 kv_storage 表的数据库连接"""
    conn = await aiosqlite.connect(str(tmp_path / "kv_test.db"))
    await init_db(conn)
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def store_group(tmp_db_path: Path) -> AsyncGenerator[StoreGroup, None]:
    """基于临时数据库的 StoreGroup"""
    group = await create_store_group(str(tmp_db_path))
    yield group
    await group.close()
