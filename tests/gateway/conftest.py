"""gateway 测试配置 -- FastAPI app + httpx AsyncClient fixture"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from projecthub.core.store import create_store_group

_ENV_KEYS = ["PROJECTHUB_DB_PATH", "PROJECTHUB_UPLOAD_DIR", "LOGFIRE_SEND_TO_LOGFIRE"]


@pytest_asyncio.fixture
async def app(tmp_path: Path):
    """创建测试用 FastAPI app 实例（手动初始化，绕过 lifespan）"""
    os.environ["PROJECTHUB_DB_PATH"] = str(tmp_path / "sqlite" / "test.db")
    os.environ["PROJECTHUB_UPLOAD_DIR"] = str(tmp_path / "files")
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from projecthub.gateway.main import create_app

    application = create_app()
    application.state.upload_dir.mkdir(parents=True, exist_ok=True)
    store_group = await create_store_group(os.environ["PROJECTHUB_DB_PATH"])
    application.state.store_group = store_group

    yield application

    await store_group.close()
    for key in _ENV_KEYS:
        os.environ.pop(key, None)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
