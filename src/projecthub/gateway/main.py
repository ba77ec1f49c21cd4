"""FastAPI 应用主文件

app 创建 + lifespan 管理：键值存储初始化/关闭 + 路由注册 + 上传目录静态挂载。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from projecthub.core.config import get_activity_limit, get_db_path, get_upload_dir
from projecthub.core.store import create_store_group

from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import (
    activities,
    backup,
    health,
    issues,
    members,
    projects,
    settings,
    tasks,
    upload,
    views,
)

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时创建上传目录并加载存储，关闭时清理连接"""
    app.state.upload_dir.mkdir(parents=True, exist_ok=True)

    db_path = get_db_path()
    store_group = await create_store_group(db_path, activity_limit=get_activity_limit())
    app.state.store_group = store_group
    log.info("store_group_opened", db_path=db_path)

    yield

    if hasattr(app.state, "store_group") and app.state.store_group:
        await app.state.store_group.close()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="ProjectHub Gateway",
        version="0.1.0",
        description="ProjectHub 项目管理 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    setup_logging()
    setup_logfire(app)

    upload_dir = get_upload_dir()
    app.state.upload_dir = upload_dir

    app.include_router(projects.router, tags=["projects"])
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(members.router, tags=["members"])
    app.include_router(issues.router, tags=["issues"])
    app.include_router(activities.router, tags=["activities"])
    app.include_router(views.router, tags=["views"])
    app.include_router(settings.router, tags=["settings"])
    app.include_router(backup.router, tags=["backup"])
    app.include_router(upload.router, tags=["upload"])
    app.include_router(health.router, tags=["health"])

    # 在所有路由之后挂载，DELETE /files/{filename} 优先匹配
    app.mount("/files", StaticFiles(directory=str(upload_dir), check_dir=False), name="files")

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
