"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store 实例与操作者

Store 实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from pathlib import Path
from urllib.parse import unquote

from fastapi import Depends, Request
from projecthub.core.models import Actor
from projecthub.core.store import StoreGroup

from .services.workspace_service import WorkspaceService


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_upload_dir(request: Request) -> Path:
    """从 app.state 获取上传目录"""
    return request.app.state.upload_dir


def get_actor(request: Request) -> Actor | None:
    """从请求头读取当前操作者

    X-User-Id 必填才视为已登录；X-User-Name 可以是 URL 编码的 UTF-8 文本。
    """
    user_id = request.headers.get("X-User-Id")
    if not user_id:
        return None
    user_name = unquote(request.headers.get("X-User-Name", "")) or user_id
    return Actor(id=user_id, name=user_name)


def get_workspace_service(
    store_group: StoreGroup = Depends(get_store_group),
    actor: Actor | None = Depends(get_actor),
) -> WorkspaceService:
    return WorkspaceService(store_group, actor=actor)
