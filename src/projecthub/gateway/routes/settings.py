"""设置路由

GET   /api/settings: 当前设置
PUT   /api/settings: 浅合并设置（camelCase 键）
PATCH /api/settings/item: 按点分路径更新单项，如 {"path": "notifications.deadlineDays", "value": 5}
POST  /api/settings/reset: 恢复默认
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from projecthub.core.models import AppSettings, CamelModel
from pydantic import ValidationError

from ..deps import get_workspace_service
from ..errors import error_response
from ..services.workspace_service import WorkspaceService

router = APIRouter()


class SettingItem(CamelModel):
    path: str
    value: Any


def _invalid(e: ValidationError):
    return error_response(422, "INVALID_SETTINGS", str(e))


@router.get("/api/settings", response_model=AppSettings)
async def get_settings(service: WorkspaceService = Depends(get_workspace_service)):
    return service.get_settings()


@router.put("/api/settings", response_model=AppSettings)
async def update_settings(
    values: dict[str, Any] = Body(...),
    service: WorkspaceService = Depends(get_workspace_service),
):
    try:
        return await service.update_settings(values)
    except ValidationError as e:
        return _invalid(e)


@router.patch("/api/settings/item", response_model=AppSettings)
async def update_setting(
    item: SettingItem,
    service: WorkspaceService = Depends(get_workspace_service),
):
    try:
        return await service.update_setting(item.path, item.value)
    except KeyError:
        return error_response(
            404, "SETTING_NOT_FOUND", f"Setting {item.path} does not exist"
        )
    except ValidationError as e:
        return _invalid(e)


@router.post("/api/settings/reset", response_model=AppSettings)
async def reset_settings(service: WorkspaceService = Depends(get_workspace_service)):
    return await service.reset_settings()
