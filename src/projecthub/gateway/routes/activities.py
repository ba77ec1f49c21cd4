"""活动日志路由

GET    /api/activities?limit=50: 最近的活动（新到旧）
GET    /api/projects/{project_id}/activities: 项目相关活动
GET    /api/members/{member_id}/activities: 成员作为操作者或对象的活动
DELETE /api/activities: 清空活动日志

每条活动附带渲染好的 message / icon / color。
"""

from fastapi import APIRouter, Depends, Query
from projecthub.core.activity_format import (
    get_activity_color,
    get_activity_icon,
    get_activity_message,
)
from projecthub.core.config import RECENT_ACTIVITY_DEFAULT_LIMIT
from projecthub.core.models import Activity

from ..deps import get_workspace_service
from ..services.workspace_service import WorkspaceService

router = APIRouter()


class ActivityEntry(Activity):
    """带展示信息的活动记录"""

    message: str
    icon: str
    color: str


def render(activities: list[Activity]) -> list[ActivityEntry]:
    return [
        ActivityEntry(
            **a.model_dump(),
            message=get_activity_message(a),
            icon=get_activity_icon(a.type),
            color=get_activity_color(a.type),
        )
        for a in activities
    ]


@router.get("/api/activities", response_model=list[ActivityEntry])
async def recent_activities(
    limit: int = Query(default=RECENT_ACTIVITY_DEFAULT_LIMIT, ge=0, description="返回条数"),
    service: WorkspaceService = Depends(get_workspace_service),
):
    return render(service.recent_activities(limit))


@router.get("/api/projects/{project_id}/activities", response_model=list[ActivityEntry])
async def project_activities(
    project_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    return render(service.project_activities(project_id))


@router.get("/api/members/{member_id}/activities", response_model=list[ActivityEntry])
async def member_activities(
    member_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    return render(service.member_activities(member_id))


@router.delete("/api/activities", status_code=204)
async def clear_activities(service: WorkspaceService = Depends(get_workspace_service)):
    await service.clear_activities()
