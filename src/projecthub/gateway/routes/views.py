"""派生视图路由 -- 看板、通知、报表、日历、时间线（只读）"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from projecthub.core.models import TaskStatus
from projecthub.core.views import (
    CalendarEvent,
    DashboardStats,
    Notification,
    ProjectTimeline,
    Report,
    Timeline,
)
from projecthub.core.views.calendar import ColorMode
from projecthub.core.views.timeline import TimelineMode

from ..deps import get_workspace_service
from ..errors import error_response, not_found
from ..services.workspace_service import WorkspaceService

router = APIRouter()


@router.get("/api/dashboard", response_model=DashboardStats)
async def dashboard(service: WorkspaceService = Depends(get_workspace_service)):
    return service.dashboard()


@router.get("/api/notifications", response_model=list[Notification])
async def notifications(service: WorkspaceService = Depends(get_workspace_service)):
    """按当前通知设置生成通知；通知总开关关闭时返回空列表"""
    return service.notifications()


@router.get("/api/reports", response_model=Report)
async def reports(service: WorkspaceService = Depends(get_workspace_service)):
    return service.report()


@router.get("/api/calendar", response_model=list[CalendarEvent])
async def calendar(
    project_id: str | None = Query(default=None, alias="projectId"),
    member_id: str | None = Query(default=None, alias="memberId"),
    color_mode: ColorMode = Query(default="status", alias="colorMode"),
    day: date | None = Query(
        default=None, alias="date", description="只返回覆盖该日期的事件"
    ),
    service: WorkspaceService = Depends(get_workspace_service),
):
    return service.calendar(project_id, member_id, color_mode, day)


@router.get("/api/timeline", response_model=Timeline)
async def timeline(
    mode: TimelineMode = Query(default="project", description="project 或 resource"),
    status: TaskStatus | None = Query(default=None),
    member_id: str | None = Query(default=None, alias="memberId"),
    search: str | None = Query(default=None),
    service: WorkspaceService = Depends(get_workspace_service),
):
    return service.timeline(mode, status, member_id, search)


@router.get("/api/projects/{project_id}/timeline", response_model=ProjectTimeline)
async def project_weeks(
    project_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    project = service.get_project(project_id)
    if project is None:
        return not_found("project", project_id)
    weeks = service.project_weeks(project)
    if weeks is None:
        return error_response(
            400, "PROJECT_DATES_MISSING", f"Project {project_id} has no start or end date"
        )
    return weeks
