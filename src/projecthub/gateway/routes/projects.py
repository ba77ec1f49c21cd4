"""项目路由

progress 与 spentBudget 由作业变更自动重算，更新请求中不接受这两个字段。
"""

from fastapi import APIRouter, Depends
from projecthub.core.models import CreateProjectDTO, Project, ProjectUpdate, Task

from ..deps import get_workspace_service
from ..errors import not_found
from ..services.workspace_service import WorkspaceService

router = APIRouter()


@router.get("/api/projects", response_model=list[Project])
async def list_projects(service: WorkspaceService = Depends(get_workspace_service)):
    return service.list_projects()


@router.get("/api/projects/{project_id}", response_model=Project)
async def get_project(
    project_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    project = service.get_project(project_id)
    if project is None:
        return not_found("project", project_id)
    return project


@router.get("/api/projects/{project_id}/tasks", response_model=list[Task])
async def list_project_tasks(
    project_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    if service.get_project(project_id) is None:
        return not_found("project", project_id)
    return service.list_tasks(project_id=project_id)


@router.post("/api/projects", response_model=Project, status_code=201)
async def create_project(
    data: CreateProjectDTO,
    service: WorkspaceService = Depends(get_workspace_service),
):
    return await service.create_project(data)


@router.patch("/api/projects/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    data: ProjectUpdate,
    service: WorkspaceService = Depends(get_workspace_service),
):
    project = await service.update_project(project_id, data)
    if project is None:
        return not_found("project", project_id)
    return project


@router.post("/api/projects/{project_id}/favorite", response_model=Project)
async def toggle_favorite(
    project_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    """切换收藏状态（不记录活动）"""
    project = await service.toggle_favorite(project_id)
    if project is None:
        return not_found("project", project_id)
    return project


@router.delete("/api/projects/{project_id}", response_model=Project)
async def delete_project(
    project_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    """删除项目；其下作业保留"""
    project = await service.delete_project(project_id)
    if project is None:
        return not_found("project", project_id)
    return project
