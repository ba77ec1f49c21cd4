"""作业路由

GET    /api/tasks: 作业列表，支持 projectId / status 筛选
GET    /api/tasks/{task_id}: 作业详情
POST   /api/tasks: 创建作业
PATCH  /api/tasks/{task_id}: 部分更新
DELETE /api/tasks/{task_id}: 删除作业

不存在的 ID 返回 404，状态不变。
"""

from fastapi import APIRouter, Depends, Query
from projecthub.core.models import CreateTaskDTO, Task, TaskStatus, TaskUpdate

from ..deps import get_workspace_service
from ..errors import not_found
from ..services.workspace_service import WorkspaceService

router = APIRouter()


@router.get("/api/tasks", response_model=list[Task])
async def list_tasks(
    project_id: str | None = Query(default=None, alias="projectId", description="按项目筛选"),
    status: TaskStatus | None = Query(default=None, description="按状态筛选"),
    service: WorkspaceService = Depends(get_workspace_service),
):
    return service.list_tasks(project_id, status)


@router.get("/api/tasks/{task_id}", response_model=Task)
async def get_task(
    task_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    task = service.get_task(task_id)
    if task is None:
        return not_found("task", task_id)
    return task


@router.post("/api/tasks", response_model=Task, status_code=201)
async def create_task(
    data: CreateTaskDTO,
    service: WorkspaceService = Depends(get_workspace_service),
):
    """创建作业，所属项目的 progress / spentBudget 随之重算"""
    return await service.create_task(data)


@router.patch("/api/tasks/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    data: TaskUpdate,
    service: WorkspaceService = Depends(get_workspace_service),
):
    task = await service.update_task(task_id, data)
    if task is None:
        return not_found("task", task_id)
    return task


@router.delete("/api/tasks/{task_id}", response_model=Task)
async def delete_task(
    task_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    task = await service.delete_task(task_id)
    if task is None:
        return not_found("task", task_id)
    return task
