"""成员路由 -- 删除成员不会清理作业上的 assignee"""

from fastapi import APIRouter, Depends
from projecthub.core.models import CreateMemberDTO, Member, MemberUpdate

from ..deps import get_workspace_service
from ..errors import not_found
from ..services.workspace_service import WorkspaceService

router = APIRouter()


@router.get("/api/members", response_model=list[Member])
async def list_members(service: WorkspaceService = Depends(get_workspace_service)):
    return service.list_members()


@router.get("/api/members/{member_id}", response_model=Member)
async def get_member(
    member_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    member = service.get_member(member_id)
    if member is None:
        return not_found("member", member_id)
    return member


@router.post("/api/members", response_model=Member, status_code=201)
async def create_member(
    data: CreateMemberDTO,
    service: WorkspaceService = Depends(get_workspace_service),
):
    return await service.create_member(data)


@router.patch("/api/members/{member_id}", response_model=Member)
async def update_member(
    member_id: str,
    data: MemberUpdate,
    service: WorkspaceService = Depends(get_workspace_service),
):
    member = await service.update_member(member_id, data)
    if member is None:
        return not_found("member", member_id)
    return member


@router.delete("/api/members/{member_id}", response_model=Member)
async def delete_member(
    member_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    member = await service.delete_member(member_id)
    if member is None:
        return not_found("member", member_id)
    return member
