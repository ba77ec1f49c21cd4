"""问题跟踪路由

GET    /api/issues: 问题列表，支持 projectId / assigneeId / status 筛选
POST   /api/issues: 创建问题
POST   /api/issues/bulk-update: 批量更新 {"ids": [...], "updates": {...}}
POST   /api/issues/bulk-delete: 批量删除 {"ids": [...]}
GET    /api/issues/{issue_id}: 问题详情
PATCH  /api/issues/{issue_id}: 部分更新
DELETE /api/issues/{issue_id}: 删除问题（连同评论和附件）
POST   /api/issues/{issue_id}/status: 状态流转 {"status": "RESOLVED"}
POST   /api/issues/{issue_id}/assign: 指派 {"assigneeId", "assigneeName"}

评论、附件、标签、行业类型的路由见下方。
"""

from fastapi import APIRouter, Depends, Query
from projecthub.core.models import (
    CamelModel,
    CreateAttachmentDTO,
    CreateCommentDTO,
    CreateIssueDTO,
    CreateLabelDTO,
    IndustryType,
    Issue,
    IssueAttachment,
    IssueComment,
    IssueLabel,
    IssueStatus,
    IssueUpdate,
    LabelUpdate,
)

from ..deps import get_workspace_service
from ..errors import not_found
from ..services.workspace_service import WorkspaceService

router = APIRouter()


class StatusChange(CamelModel):
    status: IssueStatus


class Assignment(CamelModel):
    assignee_id: str
    assignee_name: str


class BulkUpdate(CamelModel):
    ids: list[str]
    updates: IssueUpdate


class BulkDelete(CamelModel):
    ids: list[str]


class CommentEdit(CamelModel):
    content: str


class IndustryChoice(CamelModel):
    industry: IndustryType


# ============================================================
# 问题
# ============================================================


@router.get("/api/issues", response_model=list[Issue])
async def list_issues(
    project_id: str | None = Query(default=None, alias="projectId"),
    assignee_id: str | None = Query(default=None, alias="assigneeId"),
    status: IssueStatus | None = Query(default=None),
    service: WorkspaceService = Depends(get_workspace_service),
):
    return service.list_issues(project_id, assignee_id, status)


@router.post("/api/issues", response_model=Issue, status_code=201)
async def create_issue(
    data: CreateIssueDTO,
    service: WorkspaceService = Depends(get_workspace_service),
):
    return await service.create_issue(data)


@router.post("/api/issues/bulk-update", response_model=list[Issue])
async def bulk_update_issues(
    data: BulkUpdate,
    service: WorkspaceService = Depends(get_workspace_service),
):
    """只返回实际存在并被更新的问题"""
    return await service.bulk_update_issues(data.ids, data.updates)


@router.post("/api/issues/bulk-delete")
async def bulk_delete_issues(
    data: BulkDelete,
    service: WorkspaceService = Depends(get_workspace_service),
):
    deleted = await service.bulk_delete_issues(data.ids)
    return {"deleted": [issue.id for issue in deleted]}


@router.get("/api/issues/{issue_id}", response_model=Issue)
async def get_issue(
    issue_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    issue = service.get_issue(issue_id)
    if issue is None:
        return not_found("issue", issue_id)
    return issue


@router.patch("/api/issues/{issue_id}", response_model=Issue)
async def update_issue(
    issue_id: str,
    data: IssueUpdate,
    service: WorkspaceService = Depends(get_workspace_service),
):
    issue = await service.update_issue(issue_id, data)
    if issue is None:
        return not_found("issue", issue_id)
    return issue


@router.delete("/api/issues/{issue_id}", response_model=Issue)
async def delete_issue(
    issue_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    issue = await service.delete_issue(issue_id)
    if issue is None:
        return not_found("issue", issue_id)
    return issue


@router.post("/api/issues/{issue_id}/status", response_model=Issue)
async def change_issue_status(
    issue_id: str,
    data: StatusChange,
    service: WorkspaceService = Depends(get_workspace_service),
):
    """RESOLVED / CLOSED 会记录 resolvedAt / closedAt"""
    issue = await service.change_issue_status(issue_id, data.status)
    if issue is None:
        return not_found("issue", issue_id)
    return issue


@router.post("/api/issues/{issue_id}/assign", response_model=Issue)
async def assign_issue(
    issue_id: str,
    data: Assignment,
    service: WorkspaceService = Depends(get_workspace_service),
):
    issue = await service.assign_issue(issue_id, data.assignee_id, data.assignee_name)
    if issue is None:
        return not_found("issue", issue_id)
    return issue


# ============================================================
# 评论
# ============================================================


@router.get("/api/issues/{issue_id}/comments", response_model=list[IssueComment])
async def list_comments(
    issue_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    if service.get_issue(issue_id) is None:
        return not_found("issue", issue_id)
    return service.list_comments(issue_id)


@router.post(
    "/api/issues/{issue_id}/comments", response_model=IssueComment, status_code=201
)
async def add_comment(
    issue_id: str,
    data: CreateCommentDTO,
    service: WorkspaceService = Depends(get_workspace_service),
):
    comment = await service.add_comment(issue_id, data)
    if comment is None:
        return not_found("issue", issue_id)
    return comment


@router.patch("/api/comments/{comment_id}", response_model=IssueComment)
async def update_comment(
    comment_id: str,
    data: CommentEdit,
    service: WorkspaceService = Depends(get_workspace_service),
):
    comment = await service.update_comment(comment_id, data.content)
    if comment is None:
        return not_found("comment", comment_id)
    return comment


@router.delete("/api/comments/{comment_id}", status_code=204)
async def delete_comment(
    comment_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    if await service.delete_comment(comment_id) is None:
        return not_found("comment", comment_id)


# ============================================================
# 附件
# ============================================================


@router.get("/api/issues/{issue_id}/attachments", response_model=list[IssueAttachment])
async def list_attachments(
    issue_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    if service.get_issue(issue_id) is None:
        return not_found("issue", issue_id)
    return service.list_attachments(issue_id)


@router.post(
    "/api/issues/{issue_id}/attachments",
    response_model=IssueAttachment,
    status_code=201,
)
async def add_attachment(
    issue_id: str,
    data: CreateAttachmentDTO,
    service: WorkspaceService = Depends(get_workspace_service),
):
    """只登记元信息，文件本体通过 /upload 上传"""
    attachment = await service.add_attachment(issue_id, data)
    if attachment is None:
        return not_found("issue", issue_id)
    return attachment


@router.delete("/api/attachments/{attachment_id}", status_code=204)
async def delete_attachment(
    attachment_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    if await service.delete_attachment(attachment_id) is None:
        return not_found("attachment", attachment_id)


# ============================================================
# 标签与行业类型
# ============================================================


@router.get("/api/issue-labels", response_model=list[IssueLabel])
async def list_labels(service: WorkspaceService = Depends(get_workspace_service)):
    return service.list_labels()


@router.post("/api/issue-labels", response_model=IssueLabel, status_code=201)
async def add_label(
    data: CreateLabelDTO,
    service: WorkspaceService = Depends(get_workspace_service),
):
    return await service.add_label(data)


@router.patch("/api/issue-labels/{label_id}", response_model=IssueLabel)
async def update_label(
    label_id: str,
    data: LabelUpdate,
    service: WorkspaceService = Depends(get_workspace_service),
):
    label = await service.update_label(label_id, data)
    if label is None:
        return not_found("label", label_id)
    return label


@router.delete("/api/issue-labels/{label_id}", status_code=204)
async def delete_label(
    label_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
):
    """删除标签，并从所有问题中移除该标签"""
    if await service.delete_label(label_id) is None:
        return not_found("label", label_id)


@router.get("/api/issue-industry", response_model=IndustryChoice)
async def get_industry(service: WorkspaceService = Depends(get_workspace_service)):
    return IndustryChoice(industry=service.get_industry())


@router.put("/api/issue-industry", response_model=IndustryChoice)
async def set_industry(
    data: IndustryChoice,
    service: WorkspaceService = Depends(get_workspace_service),
):
    return IndustryChoice(industry=await service.set_industry(data.industry))
