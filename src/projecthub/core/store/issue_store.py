"""IssueStore 内存实现

问题、评论、附件、标签四个集合加上行业类型，作为一个整体持久化。
- 删除问题时级联删除它的评论和附件
- 删除标签时从所有问题的 labels 中移除该标签 ID
- 状态改为 RESOLVED / CLOSED 时记录 resolved_at / closed_at

问题变更不写活动日志。目标 ID 不存在时返回 None，不抛异常。
"""

from collections.abc import Iterable

import structlog

from ..models.base import new_entity_id, utc_now
from ..models.issue import (
    CreateAttachmentDTO,
    CreateCommentDTO,
    CreateIssueDTO,
    CreateLabelDTO,
    IndustryType,
    Issue,
    IssueAttachment,
    IssueComment,
    IssueLabel,
    IssueSnapshot,
    IssueStatus,
    IssueUpdate,
    LabelUpdate,
)

log = structlog.get_logger()


class IssueStore:
    """问题跟踪存储"""

    def __init__(self, snapshot: IssueSnapshot | None = None) -> None:
        snapshot = snapshot or IssueSnapshot()
        self._industry = snapshot.industry
        self._issues: list[Issue] = list(snapshot.issues)
        self._comments: list[IssueComment] = list(snapshot.comments)
        self._attachments: list[IssueAttachment] = list(snapshot.attachments)
        self._labels: list[IssueLabel] = list(snapshot.labels)

    def snapshot(self) -> IssueSnapshot:
        return IssueSnapshot(
            industry=self._industry,
            issues=self._issues,
            comments=self._comments,
            attachments=self._attachments,
            labels=self._labels,
        )

    @property
    def industry(self) -> IndustryType:
        return self._industry

    def set_industry(self, industry: IndustryType) -> IndustryType:
        self._industry = industry
        return industry

    # ============================================================
    # 问题
    # ============================================================

    @property
    def issues(self) -> list[Issue]:
        return list(self._issues)

    def get_issue(self, issue_id: str) -> Issue | None:
        return next((i for i in self._issues if i.id == issue_id), None)

    def get_issues_by_project(self, project_id: str) -> list[Issue]:
        return [i for i in self._issues if i.project_id == project_id]

    def get_issues_by_assignee(self, assignee_id: str) -> list[Issue]:
        return [i for i in self._issues if i.assignee_id == assignee_id]

    def add_issue(self, data: CreateIssueDTO) -> Issue:
        now = utc_now()
        issue = Issue(
            **data.model_dump(),
            id=new_entity_id("issue"),
            created_at=now,
            updated_at=now,
        )
        self._issues.append(issue)
        return issue

    def update_issue(self, issue_id: str, data: IssueUpdate) -> Issue | None:
        """合并更新（不处理 resolved_at / closed_at，状态流转用 change_status）

        Raises:
            pydantic.ValidationError: 合并后的问题不合法，此时不做任何修改
        """
        index = self._index_of(issue_id)
        if index is None:
            log.debug("issue_update_skipped", issue_id=issue_id)
            return None
        issue = self._issues[index]
        updated = Issue.model_validate(
            {**issue.model_dump(), **data.changes(), "updated_at": utc_now()}
        )
        self._issues[index] = updated
        return updated

    def change_status(self, issue_id: str, status: IssueStatus) -> Issue | None:
        """改变状态；RESOLVED / CLOSED 每次都刷新对应时间戳"""
        index = self._index_of(issue_id)
        if index is None:
            return None
        now = utc_now()
        changes: dict = {"status": status, "updated_at": now}
        if status == IssueStatus.RESOLVED:
            changes["resolved_at"] = now
        elif status == IssueStatus.CLOSED:
            changes["closed_at"] = now
        updated = self._issues[index].model_copy(update=changes)
        self._issues[index] = updated
        return updated

    def assign_issue(
        self, issue_id: str, assignee_id: str, assignee_name: str
    ) -> Issue | None:
        index = self._index_of(issue_id)
        if index is None:
            return None
        updated = self._issues[index].model_copy(
            update={
                "assignee_id": assignee_id,
                "assignee_name": assignee_name,
                "updated_at": utc_now(),
            }
        )
        self._issues[index] = updated
        return updated

    def bulk_update_issues(self, issue_ids: Iterable[str], data: IssueUpdate) -> list[Issue]:
        """批量合并更新，返回被更新的问题

        与 change_status 不同，resolved_at / closed_at 只在原来为空时记录。
        """
        targets = set(issue_ids)
        changes = data.changes()
        now = utc_now()
        status = changes.get("status")

        # 全部校验通过后再替换列表
        merged: dict[int, Issue] = {}
        for index, issue in enumerate(self._issues):
            if issue.id not in targets:
                continue
            fields = {**issue.model_dump(), **changes, "updated_at": now}
            if status == IssueStatus.RESOLVED and issue.resolved_at is None:
                fields["resolved_at"] = now
            if status == IssueStatus.CLOSED and issue.closed_at is None:
                fields["closed_at"] = now
            merged[index] = Issue.model_validate(fields)

        for index, issue in merged.items():
            self._issues[index] = issue
        return list(merged.values())

    def delete_issue(self, issue_id: str) -> Issue | None:
        """删除问题及其评论和附件"""
        issue = self.get_issue(issue_id)
        if issue is None:
            return None
        self._remove_issues({issue_id})
        return issue

    def bulk_delete_issues(self, issue_ids: Iterable[str]) -> list[Issue]:
        targets = set(issue_ids)
        removed = [i for i in self._issues if i.id in targets]
        self._remove_issues(targets)
        return removed

    def _remove_issues(self, issue_ids: set[str]) -> None:
        self._issues = [i for i in self._issues if i.id not in issue_ids]
        self._comments = [c for c in self._comments if c.issue_id not in issue_ids]
        self._attachments = [a for a in self._attachments if a.issue_id not in issue_ids]

    def _index_of(self, issue_id: str) -> int | None:
        return next((n for n, i in enumerate(self._issues) if i.id == issue_id), None)

    # ============================================================
    # 评论
    # ============================================================

    @property
    def comments(self) -> list[IssueComment]:
        return list(self._comments)

    def get_issue_comments(self, issue_id: str) -> list[IssueComment]:
        """问题的评论，按创建时间升序"""
        return sorted(
            (c for c in self._comments if c.issue_id == issue_id),
            key=lambda c: c.created_at,
        )

    def add_comment(self, issue_id: str, data: CreateCommentDTO) -> IssueComment | None:
        if self.get_issue(issue_id) is None:
            return None
        comment = IssueComment(
            **data.model_dump(),
            id=new_entity_id("comment"),
            issue_id=issue_id,
            created_at=utc_now(),
        )
        self._comments.append(comment)
        return comment

    def update_comment(self, comment_id: str, content: str) -> IssueComment | None:
        for n, comment in enumerate(self._comments):
            if comment.id == comment_id:
                updated = comment.model_copy(
                    update={"content": content, "updated_at": utc_now()}
                )
                self._comments[n] = updated
                return updated
        return None

    def delete_comment(self, comment_id: str) -> IssueComment | None:
        comment = next((c for c in self._comments if c.id == comment_id), None)
        if comment is not None:
            self._comments = [c for c in self._comments if c.id != comment_id]
        return comment

    # ============================================================
    # 附件
    # ============================================================

    @property
    def attachments(self) -> list[IssueAttachment]:
        return list(self._attachments)

    def get_issue_attachments(self, issue_id: str) -> list[IssueAttachment]:
        return [a for a in self._attachments if a.issue_id == issue_id]

    def add_attachment(
        self, issue_id: str, data: CreateAttachmentDTO
    ) -> IssueAttachment | None:
        if self.get_issue(issue_id) is None:
            return None
        attachment = IssueAttachment(
            **data.model_dump(),
            id=new_entity_id("attachment"),
            issue_id=issue_id,
            uploaded_at=utc_now(),
        )
        self._attachments.append(attachment)
        return attachment

    def delete_attachment(self, attachment_id: str) -> IssueAttachment | None:
        attachment = next((a for a in self._attachments if a.id == attachment_id), None)
        if attachment is not None:
            self._attachments = [a for a in self._attachments if a.id != attachment_id]
        return attachment

    # ============================================================
    # 标签
    # ============================================================

    @property
    def labels(self) -> list[IssueLabel]:
        return list(self._labels)

    def add_label(self, data: CreateLabelDTO) -> IssueLabel:
        label = IssueLabel(**data.model_dump(), id=new_entity_id("label"))
        self._labels.append(label)
        return label

    def update_label(self, label_id: str, data: LabelUpdate) -> IssueLabel | None:
        for n, label in enumerate(self._labels):
            if label.id == label_id:
                updated = IssueLabel.model_validate({**label.model_dump(), **data.changes()})
                self._labels[n] = updated
                return updated
        return None

    def delete_label(self, label_id: str) -> IssueLabel | None:
        """删除标签，并从引用它的问题中移除"""
        label = next((lb for lb in self._labels if lb.id == label_id), None)
        if label is None:
            return None
        self._labels = [lb for lb in self._labels if lb.id != label_id]
        self._issues = [
            i.model_copy(update={"labels": [x for x in i.labels if x != label_id]})
            if label_id in i.labels
            else i
            for i in self._issues
        ]
        return label
