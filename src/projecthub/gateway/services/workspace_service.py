"""WorkspaceService -- 项目/作业/成员/设置的业务入口

每个写操作的流程：
1. 获取 StoreGroup 写锁
2. 以请求的操作者身份执行内存 Store 变更
3. 把受影响的存储键在同一事务中写入 SQLite

读操作直接读取内存状态，不加锁。
"""

from collections.abc import Callable, Iterable
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import Any, TypeVar

import structlog
from projecthub.core import backup
from projecthub.core.models import (
    Activity,
    Actor,
    AppSettings,
    CreateAttachmentDTO,
    CreateCommentDTO,
    CreateIssueDTO,
    CreateLabelDTO,
    CreateMemberDTO,
    CreateProjectDTO,
    CreateTaskDTO,
    IndustryType,
    Issue,
    IssueAttachment,
    IssueComment,
    IssueLabel,
    IssueStatus,
    IssueUpdate,
    LabelUpdate,
    Member,
    MemberUpdate,
    Project,
    ProjectUpdate,
    Task,
    TaskStatus,
    TaskUpdate,
    utc_now,
)
from projecthub.core.store import (
    ACTIVITY_STORAGE_KEY,
    ISSUE_STORAGE_KEY,
    MEMBER_STORAGE_KEY,
    PROJECT_STORAGE_KEY,
    SETTINGS_STORAGE_KEY,
    TASK_STORAGE_KEY,
    StoreGroup,
)
from projecthub.core.store.state import AppState
from projecthub.core.views import (
    CalendarEvent,
    DashboardStats,
    Notification,
    ProjectTimeline,
    Report,
    Timeline,
    build_calendar_events,
    build_dashboard,
    build_report,
    build_timeline,
    derive_notifications,
    events_for_date,
    project_timeline,
)
from projecthub.core.views.calendar import ColorMode
from projecthub.core.views.timeline import TimelineMode

log = structlog.get_logger()

T = TypeVar("T")

# 各类变更影响的存储键
_TASK_KEYS = (TASK_STORAGE_KEY, PROJECT_STORAGE_KEY, ACTIVITY_STORAGE_KEY)
_PROJECT_KEYS = (PROJECT_STORAGE_KEY, ACTIVITY_STORAGE_KEY)
_MEMBER_KEYS = (MEMBER_STORAGE_KEY, ACTIVITY_STORAGE_KEY)
_ISSUE_KEYS = (ISSUE_STORAGE_KEY,)


class WorkspaceService:
    """工作区业务服务"""

    def __init__(self, store_group: StoreGroup, actor: Actor | None = None) -> None:
        self._stores = store_group
        self._actor = actor

    @property
    def state(self) -> AppState:
        # 导入备份后 state 会被整体替换，每次都从 StoreGroup 取
        return self._stores.state

    @asynccontextmanager
    async def _acting(self):
        """在写锁内以当前操作者身份执行变更"""
        async with self._stores.write_lock:
            previous = self.state.current_actor
            if self._actor is not None:
                self.state.current_actor = self._actor
            try:
                yield self.state
            finally:
                self.state.current_actor = previous

    async def _mutate(
        self,
        keys: Iterable[str],
        operation: Callable[[AppState], T],
    ) -> T:
        """执行一次内存变更，有结果时持久化受影响的键"""
        async with self._acting() as state:
            result = operation(state)
            if result is not None:
                await self._stores.persist(keys)
            return result

    # ============================================================
    # 项目
    # ============================================================

    def list_projects(self) -> list[Project]:
        return self.state.project_store.projects

    def get_project(self, project_id: str) -> Project | None:
        return self.state.project_store.get_project_by_id(project_id)

    async def create_project(self, data: CreateProjectDTO) -> Project:
        project = await self._mutate(
            _PROJECT_KEYS, lambda s: s.project_store.add_project(data)
        )
        log.info("project_created", project_id=project.id, name=project.name)
        return project

    async def update_project(self, project_id: str, data: ProjectUpdate) -> Project | None:
        project = await self._mutate(
            _PROJECT_KEYS, lambda s: s.project_store.update_project(project_id, data)
        )
        if project is not None:
            log.info("project_updated", project_id=project_id, fields=sorted(data.changes()))
        return project

    async def delete_project(self, project_id: str) -> Project | None:
        project = await self._mutate(
            _PROJECT_KEYS, lambda s: s.project_store.delete_project(project_id)
        )
        if project is not None:
            log.info("project_deleted", project_id=project_id)
        return project

    async def toggle_favorite(self, project_id: str) -> Project | None:
        return await self._mutate(
            (PROJECT_STORAGE_KEY,),
            lambda s: s.project_store.toggle_favorite(project_id),
        )

    # ============================================================
    # 作业
    # ============================================================

    def list_tasks(
        self,
        project_id: str | None = None,
        status: TaskStatus | None = None,
    ) -> list[Task]:
        tasks = self.state.task_store.tasks
        if project_id is not None:
            tasks = [t for t in tasks if t.project_id == project_id]
        if status is not None:
            tasks = [t for t in tasks if t.status == status]
        return tasks

    def get_task(self, task_id: str) -> Task | None:
        return self.state.task_store.get_task(task_id)

    async def create_task(self, data: CreateTaskDTO) -> Task:
        task = await self._mutate(_TASK_KEYS, lambda s: s.task_store.add_task(data))
        log.info("task_created", task_id=task.id, project_id=task.project_id)
        return task

    async def update_task(self, task_id: str, data: TaskUpdate) -> Task | None:
        task = await self._mutate(
            _TASK_KEYS, lambda s: s.task_store.update_task(task_id, data)
        )
        if task is not None:
            log.info("task_updated", task_id=task_id, fields=sorted(data.changes()))
        return task

    async def delete_task(self, task_id: str) -> Task | None:
        task = await self._mutate(_TASK_KEYS, lambda s: s.task_store.delete_task(task_id))
        if task is not None:
            log.info("task_deleted", task_id=task_id, project_id=task.project_id)
        return task

    # ============================================================
    # 成员
    # ============================================================

    def list_members(self) -> list[Member]:
        return self.state.member_store.members

    def get_member(self, member_id: str) -> Member | None:
        return self.state.member_store.get_member_by_id(member_id)

    async def create_member(self, data: CreateMemberDTO) -> Member:
        member = await self._mutate(
            _MEMBER_KEYS, lambda s: s.member_store.add_member(data)
        )
        log.info("member_added", member_id=member.id)
        return member

    async def update_member(self, member_id: str, data: MemberUpdate) -> Member | None:
        return await self._mutate(
            _MEMBER_KEYS, lambda s: s.member_store.update_member(member_id, data)
        )

    async def delete_member(self, member_id: str) -> Member | None:
        member = await self._mutate(
            _MEMBER_KEYS, lambda s: s.member_store.delete_member(member_id)
        )
        if member is not None:
            log.info("member_removed", member_id=member_id)
        return member

    # ============================================================
    # 问题跟踪
    # ============================================================

    def list_issues(
        self,
        project_id: str | None = None,
        assignee_id: str | None = None,
        status: IssueStatus | None = None,
    ) -> list[Issue]:
        issues = self.state.issue_store.issues
        if project_id is not None:
            issues = [i for i in issues if i.project_id == project_id]
        if assignee_id is not None:
            issues = [i for i in issues if i.assignee_id == assignee_id]
        if status is not None:
            issues = [i for i in issues if i.status == status]
        return issues

    def get_issue(self, issue_id: str) -> Issue | None:
        return self.state.issue_store.get_issue(issue_id)

    async def create_issue(self, data: CreateIssueDTO) -> Issue:
        issue = await self._mutate(_ISSUE_KEYS, lambda s: s.issue_store.add_issue(data))
        log.info("issue_created", issue_id=issue.id, project_id=issue.project_id)
        return issue

    async def update_issue(self, issue_id: str, data: IssueUpdate) -> Issue | None:
        return await self._mutate(
            _ISSUE_KEYS, lambda s: s.issue_store.update_issue(issue_id, data)
        )

    async def change_issue_status(self, issue_id: str, status: IssueStatus) -> Issue | None:
        issue = await self._mutate(
            _ISSUE_KEYS, lambda s: s.issue_store.change_status(issue_id, status)
        )
        if issue is not None:
            log.info("issue_status_changed", issue_id=issue_id, status=status.value)
        return issue

    async def assign_issue(
        self, issue_id: str, assignee_id: str, assignee_name: str
    ) -> Issue | None:
        return await self._mutate(
            _ISSUE_KEYS,
            lambda s: s.issue_store.assign_issue(issue_id, assignee_id, assignee_name),
        )

    async def delete_issue(self, issue_id: str) -> Issue | None:
        issue = await self._mutate(
            _ISSUE_KEYS, lambda s: s.issue_store.delete_issue(issue_id)
        )
        if issue is not None:
            log.info("issue_deleted", issue_id=issue_id)
        return issue

    async def bulk_update_issues(self, issue_ids: list[str], data: IssueUpdate) -> list[Issue]:
        issues = await self._mutate(
            _ISSUE_KEYS, lambda s: s.issue_store.bulk_update_issues(issue_ids, data)
        )
        log.info("issues_bulk_updated", count=len(issues), fields=sorted(data.changes()))
        return issues

    async def bulk_delete_issues(self, issue_ids: list[str]) -> list[Issue]:
        issues = await self._mutate(
            _ISSUE_KEYS, lambda s: s.issue_store.bulk_delete_issues(issue_ids)
        )
        log.info("issues_bulk_deleted", count=len(issues))
        return issues

    def list_comments(self, issue_id: str) -> list[IssueComment]:
        return self.state.issue_store.get_issue_comments(issue_id)

    async def add_comment(self, issue_id: str, data: CreateCommentDTO) -> IssueComment | None:
        return await self._mutate(
            _ISSUE_KEYS, lambda s: s.issue_store.add_comment(issue_id, data)
        )

    async def update_comment(self, comment_id: str, content: str) -> IssueComment | None:
        return await self._mutate(
            _ISSUE_KEYS, lambda s: s.issue_store.update_comment(comment_id, content)
        )

    async def delete_comment(self, comment_id: str) -> IssueComment | None:
        return await self._mutate(
            _ISSUE_KEYS, lambda s: s.issue_store.delete_comment(comment_id)
        )

    def list_attachments(self, issue_id: str) -> list[IssueAttachment]:
        return self.state.issue_store.get_issue_attachments(issue_id)

    async def add_attachment(
        self, issue_id: str, data: CreateAttachmentDTO
    ) -> IssueAttachment | None:
        return await self._mutate(
            _ISSUE_KEYS, lambda s: s.issue_store.add_attachment(issue_id, data)
        )

    async def delete_attachment(self, attachment_id: str) -> IssueAttachment | None:
        return await self._mutate(
            _ISSUE_KEYS, lambda s: s.issue_store.delete_attachment(attachment_id)
        )

    def list_labels(self) -> list[IssueLabel]:
        return self.state.issue_store.labels

    async def add_label(self, data: CreateLabelDTO) -> IssueLabel:
        return await self._mutate(_ISSUE_KEYS, lambda s: s.issue_store.add_label(data))

    async def update_label(self, label_id: str, data: LabelUpdate) -> IssueLabel | None:
        return await self._mutate(
            _ISSUE_KEYS, lambda s: s.issue_store.update_label(label_id, data)
        )

    async def delete_label(self, label_id: str) -> IssueLabel | None:
        return await self._mutate(
            _ISSUE_KEYS, lambda s: s.issue_store.delete_label(label_id)
        )

    def get_industry(self) -> IndustryType:
        return self.state.issue_store.industry

    async def set_industry(self, industry: IndustryType) -> IndustryType:
        return await self._mutate(
            _ISSUE_KEYS, lambda s: s.issue_store.set_industry(industry)
        )

    # ============================================================
    # 活动日志
    # ============================================================

    def recent_activities(self, limit: int) -> list[Activity]:
        return self.state.activity_store.get_recent_activities(limit)

    def project_activities(self, project_id: str) -> list[Activity]:
        return self.state.activity_store.get_activities_by_project(project_id)

    def member_activities(self, member_id: str) -> list[Activity]:
        return self.state.activity_store.get_activities_by_member(member_id)

    async def clear_activities(self) -> None:
        async with self._acting() as state:
            state.activity_store.clear_activities()
            await self._stores.persist((ACTIVITY_STORAGE_KEY,))
        log.info("activities_cleared")

    # ============================================================
    # 设置
    # ============================================================

    def get_settings(self) -> AppSettings:
        return self.state.settings

    async def update_settings(self, values: dict[str, Any]) -> AppSettings:
        """浅合并设置项（camelCase 键）

        Raises:
            pydantic.ValidationError: 合并后的设置不合法，此时不做任何修改
        """
        merged = AppSettings.model_validate(
            {**self.state.settings.to_storage(), **values}
        )
        return await self._replace_settings(merged)

    async def update_setting(self, path: str, value: Any) -> AppSettings:
        """按点分路径更新单个设置项

        Raises:
            KeyError: 路径不存在
            pydantic.ValidationError: 值不合法
        """
        return await self._replace_settings(self.state.settings.with_path(path, value))

    async def reset_settings(self) -> AppSettings:
        return await self._replace_settings(AppSettings())

    async def _replace_settings(self, settings: AppSettings) -> AppSettings:
        async with self._stores.write_lock:
            self.state.settings = settings
            await self._stores.persist((SETTINGS_STORAGE_KEY,))
        log.info("settings_saved")
        return settings

    # ============================================================
    # 备份
    # ============================================================

    async def export_backup(self) -> dict[str, Any]:
        return await backup.export_backup(self._stores.storage)

    async def import_backup(self, text: str | bytes) -> list[str]:
        """导入备份并重新加载内存状态

        Raises:
            BackupFormatError: 文档无法解析，不写入任何键
        """
        async with self._stores.write_lock:
            keys = await backup.import_backup(self._stores.conn, self._stores.storage, text)
            await self._stores.reload()
        return keys

    async def clear_all_data(self) -> None:
        async with self._stores.write_lock:
            await backup.clear_all_data(self._stores.conn, self._stores.storage)
            await self._stores.reload()

    # ============================================================
    # 派生视图
    # ============================================================

    def dashboard(self, now: datetime | None = None) -> DashboardStats:
        return build_dashboard(
            self.state.project_store.projects,
            self.state.task_store.tasks,
            self.state.member_store.members,
            now or utc_now(),
        )

    def notifications(self, now: datetime | None = None) -> list[Notification]:
        return derive_notifications(
            self.state.task_store.tasks,
            self.state.project_store.projects,
            self.state.settings.notifications,
            now or utc_now(),
        )

    def report(self) -> Report:
        return build_report(
            self.state.project_store.projects,
            self.state.task_store.tasks,
            self.state.member_store.members,
        )

    def calendar(
        self,
        project_id: str | None = None,
        member_id: str | None = None,
        color_mode: ColorMode = "status",
        day: date | None = None,
    ) -> list[CalendarEvent]:
        events = build_calendar_events(
            self.state.project_store.projects,
            self.state.task_store.tasks,
            project_filter=project_id,
            member_filter=member_id,
            color_mode=color_mode,
            primary_color=self.state.settings.primary_color,
        )
        return events_for_date(events, day) if day is not None else events

    def timeline(
        self,
        mode: TimelineMode = "project",
        status: TaskStatus | None = None,
        member_id: str | None = None,
        search: str | None = None,
        now: datetime | None = None,
    ) -> Timeline:
        return build_timeline(
            self.state.project_store.projects,
            self.state.task_store.tasks,
            self.state.member_store.members,
            now or utc_now(),
            mode=mode,
            status=status,
            member_id=member_id,
            search=search,
        )

    def project_weeks(self, project: Project) -> ProjectTimeline | None:
        """项目起止月的周块；项目缺少起止日期时返回 None"""
        if project.start_date is None or project.end_date is None:
            return None
        return project_timeline(project.start_date, project.end_date)
