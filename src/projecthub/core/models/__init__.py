"""ProjectHub Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .activity import Activity, ActivityDraft
from .base import CamelModel, new_activity_id, new_entity_id, utc_now
from .enums import (
    HIGH_PRIORITIES,
    PROGRESS_WEIGHTS,
    STATUS_LABELS,
    ActivityType,
    MemberRole,
    MemberStatus,
    Methodology,
    ProjectPriority,
    ProjectStatus,
    TaskPriority,
    TaskStatus,
    status_label,
)
from .issue import (
    DEFAULT_LABELS,
    CreateAttachmentDTO,
    CreateCommentDTO,
    CreateIssueDTO,
    CreateLabelDTO,
    IndustryType,
    Issue,
    IssueAttachment,
    IssueComment,
    IssueLabel,
    IssuePriority,
    IssueSeverity,
    IssueSnapshot,
    IssueStatus,
    IssueType,
    IssueUpdate,
    LabelUpdate,
)
from .member import Actor, CreateMemberDTO, Member, MemberUpdate
from .project import CreateProjectDTO, Project, ProjectUpdate
from .settings import AppSettings, NotificationSettings
from .task import CreateTaskDTO, Task, TaskUpdate

__all__ = [
    # 枚举
    "TaskStatus",
    "TaskPriority",
    "ProjectStatus",
    "ProjectPriority",
    "Methodology",
    "MemberRole",
    "MemberStatus",
    "ActivityType",
    "STATUS_LABELS",
    "PROGRESS_WEIGHTS",
    "HIGH_PRIORITIES",
    "status_label",
    # 基类与 ID
    "CamelModel",
    "new_entity_id",
    "new_activity_id",
    "utc_now",
    # Task
    "Task",
    "CreateTaskDTO",
    "TaskUpdate",
    # Project
    "Project",
    "CreateProjectDTO",
    "ProjectUpdate",
    # Member
    "Member",
    "CreateMemberDTO",
    "MemberUpdate",
    "Actor",
    # Issue
    "IndustryType",
    "IssueType",
    "IssueStatus",
    "IssuePriority",
    "IssueSeverity",
    "Issue",
    "CreateIssueDTO",
    "IssueUpdate",
    "IssueComment",
    "CreateCommentDTO",
    "IssueAttachment",
    "CreateAttachmentDTO",
    "IssueLabel",
    "CreateLabelDTO",
    "LabelUpdate",
    "IssueSnapshot",
    "DEFAULT_LABELS",
    # Activity
    "Activity",
    "ActivityDraft",
    # Settings
    "AppSettings",
    "NotificationSettings",
]
