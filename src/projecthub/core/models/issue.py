"""Issue Domain Model

问题跟踪：问题本身、评论、附件元信息、标签，以及行业类型。
五部分状态一起保存在 issue-storage 键下（见 IssueSnapshot）。
"""

from datetime import datetime
from enum import StrEnum

from pydantic import Field, field_validator

from .base import CamelModel, not_null


class IndustryType(StrEnum):
    """行业类型"""

    SOFTWARE = "SOFTWARE"
    MANUFACTURING = "MANUFACTURING"
    SERVICE = "SERVICE"
    GENERAL = "GENERAL"


class IssueType(StrEnum):
    """问题类型"""

    BUG = "BUG"
    FEATURE = "FEATURE"
    IMPROVEMENT = "IMPROVEMENT"
    QUESTION = "QUESTION"
    TASK = "TASK"

    # 制造业
    DEFECT = "DEFECT"
    EQUIPMENT = "EQUIPMENT"
    SAFETY = "SAFETY"
    QUALITY = "QUALITY"


class IssueStatus(StrEnum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"
    REOPENED = "REOPENED"


class IssuePriority(StrEnum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class IssueSeverity(StrEnum):
    """严重程度（缺陷类问题使用）"""

    BLOCKER = "BLOCKER"
    MAJOR = "MAJOR"
    MINOR = "MINOR"
    TRIVIAL = "TRIVIAL"


class Issue(CamelModel):
    """问题数据模型"""

    id: str = Field(description="唯一标识，issue-<毫秒时间戳>")
    project_id: str
    task_id: str | None = None
    title: str
    description: str = ""
    type: IssueType
    status: IssueStatus = IssueStatus.OPEN
    priority: IssuePriority = IssuePriority.MEDIUM
    severity: IssueSeverity | None = None
    reporter_id: str
    reporter_name: str
    assignee_id: str | None = None
    assignee_name: str | None = None
    labels: list[str] = Field(default_factory=list, description="标签 ID 列表")
    created_at: datetime
    updated_at: datetime
    resolved_at: datetime | None = None
    closed_at: datetime | None = None
    due_date: datetime | None = None
    parent_issue_id: str | None = None
    related_issue_ids: list[str] | None = None

    # 软件类问题
    environment: str | None = None
    steps_to_reproduce: str | None = None
    expected_result: str | None = None
    actual_result: str | None = None

    # 产线 ID、设备编号、批次号等自由键值
    metadata: dict[str, str] | None = None


class CreateIssueDTO(CamelModel):
    """问题创建请求"""

    project_id: str
    task_id: str | None = None
    title: str
    description: str = ""
    type: IssueType
    status: IssueStatus = IssueStatus.OPEN
    priority: IssuePriority = IssuePriority.MEDIUM
    severity: IssueSeverity | None = None
    reporter_id: str
    reporter_name: str
    assignee_id: str | None = None
    assignee_name: str | None = None
    labels: list[str] = Field(default_factory=list)
    due_date: datetime | None = None
    parent_issue_id: str | None = None
    related_issue_ids: list[str] | None = None
    environment: str | None = None
    steps_to_reproduce: str | None = None
    expected_result: str | None = None
    actual_result: str | None = None
    metadata: dict[str, str] | None = None


class IssueUpdate(CamelModel):
    """问题部分更新；单条与批量更新共用"""

    project_id: str | None = None
    task_id: str | None = None
    title: str | None = None
    description: str | None = None
    type: IssueType | None = None
    status: IssueStatus | None = None
    priority: IssuePriority | None = None
    severity: IssueSeverity | None = None
    assignee_id: str | None = None
    assignee_name: str | None = None
    labels: list[str] | None = None
    due_date: datetime | None = None
    parent_issue_id: str | None = None
    related_issue_ids: list[str] | None = None
    environment: str | None = None
    steps_to_reproduce: str | None = None
    expected_result: str | None = None
    actual_result: str | None = None
    metadata: dict[str, str] | None = None

    @field_validator(
        "project_id", "title", "description", "type", "status", "priority", "labels"
    )
    @classmethod
    def reject_null(cls, value):
        return not_null(value)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class IssueComment(CamelModel):
    id: str
    issue_id: str
    author_id: str
    author_name: str
    content: str
    created_at: datetime
    updated_at: datetime | None = None


class CreateCommentDTO(CamelModel):
    author_id: str
    author_name: str
    content: str


class IssueAttachment(CamelModel):
    """附件元信息（文件本体走上传接口）"""

    id: str
    issue_id: str
    file_name: str
    file_size: int
    file_type: str
    uploaded_by: str
    uploaded_at: datetime


class CreateAttachmentDTO(CamelModel):
    file_name: str
    file_size: int
    file_type: str
    uploaded_by: str


class IssueLabel(CamelModel):
    id: str
    name: str
    color: str
    description: str | None = None


class CreateLabelDTO(CamelModel):
    name: str
    color: str
    description: str | None = None


class LabelUpdate(CamelModel):
    name: str | None = None
    color: str | None = None
    description: str | None = None

    @field_validator("name", "color")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


# 首次使用时提供的制造业标签
DEFAULT_LABELS: tuple[IssueLabel, ...] = (
    IssueLabel(id="label-1", name="생산라인", color="#722ed1", description="생산라인 관련"),
    IssueLabel(id="label-2", name="품질관리", color="#f5222d", description="품질관리 관련"),
    IssueLabel(id="label-3", name="설비", color="#fa8c16", description="설비/장비 관련"),
    IssueLabel(id="label-4", name="자재", color="#13c2c2", description="자재/원자재 관련"),
    IssueLabel(id="label-5", name="안전", color="#ff4d4f", description="안전사고 관련"),
    IssueLabel(id="label-6", name="납기", color="#1890ff", description="납기/일정 관련"),
    IssueLabel(id="label-7", name="공정개선", color="#52c41a", description="공정개선 관련"),
    IssueLabel(id="label-8", name="고객클레임", color="#eb2f96", description="고객 클레임 관련"),
    IssueLabel(id="label-9", name="물류", color="#faad14", description="물류/출하 관련"),
    IssueLabel(id="label-10", name="금형", color="#8c8c8c", description="금형/치공구 관련"),
)


class IssueSnapshot(CamelModel):
    """issue-storage 键下保存的完整状态；缺失的部分取默认值"""

    industry: IndustryType = IndustryType.SOFTWARE
    issues: list[Issue] = Field(default_factory=list)
    comments: list[IssueComment] = Field(default_factory=list)
    attachments: list[IssueAttachment] = Field(default_factory=list)
    labels: list[IssueLabel] = Field(default_factory=lambda: list(DEFAULT_LABELS))
