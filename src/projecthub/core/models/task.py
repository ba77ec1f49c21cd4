"""Task Domain Model

Task 的 progress/budget 聚合由 TaskStore 在每次变更后重算并写回所属项目。
"""

from datetime import datetime

from pydantic import Field, field_validator

from .base import CamelModel, not_null
from .enums import TaskPriority, TaskStatus


def _dedupe(tags: list[str]) -> list[str]:
    return list(dict.fromkeys(tags))


class Task(CamelModel):
    """作业数据模型"""

    id: str = Field(description="唯一标识，task-<毫秒时间戳>")
    project_id: str = Field(description="所属项目 ID")
    title: str = Field(description="作业标题")
    description: str = Field(default="", description="作业描述")
    status: TaskStatus = Field(default=TaskStatus.TODO, description="当前状态")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="优先级")
    assignee: str | None = Field(default=None, description="负责成员 ID（弱引用）")
    start_date: datetime | None = None
    due_date: datetime | None = None
    estimated_hours: float | None = None
    actual_hours: float | None = None
    estimated_cost: float | None = None
    actual_cost: float | None = None
    tags: list[str] = Field(default_factory=list, description="标签（去重）")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value: list[str]) -> list[str]:
        return _dedupe(value)

    @property
    def spent_cost(self) -> float:
        """计入项目已用预算的金额：actual_cost，其次 estimated_cost，否则 0"""
        return self.actual_cost or self.estimated_cost or 0


class CreateTaskDTO(CamelModel):
    """作业创建请求"""

    project_id: str
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee: str | None = None
    start_date: datetime | None = None
    due_date: datetime | None = None
    estimated_hours: float | None = None
    actual_hours: float | None = None
    estimated_cost: float | None = None
    actual_cost: float | None = None


class TaskUpdate(CamelModel):
    """作业部分更新 -- 只合并显式设置的字段"""

    project_id: str | None = None
    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assignee: str | None = None
    start_date: datetime | None = None
    due_date: datetime | None = None
    estimated_hours: float | None = None
    actual_hours: float | None = None
    estimated_cost: float | None = None
    actual_cost: float | None = None
    tags: list[str] | None = None

    @field_validator("project_id", "title", "description", "status", "priority", "tags")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)

    def changes(self) -> dict:
        """返回显式设置的字段"""
        data = self.model_dump(exclude_unset=True)
        if data.get("tags") is not None:
            data["tags"] = _dedupe(data["tags"])
        return data
