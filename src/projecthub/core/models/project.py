"""Project Domain Model

progress 与 spent_budget 是聚合字段，只由 TaskStore 的重算步骤写入。
"""

from datetime import datetime

from pydantic import Field, field_validator

from .base import CamelModel, not_null
from .enums import Methodology, ProjectPriority, ProjectStatus


class Project(CamelModel):
    """项目数据模型"""

    id: str = Field(description="唯一标识，project-<毫秒时间戳>")
    name: str
    description: str = ""
    status: ProjectStatus = ProjectStatus.PLANNING
    priority: ProjectPriority = ProjectPriority.MEDIUM
    methodology: Methodology | None = None
    team_size: int = 0
    start_date: datetime | None = None
    end_date: datetime | None = None
    progress: float = Field(default=0, description="进度 0-100（聚合字段）")
    budget: float = Field(default=0, description="总预算")
    spent_budget: float = Field(default=0, description="已用预算（聚合字段）")
    team_members: list[str] = Field(default_factory=list, description="成员 ID 列表")
    created_at: datetime
    updated_at: datetime
    is_favorite: bool = False


class CreateProjectDTO(CamelModel):
    """项目创建请求"""

    name: str
    description: str = ""
    status: ProjectStatus = ProjectStatus.PLANNING
    priority: ProjectPriority = ProjectPriority.MEDIUM
    methodology: Methodology | None = None
    team_size: int = 0
    team_members: list[str] = Field(default_factory=list)
    start_date: datetime | None = None
    end_date: datetime | None = None
    budget: float = 0


class ProjectUpdate(CamelModel):
    """项目部分更新

    不包含 progress / spent_budget，这两个字段只能由作业重算写入。
    """

    name: str | None = None
    description: str | None = None
    status: ProjectStatus | None = None
    priority: ProjectPriority | None = None
    methodology: Methodology | None = None
    team_size: int | None = None
    team_members: list[str] | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    budget: float | None = None
    is_favorite: bool | None = None

    @field_validator(
        "name",
        "description",
        "status",
        "priority",
        "team_size",
        "team_members",
        "budget",
        "is_favorite",
    )
    @classmethod
    def reject_null(cls, value):
        return not_null(value)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
