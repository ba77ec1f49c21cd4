"""Member Domain Model"""

from datetime import datetime

from pydantic import Field, field_validator

from .base import CamelModel, not_null
from .enums import MemberRole, MemberStatus


class Member(CamelModel):
    """团队成员"""

    id: str = Field(description="唯一标识，member-<毫秒时间戳>")
    name: str
    email: str
    role: MemberRole
    avatar: str | None = None
    department: str | None = None
    skills: list[str] | None = None
    status: MemberStatus | None = None
    phone: str | None = None
    join_date: datetime | None = None


class CreateMemberDTO(CamelModel):
    """成员创建请求"""

    name: str
    email: str
    role: MemberRole
    department: str | None = None
    skills: list[str] | None = None
    status: MemberStatus | None = None
    phone: str | None = None
    join_date: datetime | None = None


class MemberUpdate(CamelModel):
    """成员部分更新"""

    name: str | None = None
    email: str | None = None
    role: MemberRole | None = None
    avatar: str | None = None
    department: str | None = None
    skills: list[str] | None = None
    status: MemberStatus | None = None
    phone: str | None = None
    join_date: datetime | None = None

    @field_validator("name", "email", "role")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class Actor(CamelModel):
    """执行变更操作的用户"""

    id: str
    name: str
