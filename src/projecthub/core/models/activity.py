"""Activity Domain Model

活动日志 append-only：记录创建后不可修改，只能整体清空。
"""

from datetime import datetime

from pydantic import ConfigDict, Field

from .base import CamelModel
from .enums import ActivityType


class ActivityDraft(CamelModel):
    """待写入的活动记录（尚未分配 id 与 timestamp）"""

    type: ActivityType
    user_id: str | None = None
    user_name: str | None = None
    project_id: str | None = None
    project_name: str | None = None
    task_id: str | None = None
    task_name: str | None = None
    member_id: str | None = None
    member_name: str | None = None
    old_value: str | None = None
    new_value: str | None = None
    description: str | None = None


class Activity(ActivityDraft):
    """活动记录 -- 不可变"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="activity-<毫秒时间戳>-<随机串>")
    timestamp: datetime = Field(description="记录时间")
