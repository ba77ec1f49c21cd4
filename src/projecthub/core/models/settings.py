"""应用设置模型

读取时以默认值为底，合并已保存的字段（浅合并，与原持久化格式一致）。
"""

from typing import Any, Literal

from pydantic import Field

from .base import CamelModel


class NotificationSettings(CamelModel):
    """通知设置"""

    enabled: bool = True
    sound: bool = True
    desktop: bool = False
    email: bool = False
    deadline_reminder: bool = True
    deadline_days: int = Field(default=3, ge=0, description="截止提醒提前天数")
    task_assigned: bool = True
    task_completed: bool = True
    project_updates: bool = True
    daily_digest: bool = False
    digest_time: str = "09:00"


class AppSettings(CamelModel):
    """应用设置"""

    theme: Literal["light", "dark", "system"] = "light"
    primary_color: str = "#667eea"
    font_size: int = 14
    compact_mode: bool = False
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    language: str = "ko"
    date_format: str = "YYYY-MM-DD"
    time_format: Literal["24h", "12h"] = "24h"
    auto_save: bool = True
    show_tips: bool = True

    def with_path(self, path: str, value: Any) -> "AppSettings":
        """按点分路径更新单个设置项，例如 `notifications.deadlineDays`

        Raises:
            KeyError: 路径不存在
            pydantic.ValidationError: 值不合法
        """
        data = self.to_storage()
        keys = path.split(".")
        current = data
        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                raise KeyError(path)
            current = current[key]
        if keys[-1] not in current:
            raise KeyError(path)
        current[keys[-1]] = value
        return AppSettings.model_validate(data)
