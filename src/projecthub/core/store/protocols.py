"""Store Protocol 接口定义

TaskStore 只通过这里定义的窄接口访问项目聚合字段和活动日志，
使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from collections.abc import Callable
from typing import Protocol

from ..models.activity import Activity, ActivityDraft
from ..models.member import Actor
from ..models.project import Project


class ProjectAggregateSink(Protocol):
    """项目聚合字段写入接口"""

    def get_project_by_id(self, project_id: str) -> Project | None:
        """根据 ID 查询项目（用于活动记录中的项目名）"""
        ...

    def update_project_progress(self, project_id: str, progress: float) -> None:
        """覆盖写入项目进度"""
        ...

    def update_project_budget(self, project_id: str, spent_budget: float) -> None:
        """覆盖写入项目已用预算"""
        ...


class ActivitySink(Protocol):
    """活动日志追加接口"""

    def add_activity(self, draft: ActivityDraft) -> Activity:
        """追加一条活动记录"""
        ...


# 返回当前操作者；未登录时返回 None
ActorProvider = Callable[[], Actor | None]
