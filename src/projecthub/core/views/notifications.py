"""通知派生视图

根据作业截止日期和完成时间生成通知列表，受通知设置控制：
- overdue: 已过截止日期的未完成作业
- deadline: 剩余天数在 deadline_days 以内的未完成作业
- completed: 24 小时内完成的作业
"""

from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import Literal

from ..models.base import CamelModel
from ..models.enums import TaskStatus
from ..models.project import Project
from ..models.settings import NotificationSettings
from ..models.task import Task
from ._common import as_utc, whole_days_between

COMPLETED_WINDOW = timedelta(hours=24)

# 排序：overdue 在前，其次 deadline，同类按时间倒序
_TYPE_ORDER = {"overdue": 0, "deadline": 1, "completed": 2}


class Notification(CamelModel):
    """通知"""

    id: str
    type: Literal["overdue", "deadline", "completed"]
    title: str
    description: str
    timestamp: datetime
    read: bool = False
    task_id: str
    project_id: str


def _with_project(title: str, project: Project | None) -> str:
    return f'"{title}" ({project.name})' if project else f'"{title}" '


def derive_notifications(
    tasks: Sequence[Task],
    projects: Sequence[Project],
    settings: NotificationSettings,
    now: datetime,
) -> list[Notification]:
    if not settings.enabled:
        return []

    by_id = {p.id: p for p in projects}
    notifications: list[Notification] = []

    if settings.deadline_reminder:
        for task in tasks:
            if task.status == TaskStatus.DONE or not task.due_date:
                continue

            days_left = whole_days_between(now, task.due_date)
            if days_left < 0:
                notifications.append(
                    Notification(
                        id=f"overdue-{task.id}",
                        type="overdue",
                        title="작업 지연",
                        description=f'"{task.title}" 작업이 {abs(days_left)}일 지연되었습니다.',
                        timestamp=task.due_date,
                        task_id=task.id,
                        project_id=task.project_id,
                    )
                )
            elif days_left <= settings.deadline_days:
                notifications.append(
                    Notification(
                        id=f"deadline-{task.id}",
                        type="deadline",
                        title="오늘 마감" if days_left == 0 else f"마감 {days_left}일 전",
                        description=_with_project(task.title, by_id.get(task.project_id)),
                        timestamp=task.due_date,
                        task_id=task.id,
                        project_id=task.project_id,
                    )
                )

    if settings.task_completed:
        cutoff = as_utc(now) - COMPLETED_WINDOW
        for task in tasks:
            if task.status != TaskStatus.DONE or as_utc(task.updated_at) <= cutoff:
                continue
            notifications.append(
                Notification(
                    id=f"completed-{task.id}",
                    type="completed",
                    title="작업 완료",
                    description=_with_project(task.title, by_id.get(task.project_id)),
                    timestamp=task.updated_at,
                    task_id=task.id,
                    project_id=task.project_id,
                )
            )

    notifications.sort(key=lambda n: as_utc(n.timestamp), reverse=True)
    notifications.sort(key=lambda n: _TYPE_ORDER[n.type])
    return notifications
