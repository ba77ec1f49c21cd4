"""日历事件视图

项目按 start_date ~ end_date 生成一个区间事件；
有截止日期的作业按 start_date（缺省为 due_date）~ due_date 生成区间事件。
"""

from collections.abc import Sequence
from datetime import date, datetime
from typing import Literal

from ..models.base import CamelModel
from ..models.enums import TaskPriority, TaskStatus
from ..models.project import Project
from ..models.task import Task
from ._common import as_utc

ColorMode = Literal["status", "priority"]

DEFAULT_EVENT_COLOR = "#1890ff"

STATUS_COLORS: dict[TaskStatus, str] = {
    TaskStatus.TODO: "#d9d9d9",
    TaskStatus.IN_PROGRESS: "#52c41a",
    TaskStatus.REVIEW: "#1890ff",
    TaskStatus.DONE: "#ff4d4f",
}

PRIORITY_COLORS: dict[TaskPriority, str] = {
    TaskPriority.LOW: "#8c8c8c",
    TaskPriority.MEDIUM: "#1890ff",
    TaskPriority.HIGH: "#fa8c16",
    TaskPriority.URGENT: "#ff4d4f",
}


class CalendarEvent(CamelModel):
    id: str
    title: str
    start: datetime
    end: datetime
    type: Literal["task", "project"]
    color: str
    project_id: str | None = None
    project_name: str | None = None
    status: str | None = None
    priority: TaskPriority | None = None
    assignee: str | None = None
    description: str | None = None


def build_calendar_events(
    projects: Sequence[Project],
    tasks: Sequence[Task],
    project_filter: str | None = None,
    member_filter: str | None = None,
    color_mode: ColorMode = "status",
    primary_color: str = "#667eea",
) -> list[CalendarEvent]:
    """生成日历事件；按成员过滤时不包含项目事件"""
    events: list[CalendarEvent] = []

    if member_filter is None:
        for project in projects:
            if project_filter and project.id != project_filter:
                continue
            if project.start_date is None or project.end_date is None:
                continue
            events.append(
                CalendarEvent(
                    id=f"project-{project.id}",
                    title=project.name,
                    start=project.start_date,
                    end=project.end_date,
                    type="project",
                    color=primary_color,
                    project_id=project.id,
                    description=project.description,
                )
            )

    by_id = {p.id: p for p in projects}
    for task in tasks:
        if project_filter and task.project_id != project_filter:
            continue
        if member_filter and task.assignee != member_filter:
            continue
        if not task.due_date:
            continue

        if color_mode == "status":
            color = STATUS_COLORS.get(task.status, DEFAULT_EVENT_COLOR)
        else:
            color = PRIORITY_COLORS.get(task.priority, DEFAULT_EVENT_COLOR)

        project = by_id.get(task.project_id)
        events.append(
            CalendarEvent(
                id=task.id,
                title=task.title,
                start=task.start_date or task.due_date,
                end=task.due_date,
                type="task",
                color=color,
                project_id=task.project_id,
                project_name=project.name if project else None,
                status=task.status.value,
                priority=task.priority,
                assignee=task.assignee,
                description=task.description,
            )
        )

    return events


def events_for_date(events: Sequence[CalendarEvent], day: date) -> list[CalendarEvent]:
    """返回覆盖指定日期（含首尾两天）的事件"""
    return [
        e
        for e in events
        if as_utc(e.start).date() <= day <= as_utc(e.end).date()
    ]
