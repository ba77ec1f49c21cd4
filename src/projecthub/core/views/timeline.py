"""时间线视图

- 月内周次：周日为一周的开始，计算日期是当月第几周
- 项目周块：项目开始月与结束月各 5 个周块（1-7 日、8-14 日 ...），标记项目覆盖到的周
- 时间线行：按项目（project）或按成员（resource）分组的甘特行，作业行挂在分组行之下
"""

from calendar import monthrange
from collections.abc import Sequence
from datetime import UTC, date, datetime, time
from typing import Literal

from ..models.base import CamelModel
from ..models.enums import TaskStatus
from ..models.member import Member
from ..models.project import Project
from ..models.task import Task
from ._common import as_utc, whole_days_between

TimelineMode = Literal["project", "resource"]

WEEKS_PER_MONTH = 5

UNASSIGNED_ROW_ID = "unassigned"
UNASSIGNED_ROW_NAME = "미지정 (Unassigned)"

# 作业行进度只分三档
_TASK_PROGRESS: dict[TaskStatus, int] = {
    TaskStatus.DONE: 100,
    TaskStatus.IN_PROGRESS: 50,
}


class WeekBlock(CamelModel):
    week_number: int
    is_active: bool
    label: str


class MonthTimeline(CamelModel):
    month: str
    weeks: list[WeekBlock]


class ProjectTimeline(CamelModel):
    """项目开始月与结束月的周块"""

    start: MonthTimeline
    end: MonthTimeline


class TimelineRow(CamelModel):
    """时间线中的一行（项目、成员分组或作业）"""

    type: Literal["project", "task", "member"]
    id: str
    name: str
    start_date: datetime | None = None
    end_date: datetime | None = None
    progress: float = 0
    status: str
    parent_id: str | None = None
    children_count: int | None = None
    assignee: str | None = None
    description: str | None = None
    avatar: str | None = None
    is_milestone: bool = False


class Timeline(CamelModel):
    range_start: datetime | None = None
    range_end: datetime | None = None
    rows: list[TimelineRow]


def _as_date(value: date | datetime) -> date:
    return as_utc(value).date() if isinstance(value, datetime) else value


def week_of_month(day: date | datetime) -> int:
    """日期在当月的周次，从 1 开始"""
    day = _as_date(day)
    first_weekday = (day.replace(day=1).weekday() + 1) % 7
    return (day.day + first_weekday - 1) // 7 + 1


def _month_weeks(target: date, start: date, end: date, is_start: bool) -> MonthTimeline:
    last_day = monthrange(target.year, target.month)[1]
    same_month = (start.year, start.month) == (end.year, end.month)

    weeks: list[WeekBlock] = []
    for number in range(1, WEEKS_PER_MONTH + 1):
        first = (number - 1) * 7 + 1
        if first > last_day:
            weeks.append(WeekBlock(week_number=number, is_active=False, label=""))
            continue

        week_start = target.replace(day=first)
        week_end = target.replace(day=min(number * 7, last_day))
        if is_start:
            active = week_end >= start and not (same_month and week_start > end)
        else:
            active = week_start <= end
        weeks.append(WeekBlock(week_number=number, is_active=active, label=str(number)))

    return MonthTimeline(month=f"{target.month}월", weeks=weeks)


def project_timeline(start: date | datetime, end: date | datetime) -> ProjectTimeline:
    """生成项目开始月与结束月的周块

    开始月中结束日不早于项目开始日的周为活跃周；结束月中开始日不晚于
    项目结束日的周为活跃周。同月开始同月结束时，开始月还要排除结束日之后的周。
    """
    start_day, end_day = _as_date(start), _as_date(end)
    return ProjectTimeline(
        start=_month_weeks(start_day, start_day, end_day, is_start=True),
        end=_month_weeks(end_day, start_day, end_day, is_start=False),
    )


def timeline_range(projects: Sequence[Project]) -> tuple[datetime | None, datetime | None]:
    """所有项目日期覆盖的范围，扩展到整月"""
    days = [
        _as_date(d)
        for p in projects
        for d in (p.start_date, p.end_date)
        if d is not None
    ]
    if not days:
        return None, None

    first, last = min(days), max(days)
    range_start = datetime.combine(first.replace(day=1), time.min, tzinfo=UTC)
    last_day = last.replace(day=monthrange(last.year, last.month)[1])
    range_end = datetime.combine(last_day, time(23, 59, 59, 999000), tzinfo=UTC)
    return range_start, range_end


def _task_row(
    task: Task,
    parent_id: str,
    fallback_end: datetime | None,
) -> TimelineRow:
    """开始日缺省用截止日，截止日缺省用 fallback_end"""
    end = task.due_date or fallback_end
    start = task.start_date or end
    return TimelineRow(
        type="task",
        id=task.id,
        name=task.title,
        start_date=start,
        end_date=end,
        progress=_TASK_PROGRESS.get(task.status, 0),
        status=task.status.value,
        parent_id=parent_id,
        assignee=task.assignee,
        description=task.description,
        is_milestone=(
            start is not None and end is not None and whole_days_between(start, end) == 0
        ),
    )


def _project_rows(
    projects: Sequence[Project],
    tasks: Sequence[Task],
    status: TaskStatus | None,
    member_id: str | None,
    needle: str,
) -> list[TimelineRow]:
    rows: list[TimelineRow] = []
    for project in projects:
        project_match = needle in project.name.lower()
        matched = [
            t
            for t in tasks
            if t.project_id == project.id
            and (status is None or t.status == status)
            and (member_id is None or t.assignee == member_id)
            and (not needle or needle in t.title.lower() or project_match)
        ]
        # 只有搜索词能让项目行本身被过滤掉
        if not matched and not project_match:
            continue

        rows.append(
            TimelineRow(
                type="project",
                id=project.id,
                name=project.name,
                start_date=project.start_date,
                end_date=project.end_date,
                progress=project.progress,
                status=project.status.value,
                children_count=len(matched),
                description=project.description,
            )
        )
        rows.extend(_task_row(t, project.id, project.end_date) for t in matched)

    return rows


def _resource_rows(
    projects: Sequence[Project],
    tasks: Sequence[Task],
    members: Sequence[Member],
    status: TaskStatus | None,
    member_id: str | None,
    needle: str,
    bounds: tuple[datetime | None, datetime | None],
    now: datetime,
) -> list[TimelineRow]:
    by_id = {p.id: p for p in projects}

    def fallback_end(task: Task) -> datetime:
        project = by_id.get(task.project_id)
        return (project.end_date if project else None) or now

    def matches(task: Task) -> bool:
        return (status is None or task.status == status) and (
            not needle or needle in task.title.lower()
        )

    rows: list[TimelineRow] = []
    for member in members:
        matched = [
            t
            for t in tasks
            if t.assignee == member.id
            and matches(t)
            and (member_id is None or t.assignee == member_id)
        ]
        if not matched:
            if member_id and member_id != member.id:
                continue
            if status:
                continue
            if needle and needle not in member.name.lower():
                continue

        rows.append(
            TimelineRow(
                type="member",
                id=member.id,
                name=member.name,
                start_date=bounds[0],
                end_date=bounds[1],
                status="ACTIVE",
                children_count=len(matched),
                avatar=member.avatar,
            )
        )
        rows.extend(_task_row(t, member.id, fallback_end(t)) for t in matched)

    unassigned = [t for t in tasks if not t.assignee and matches(t)] if not member_id else []
    if unassigned:
        rows.append(
            TimelineRow(
                type="member",
                id=UNASSIGNED_ROW_ID,
                name=UNASSIGNED_ROW_NAME,
                start_date=bounds[0],
                end_date=bounds[1],
                status="ACTIVE",
                children_count=len(unassigned),
            )
        )
        rows.extend(_task_row(t, UNASSIGNED_ROW_ID, fallback_end(t)) for t in unassigned)

    return rows


def build_timeline(
    projects: Sequence[Project],
    tasks: Sequence[Task],
    members: Sequence[Member],
    now: datetime,
    mode: TimelineMode = "project",
    status: TaskStatus | None = None,
    member_id: str | None = None,
    search: str | None = None,
) -> Timeline:
    """生成时间线

    project 模式：每个项目一行，其下是筛选后的作业；有筛选条件时，
    既没有命中作业、名称也不匹配搜索词的项目不出现。
    resource 模式：每个成员一行，其下是分配给该成员的作业；
    未分配的作业归入 "unassigned" 分组。
    """
    needle = (search or "").strip().lower()
    bounds = timeline_range(projects)

    if mode == "resource":
        rows = _resource_rows(
            projects, tasks, members, status, member_id, needle, bounds, now
        )
    else:
        rows = _project_rows(projects, tasks, status, member_id, needle)

    return Timeline(range_start=bounds[0], range_end=bounds[1], rows=rows)
