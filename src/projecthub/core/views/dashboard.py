"""看板统计视图

对项目、作业、成员列表做纯读取汇总，不修改任何 Store。
"""

from collections.abc import Sequence
from datetime import datetime, timedelta

from pydantic import Field

from ..models.base import CamelModel
from ..models.enums import HIGH_PRIORITIES, ProjectStatus, TaskStatus
from ..models.member import Member
from ..models.project import Project
from ..models.task import Task
from ._common import as_utc, percent, start_of_week

TEAM_WORKLOAD_LIMIT = 5
UPCOMING_DEADLINE_LIMIT = 5


class MemberWorkload(CamelModel):
    """成员未完成作业负载"""

    member_id: str
    name: str
    tasks: int
    high_priority: int


class DashboardStats(CamelModel):
    """看板统计结果"""

    total_projects: int
    active_projects: int
    completed_projects: int
    total_budget: float
    total_spent: float
    budget_usage_rate: int
    total_tasks: int
    done_tasks: int
    task_completion_rate: int
    member_count: int
    tasks_completed_this_week: int
    projects_started_this_week: int
    project_status_counts: dict[str, int] = Field(
        description="按项目状态计数，只包含非零项"
    )
    team_workload: list[MemberWorkload]
    upcoming_deadlines: list[Task]


def team_workload(
    members: Sequence[Member],
    tasks: Sequence[Task],
    limit: int = TEAM_WORKLOAD_LIMIT,
) -> list[MemberWorkload]:
    """按未完成作业数倒序取前 limit 名成员"""
    rows = []
    for member in members:
        open_tasks = [
            t for t in tasks if t.assignee == member.id and t.status != TaskStatus.DONE
        ]
        rows.append(
            MemberWorkload(
                member_id=member.id,
                name=member.name,
                tasks=len(open_tasks),
                high_priority=sum(1 for t in open_tasks if t.priority in HIGH_PRIORITIES),
            )
        )
    rows.sort(key=lambda row: row.tasks, reverse=True)
    return rows[:limit]


def upcoming_deadlines(
    tasks: Sequence[Task], limit: int = UPCOMING_DEADLINE_LIMIT
) -> list[Task]:
    """未完成且有截止日期的作业，按截止日期升序"""
    pending = [t for t in tasks if t.status != TaskStatus.DONE and t.due_date]
    pending.sort(key=lambda t: as_utc(t.due_date))
    return pending[:limit]


def build_dashboard(
    projects: Sequence[Project],
    tasks: Sequence[Task],
    members: Sequence[Member],
    now: datetime,
) -> DashboardStats:
    total_budget = sum(p.budget for p in projects)
    total_spent = sum(p.spent_budget for p in projects)
    done_tasks = sum(1 for t in tasks if t.status == TaskStatus.DONE)

    week_start = start_of_week(now)
    week_end = week_start + timedelta(days=7)

    def in_week(moment: datetime | None) -> bool:
        return moment is not None and week_start < as_utc(moment) < week_end

    status_counts: dict[str, int] = {}
    for project in projects:
        status_counts[project.status.value] = status_counts.get(project.status.value, 0) + 1

    return DashboardStats(
        total_projects=len(projects),
        active_projects=status_counts.get(ProjectStatus.IN_PROGRESS.value, 0),
        completed_projects=status_counts.get(ProjectStatus.COMPLETED.value, 0),
        total_budget=total_budget,
        total_spent=total_spent,
        budget_usage_rate=percent(total_spent, total_budget),
        total_tasks=len(tasks),
        done_tasks=done_tasks,
        task_completion_rate=percent(done_tasks, len(tasks)),
        member_count=len(members),
        tasks_completed_this_week=sum(
            1 for t in tasks if t.status == TaskStatus.DONE and in_week(t.due_date)
        ),
        projects_started_this_week=sum(1 for p in projects if in_week(p.start_date)),
        project_status_counts=status_counts,
        team_workload=team_workload(members, tasks),
        upcoming_deadlines=upcoming_deadlines(tasks),
    )
