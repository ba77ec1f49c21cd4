"""报表视图 -- 项目、成员、财务三类汇总"""

from collections.abc import Sequence
from datetime import datetime

from ..models.base import CamelModel
from ..models.enums import MemberRole, ProjectStatus, TaskStatus
from ..models.member import Member
from ..models.project import Project
from ..models.task import Task
from ._common import percent, round_half_up


class ProjectReportRow(CamelModel):
    project_id: str
    name: str
    status: ProjectStatus
    progress: float
    task_progress: int
    budget: float
    spent: float
    start_date: datetime | None
    end_date: datetime | None


class MemberReportRow(CamelModel):
    member_id: str
    name: str
    email: str
    role: MemberRole
    total_tasks: int
    completed_tasks: int
    active_tasks: int
    completion_rate: int


class FinancialReportRow(CamelModel):
    project_id: str
    name: str
    budget: float
    spent: float
    variance: float
    usage_rate: int


class Report(CamelModel):
    projects: list[ProjectReportRow]
    members: list[MemberReportRow]
    financial: list[FinancialReportRow]
    average_progress: int
    completed_projects: int
    average_completion_rate: int
    total_budget: float
    total_spent: float
    total_remaining: float


def project_rows(projects: Sequence[Project], tasks: Sequence[Task]) -> list[ProjectReportRow]:
    rows = []
    for project in projects:
        project_tasks = [t for t in tasks if t.project_id == project.id]
        completed = sum(1 for t in project_tasks if t.status == TaskStatus.DONE)
        rows.append(
            ProjectReportRow(
                project_id=project.id,
                name=project.name,
                status=project.status,
                progress=project.progress,
                task_progress=percent(completed, len(project_tasks)),
                budget=project.budget,
                spent=project.spent_budget,
                start_date=project.start_date,
                end_date=project.end_date,
            )
        )
    return rows


def member_rows(members: Sequence[Member], tasks: Sequence[Task]) -> list[MemberReportRow]:
    rows = []
    for member in members:
        member_tasks = [t for t in tasks if t.assignee == member.id]
        completed = sum(1 for t in member_tasks if t.status == TaskStatus.DONE)
        rows.append(
            MemberReportRow(
                member_id=member.id,
                name=member.name,
                email=member.email,
                role=member.role,
                total_tasks=len(member_tasks),
                completed_tasks=completed,
                active_tasks=len(member_tasks) - completed,
                completion_rate=percent(completed, len(member_tasks)),
            )
        )
    return rows


def financial_rows(projects: Sequence[Project]) -> list[FinancialReportRow]:
    return [
        FinancialReportRow(
            project_id=p.id,
            name=p.name,
            budget=p.budget,
            spent=p.spent_budget,
            variance=p.budget - p.spent_budget,
            usage_rate=percent(p.spent_budget, p.budget),
        )
        for p in projects
    ]


def build_report(
    projects: Sequence[Project],
    tasks: Sequence[Task],
    members: Sequence[Member],
) -> Report:
    members_data = member_rows(members, tasks)
    total_budget = sum(p.budget for p in projects)
    total_spent = sum(p.spent_budget for p in projects)

    average_progress = (
        round_half_up(sum(p.progress for p in projects) / len(projects)) if projects else 0
    )
    average_completion_rate = (
        round_half_up(sum(m.completion_rate for m in members_data) / len(members_data))
        if members_data
        else 0
    )

    return Report(
        projects=project_rows(projects, tasks),
        members=members_data,
        financial=financial_rows(projects),
        average_progress=average_progress,
        completed_projects=sum(1 for p in projects if p.status == ProjectStatus.COMPLETED),
        average_completion_rate=average_completion_rate,
        total_budget=total_budget,
        total_spent=total_spent,
        total_remaining=total_budget - total_spent,
    )
