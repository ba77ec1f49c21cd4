"""项目聚合字段计算

progress / spent_budget 每次都从项目当前的完整作业列表重新计算，
不做增量更新，因此重复计算结果一致。
"""

from collections.abc import Iterable

from .models.enums import PROGRESS_WEIGHTS
from .models.task import Task


def tasks_of(tasks: Iterable[Task], project_id: str) -> list[Task]:
    return [t for t in tasks if t.project_id == project_id]


def calculate_project_progress(tasks: Iterable[Task], project_id: str) -> float:
    """按状态权重计算项目进度（0-100），无作业时为 0

    权重: TODO=0, IN_PROGRESS=0.5, REVIEW=0.8, DONE=1
    """
    project_tasks = tasks_of(tasks, project_id)
    if not project_tasks:
        return 0
    total = sum(PROGRESS_WEIGHTS[t.status] for t in project_tasks)
    return total / len(project_tasks) * 100


def calculate_project_budget(tasks: Iterable[Task], project_id: str) -> float:
    """汇总项目已用预算：每个作业取 actual_cost，其次 estimated_cost，否则 0"""
    return sum(t.spent_cost for t in tasks_of(tasks, project_id))
