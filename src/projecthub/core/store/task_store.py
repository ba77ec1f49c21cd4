"""TaskStore 内存实现

每次作业变更按固定顺序执行：
1. 更新作业列表
2. 重算所属项目的 progress 与 spent_budget 并写回 ProjectAggregateSink
3. 向 ActivitySink 追加恰好一条活动记录

目标 ID 不存在时整个调用为 no-op，不抛异常。
"""

from collections.abc import Iterable

import structlog

from ..aggregates import calculate_project_budget, calculate_project_progress
from ..config import DEFAULT_ACTOR_NAME
from ..models.activity import ActivityDraft
from ..models.base import new_entity_id, utc_now
from ..models.enums import ActivityType, TaskStatus, status_label
from ..models.task import CreateTaskDTO, Task, TaskUpdate
from .protocols import ActivitySink, ActorProvider, ProjectAggregateSink

log = structlog.get_logger()


class TaskStore:
    """作业存储"""

    def __init__(
        self,
        aggregates: ProjectAggregateSink,
        activities: ActivitySink,
        tasks: Iterable[Task] = (),
        actor_provider: ActorProvider = lambda: None,
    ) -> None:
        self._tasks: list[Task] = list(tasks)
        self._aggregates = aggregates
        self._activities = activities
        self._actor_provider = actor_provider

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def get_task(self, task_id: str) -> Task | None:
        return next((t for t in self._tasks if t.id == task_id), None)

    def get_tasks_by_project(self, project_id: str) -> list[Task]:
        return [t for t in self._tasks if t.project_id == project_id]

    def get_tasks_by_status(self, project_id: str, status: TaskStatus) -> list[Task]:
        return [
            t for t in self._tasks if t.project_id == project_id and t.status == status
        ]

    def add_task(self, data: CreateTaskDTO) -> Task:
        """创建作业，重算项目聚合字段并记录 TASK_CREATED"""
        now = utc_now()
        task = Task(
            **data.model_dump(),
            id=new_entity_id("task"),
            tags=[],
            created_at=now,
            updated_at=now,
        )
        project_name = self._project_name(task.project_id)

        self._tasks.append(task)
        self._recompute(task.project_id)
        self._record(ActivityType.TASK_CREATED, task, project_name)
        return task

    def update_task(self, task_id: str, data: TaskUpdate) -> Task | None:
        """合并更新作业

        状态变化时记录 TASK_STATUS_CHANGED（旧/新状态显示名），
        否则记录 TASK_UPDATED；两者每次调用只记录其一。
        作业移到其他项目时，原项目和新项目都重算聚合字段。

        Raises:
            pydantic.ValidationError: 合并后的作业不合法，此时不做任何修改
        """
        index = self._index_of(task_id)
        if index is None:
            log.debug("task_update_skipped", task_id=task_id)
            return None

        task = self._tasks[index]
        project_name = self._project_name(task.project_id)
        changes = data.changes()
        old_status = task.status

        # 先校验合并结果，非法更新不改动列表
        updated = Task.model_validate(
            {**task.model_dump(), **changes, "updated_at": utc_now()}
        )
        self._tasks[index] = updated
        self._recompute(task.project_id)
        if updated.project_id != task.project_id:
            self._recompute(updated.project_id)

        new_status = changes.get("status")
        if new_status and new_status != old_status:
            self._record(
                ActivityType.TASK_STATUS_CHANGED,
                task,
                project_name,
                old_value=status_label(old_status),
                new_value=status_label(new_status),
            )
        else:
            self._record(
                ActivityType.TASK_UPDATED,
                task,
                project_name,
                task_name=changes.get("title") or task.title,
            )
        return updated

    def delete_task(self, task_id: str) -> Task | None:
        """删除作业，按删除后的列表重算项目聚合字段并记录 TASK_DELETED"""
        index = self._index_of(task_id)
        if index is None:
            log.debug("task_delete_skipped", task_id=task_id)
            return None

        task = self._tasks[index]
        project_name = self._project_name(task.project_id)

        self._tasks = [t for t in self._tasks if t.id != task_id]
        self._recompute(task.project_id)
        self._record(ActivityType.TASK_DELETED, task, project_name)
        return task

    def _index_of(self, task_id: str) -> int | None:
        return next((i for i, t in enumerate(self._tasks) if t.id == task_id), None)

    def _project_name(self, project_id: str) -> str | None:
        project = self._aggregates.get_project_by_id(project_id)
        return project.name if project else None

    def _recompute(self, project_id: str) -> None:
        progress = calculate_project_progress(self._tasks, project_id)
        self._aggregates.update_project_progress(project_id, progress)

        spent_budget = calculate_project_budget(self._tasks, project_id)
        self._aggregates.update_project_budget(project_id, spent_budget)

    def _record(
        self,
        activity_type: ActivityType,
        task: Task,
        project_name: str | None,
        task_name: str | None = None,
        old_value: str | None = None,
        new_value: str | None = None,
    ) -> None:
        actor = self._actor_provider()
        self._activities.add_activity(
            ActivityDraft(
                type=activity_type,
                user_id=actor.id if actor else None,
                user_name=actor.name if actor else DEFAULT_ACTOR_NAME,
                project_id=task.project_id,
                project_name=project_name,
                task_id=task.id,
                task_name=task_name or task.title,
                old_value=old_value,
                new_value=new_value,
            )
        )
