"""ProjectStore 内存实现

对外提供两个窄写入口 update_project_progress / update_project_budget，
供 TaskStore 在作业变更后写回聚合字段。
"""

from collections.abc import Iterable

from ..config import DEFAULT_ACTOR_NAME
from ..models.activity import ActivityDraft
from ..models.base import new_entity_id, utc_now
from ..models.enums import ActivityType, ProjectStatus
from ..models.project import CreateProjectDTO, Project, ProjectUpdate
from .protocols import ActivitySink, ActorProvider


class ProjectStore:
    """项目存储"""

    def __init__(
        self,
        activities: ActivitySink,
        projects: Iterable[Project] = (),
        actor_provider: ActorProvider = lambda: None,
    ) -> None:
        self._projects: list[Project] = list(projects)
        self._activities = activities
        self._actor_provider = actor_provider

    @property
    def projects(self) -> list[Project]:
        return list(self._projects)

    def get_project_by_id(self, project_id: str) -> Project | None:
        return next((p for p in self._projects if p.id == project_id), None)

    def _index_of(self, project_id: str) -> int | None:
        return next(
            (i for i, p in enumerate(self._projects) if p.id == project_id), None
        )

    def _draft(self, activity_type: ActivityType, project: Project, name: str | None = None):
        actor = self._actor_provider()
        return ActivityDraft(
            type=activity_type,
            user_id=actor.id if actor else None,
            user_name=actor.name if actor else DEFAULT_ACTOR_NAME,
            project_id=project.id,
            project_name=name or project.name,
        )

    def add_project(self, data: CreateProjectDTO) -> Project:
        now = utc_now()
        project = Project(
            **data.model_dump(),
            id=new_entity_id("project"),
            progress=0,
            spent_budget=0,
            created_at=now,
            updated_at=now,
            is_favorite=False,
        )
        self._projects.append(project)
        self._activities.add_activity(self._draft(ActivityType.PROJECT_CREATED, project))
        return project

    def update_project(self, project_id: str, data: ProjectUpdate) -> Project | None:
        """合并更新项目；状态首次进入 COMPLETED 时记录 PROJECT_COMPLETED"""
        index = self._index_of(project_id)
        if index is None:
            return None

        project = self._projects[index]
        changes = data.changes()
        was_completed = project.status == ProjectStatus.COMPLETED
        is_now_completed = changes.get("status") == ProjectStatus.COMPLETED

        updated = Project.model_validate(
            {**project.model_dump(), **changes, "updated_at": utc_now()}
        )
        self._projects[index] = updated

        activity_type = (
            ActivityType.PROJECT_COMPLETED
            if not was_completed and is_now_completed
            else ActivityType.PROJECT_UPDATED
        )
        self._activities.add_activity(
            self._draft(activity_type, project, name=changes.get("name"))
        )
        return updated

    def delete_project(self, project_id: str) -> Project | None:
        index = self._index_of(project_id)
        if index is None:
            return None

        project = self._projects.pop(index)
        self._activities.add_activity(self._draft(ActivityType.PROJECT_DELETED, project))
        return project

    def toggle_favorite(self, project_id: str) -> Project | None:
        index = self._index_of(project_id)
        if index is None:
            return None
        project = self._projects[index]
        updated = project.model_copy(update={"is_favorite": not project.is_favorite})
        self._projects[index] = updated
        return updated

    def update_project_progress(self, project_id: str, progress: float) -> None:
        """覆盖写入进度（不做范围校验，未知 ID 时为 no-op）"""
        self._overwrite(project_id, progress=progress)

    def update_project_budget(self, project_id: str, spent_budget: float) -> None:
        """覆盖写入已用预算（未知 ID 时为 no-op）"""
        self._overwrite(project_id, spent_budget=spent_budget)

    def _overwrite(self, project_id: str, **fields) -> None:
        index = self._index_of(project_id)
        if index is None:
            return
        self._projects[index] = self._projects[index].model_copy(
            update={**fields, "updated_at": utc_now()}
        )
