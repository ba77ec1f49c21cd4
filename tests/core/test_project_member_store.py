"""ProjectStore / MemberStore 单元测试"""

import pytest
from projecthub.core.models import (
    ActivityType,
    CreateMemberDTO,
    CreateProjectDTO,
    CreateTaskDTO,
    MemberRole,
    MemberUpdate,
    ProjectStatus,
    ProjectUpdate,
)
from projecthub.core.store.state import AppState
from pydantic import ValidationError


class TestProjectStore:
    def test_add_project(self, app_state: AppState):
        project = app_state.project_store.add_project(
            CreateProjectDTO(name="웹사이트", budget=500)
        )
        assert project.id.startswith("project-")
        assert project.progress == 0
        assert project.spent_budget == 0
        assert project.is_favorite is False
        assert app_state.activity_store.activities[0].type == ActivityType.PROJECT_CREATED

    def test_update_into_completed_records_completion(self, app_state: AppState):
        project = app_state.project_store.add_project(CreateProjectDTO(name="p"))
        app_state.project_store.update_project(
            project.id, ProjectUpdate(status=ProjectStatus.COMPLETED)
        )
        assert app_state.activity_store.activities[0].type == ActivityType.PROJECT_COMPLETED

        # 已完成后再次更新记录为普通更新
        app_state.project_store.update_project(
            project.id, ProjectUpdate(status=ProjectStatus.COMPLETED, name="p2")
        )
        latest = app_state.activity_store.activities[0]
        assert latest.type == ActivityType.PROJECT_UPDATED
        assert latest.project_name == "p2"

    def test_aggregate_writes_overwrite_without_activity(self, app_state: AppState):
        project = app_state.project_store.add_project(CreateProjectDTO(name="p"))
        count = len(app_state.activity_store)

        app_state.project_store.update_project_progress(project.id, 150)
        app_state.project_store.update_project_budget(project.id, -5)

        stored = app_state.project_store.get_project_by_id(project.id)
        assert stored.progress == 150
        assert stored.spent_budget == -5
        assert stored.updated_at >= project.updated_at
        assert len(app_state.activity_store) == count

    def test_aggregate_writes_unknown_id_noop(self, app_state: AppState):
        app_state.project_store.update_project_progress("project-missing", 10)
        app_state.project_store.update_project_budget("project-missing", 10)
        assert app_state.project_store.projects == []

    def test_toggle_favorite_records_nothing(self, app_state: AppState):
        project = app_state.project_store.add_project(CreateProjectDTO(name="p"))
        count = len(app_state.activity_store)
        toggled = app_state.project_store.toggle_favorite(project.id)
        assert toggled.is_favorite is True
        assert len(app_state.activity_store) == count

    def test_delete_project_keeps_tasks(self, app_state: AppState):
        project = app_state.project_store.add_project(CreateProjectDTO(name="p"))
        app_state.task_store.add_task(CreateTaskDTO(project_id=project.id, title="t"))

        deleted = app_state.project_store.delete_project(project.id)

        assert deleted.id == project.id
        assert app_state.project_store.projects == []
        assert len(app_state.task_store.tasks) == 1
        assert app_state.activity_store.activities[0].type == ActivityType.PROJECT_DELETED

    def test_null_name_rejected(self, app_state: AppState):
        project = app_state.project_store.add_project(CreateProjectDTO(name="p"))
        with pytest.raises(ValidationError):
            ProjectUpdate.model_validate({"name": None})
        with pytest.raises(ValidationError):
            app_state.project_store.update_project(
                project.id, ProjectUpdate.model_construct(name=None)
            )
        assert app_state.project_store.get_project_by_id(project.id) == project
        assert len(app_state.activity_store) == 1

    def test_missing_ids(self, app_state: AppState):
        store = app_state.project_store
        assert store.update_project("project-x", ProjectUpdate(name="n")) is None
        assert store.delete_project("project-x") is None
        assert store.toggle_favorite("project-x") is None
        assert len(app_state.activity_store) == 0


class TestMemberStore:
    def _add(self, state: AppState, name: str = "이영희"):
        return state.member_store.add_member(
            CreateMemberDTO(name=name, email="a@example.com", role=MemberRole.DEVELOPER)
        )

    def test_member_lifecycle_activities(self, app_state: AppState):
        member = self._add(app_state)
        app_state.member_store.update_member(member.id, MemberUpdate(name="이영희2"))
        app_state.member_store.delete_member(member.id)

        types = [a.type for a in app_state.activity_store.activities]
        assert types == [
            ActivityType.MEMBER_REMOVED,
            ActivityType.MEMBER_UPDATED,
            ActivityType.MEMBER_ADDED,
        ]
        assert app_state.activity_store.activities[1].member_name == "이영희2"

    def test_delete_does_not_cascade_to_tasks(self, app_state: AppState):
        member = self._add(app_state)
        task = app_state.task_store.add_task(
            CreateTaskDTO(project_id="project-1", title="t", assignee=member.id)
        )
        app_state.member_store.delete_member(member.id)
        assert app_state.task_store.get_task(task.id).assignee == member.id

    def test_missing_member(self, app_state: AppState):
        assert app_state.member_store.update_member("member-x", MemberUpdate(name="n")) is None
        assert app_state.member_store.delete_member("member-x") is None
        assert len(app_state.activity_store) == 0

    def test_null_role_rejected(self, app_state: AppState):
        member = self._add(app_state)
        with pytest.raises(ValidationError):
            MemberUpdate.model_validate({"role": None})
        with pytest.raises(ValidationError):
            app_state.member_store.update_member(
                member.id, MemberUpdate.model_construct(role=None)
            )
        assert app_state.member_store.get_member_by_id(member.id) == member
        assert len(app_state.activity_store) == 1

    def test_optional_fields_can_be_cleared(self, app_state: AppState):
        member = app_state.member_store.add_member(
            CreateMemberDTO(
                name="n", email="n@example.com", role=MemberRole.QA, department="QA팀"
            )
        )
        updated = app_state.member_store.update_member(
            member.id, MemberUpdate.model_validate({"department": None})
        )
        assert updated.department is None
