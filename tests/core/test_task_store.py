"""TaskStore 单元测试

测试内容：
1. 作业变更后项目 progress / spentBudget 重算
2. 每次成功变更恰好追加一条活动
3. 状态变更记录显示名而非枚举值
4. 不存在的 ID 不改变任何状态
"""

import pytest
from pydantic import ValidationError
from projecthub.core.aggregates import calculate_project_budget, calculate_project_progress
from projecthub.core.models import (
    ActivityType,
    Actor,
    CreateProjectDTO,
    CreateTaskDTO,
    TaskStatus,
    TaskUpdate,
)
from projecthub.core.store.state import AppState


@pytest.fixture
def project_id(app_state: AppState) -> str:
    project = app_state.project_store.add_project(
        CreateProjectDTO(name="프로젝트 X", budget=1_000_000)
    )
    app_state.activity_store.clear_activities()
    return project.id


def _project(state: AppState, project_id: str):
    return state.project_store.get_project_by_id(project_id)


class TestProjectAggregates:
    """项目聚合字段重算"""

    def test_budget_and_progress_scenario(self, app_state: AppState, project_id: str):
        """新增、改状态、删除作业时聚合字段依次变化"""
        store = app_state.task_store

        task_a = store.add_task(
            CreateTaskDTO(project_id=project_id, title="A", estimated_cost=100_000)
        )
        project = _project(app_state, project_id)
        assert project.progress == 0
        assert project.spent_budget == 100_000

        store.update_task(task_a.id, TaskUpdate(status=TaskStatus.IN_PROGRESS))
        assert _project(app_state, project_id).progress == pytest.approx(50)

        store.add_task(
            CreateTaskDTO(
                project_id=project_id,
                title="B",
                status=TaskStatus.DONE,
                actual_cost=200_000,
            )
        )
        project = _project(app_state, project_id)
        assert project.progress == pytest.approx(75)
        assert project.spent_budget == 300_000

        store.delete_task(task_a.id)
        project = _project(app_state, project_id)
        assert project.progress == pytest.approx(100)
        assert project.spent_budget == 200_000
        # 预算本身不受影响
        assert project.budget == 1_000_000

    def test_progress_uses_status_weights(self, app_state: AppState, project_id: str):
        store = app_state.task_store
        for status in (TaskStatus.TODO, TaskStatus.REVIEW, TaskStatus.DONE):
            store.add_task(CreateTaskDTO(project_id=project_id, title=status, status=status))

        expected = (0 + 0.8 + 1.0) / 3 * 100
        assert _project(app_state, project_id).progress == pytest.approx(expected)

    def test_progress_stored_unrounded(self, app_state: AppState, project_id: str):
        store = app_state.task_store
        for status in (TaskStatus.TODO, TaskStatus.TODO, TaskStatus.REVIEW):
            store.add_task(CreateTaskDTO(project_id=project_id, title=status, status=status))

        progress = _project(app_state, project_id).progress
        assert progress == pytest.approx(80 / 3)
        assert progress != round(progress)

    def test_progress_zero_after_last_task_deleted(self, app_state: AppState, project_id: str):
        task = app_state.task_store.add_task(
            CreateTaskDTO(project_id=project_id, title="only", status=TaskStatus.DONE)
        )
        app_state.task_store.delete_task(task.id)
        project = _project(app_state, project_id)
        assert project.progress == 0
        assert project.spent_budget == 0

    def test_actual_cost_takes_precedence(self, app_state: AppState, project_id: str):
        app_state.task_store.add_task(
            CreateTaskDTO(
                project_id=project_id,
                title="costed",
                estimated_cost=10,
                actual_cost=30,
            )
        )
        assert _project(app_state, project_id).spent_budget == 30

    def test_zero_actual_cost_falls_back_to_estimate(
        self, app_state: AppState, project_id: str
    ):
        """actual_cost 为 0 时按未填写处理，使用 estimated_cost"""
        app_state.task_store.add_task(
            CreateTaskDTO(
                project_id=project_id, title="zero", estimated_cost=40, actual_cost=0
            )
        )
        assert _project(app_state, project_id).spent_budget == 40

    def test_recompute_is_idempotent(self, app_state: AppState, project_id: str):
        store = app_state.task_store
        store.add_task(CreateTaskDTO(project_id=project_id, title="a", estimated_cost=5))
        store.add_task(
            CreateTaskDTO(project_id=project_id, title="b", status=TaskStatus.REVIEW)
        )
        tasks = store.tasks
        first = (
            calculate_project_progress(tasks, project_id),
            calculate_project_budget(tasks, project_id),
        )
        second = (
            calculate_project_progress(tasks, project_id),
            calculate_project_budget(tasks, project_id),
        )
        assert first == second
        project = _project(app_state, project_id)
        assert (project.progress, project.spent_budget) == first

    def test_other_projects_untouched(self, app_state: AppState, project_id: str):
        other = app_state.project_store.add_project(CreateProjectDTO(name="other"))
        app_state.task_store.add_task(
            CreateTaskDTO(project_id=project_id, title="a", status=TaskStatus.DONE)
        )
        other_after = _project(app_state, other.id)
        assert other_after.progress == 0
        assert other_after.spent_budget == 0

    def test_moving_task_recomputes_both_projects(
        self, app_state: AppState, project_id: str
    ):
        """作业改到其他项目后，原项目与新项目的聚合字段都随之更新"""
        other = app_state.project_store.add_project(CreateProjectDTO(name="other"))
        task = app_state.task_store.add_task(
            CreateTaskDTO(
                project_id=project_id,
                title="move",
                status=TaskStatus.DONE,
                actual_cost=500,
            )
        )
        activity_count = len(app_state.activity_store)

        app_state.task_store.update_task(task.id, TaskUpdate(project_id=other.id))

        source = _project(app_state, project_id)
        assert (source.progress, source.spent_budget) == (0, 0)
        target = _project(app_state, other.id)
        assert target.progress == pytest.approx(100)
        assert target.spent_budget == 500
        assert len(app_state.activity_store) == activity_count + 1

    def test_task_for_unknown_project_is_kept(self, app_state: AppState):
        """所属项目不存在时仍创建作业，聚合写回为 no-op"""
        task = app_state.task_store.add_task(
            CreateTaskDTO(project_id="project-missing", title="orphan")
        )
        assert app_state.task_store.get_task(task.id) == task
        activity = app_state.activity_store.activities[0]
        assert activity.project_name is None


class TestTaskActivities:
    """作业变更的活动记录"""

    def test_add_records_task_created(self, app_state: AppState, project_id: str):
        task = app_state.task_store.add_task(
            CreateTaskDTO(project_id=project_id, title="설계")
        )
        activities = app_state.activity_store.activities
        assert len(activities) == 1
        assert activities[0].type == ActivityType.TASK_CREATED
        assert activities[0].task_id == task.id
        assert activities[0].task_name == "설계"
        assert activities[0].project_name == "프로젝트 X"
        assert activities[0].user_name == "사용자"

    def test_status_change_records_labels(self, app_state: AppState, project_id: str):
        task = app_state.task_store.add_task(CreateTaskDTO(project_id=project_id, title="t"))
        app_state.task_store.update_task(
            task.id, TaskUpdate(status=TaskStatus.REVIEW, title="t2")
        )

        activities = app_state.activity_store.activities
        assert len(activities) == 2
        latest = activities[0]
        assert latest.type == ActivityType.TASK_STATUS_CHANGED
        assert latest.old_value == "할일"
        assert latest.new_value == "검토중"

    def test_same_status_records_task_updated(self, app_state: AppState, project_id: str):
        task = app_state.task_store.add_task(CreateTaskDTO(project_id=project_id, title="old"))
        app_state.task_store.update_task(
            task.id, TaskUpdate(status=TaskStatus.TODO, title="new")
        )

        latest = app_state.activity_store.activities[0]
        assert latest.type == ActivityType.TASK_UPDATED
        assert latest.task_name == "new"
        assert latest.old_value is None

    def test_update_without_title_keeps_task_name(self, app_state: AppState, project_id: str):
        task = app_state.task_store.add_task(CreateTaskDTO(project_id=project_id, title="keep"))
        app_state.task_store.update_task(task.id, TaskUpdate(description="more"))
        assert app_state.activity_store.activities[0].task_name == "keep"

    def test_delete_records_task_deleted(self, app_state: AppState, project_id: str):
        task = app_state.task_store.add_task(CreateTaskDTO(project_id=project_id, title="t"))
        app_state.task_store.delete_task(task.id)
        latest = app_state.activity_store.activities[0]
        assert latest.type == ActivityType.TASK_DELETED
        assert latest.task_id == task.id

    def test_actor_is_recorded(self, app_state: AppState, project_id: str):
        app_state.current_actor = Actor(id="member-1", name="김철수")
        app_state.task_store.add_task(CreateTaskDTO(project_id=project_id, title="t"))
        latest = app_state.activity_store.activities[0]
        assert latest.user_id == "member-1"
        assert latest.user_name == "김철수"

    def test_no_store_operation_emits_task_assigned(
        self, app_state: AppState, project_id: str
    ):
        task = app_state.task_store.add_task(CreateTaskDTO(project_id=project_id, title="t"))
        app_state.task_store.update_task(task.id, TaskUpdate(assignee="member-9"))
        types = {a.type for a in app_state.activity_store.activities}
        assert ActivityType.TASK_ASSIGNED not in types


class TestUnknownTaskId:
    """不存在的 ID：无变更、无活动"""

    def test_update_unknown_id_is_noop(self, app_state: AppState, project_id: str):
        app_state.task_store.add_task(
            CreateTaskDTO(project_id=project_id, title="a", estimated_cost=7)
        )
        tasks_before = app_state.task_store.tasks
        project_before = _project(app_state, project_id)
        activity_count = len(app_state.activity_store)

        result = app_state.task_store.update_task(
            "task-unknown", TaskUpdate(status=TaskStatus.DONE)
        )

        assert result is None
        assert app_state.task_store.tasks == tasks_before
        assert _project(app_state, project_id) == project_before
        assert len(app_state.activity_store) == activity_count

    def test_delete_unknown_id_is_noop(self, app_state: AppState, project_id: str):
        app_state.task_store.add_task(CreateTaskDTO(project_id=project_id, title="a"))
        project_before = _project(app_state, project_id)
        activity_count = len(app_state.activity_store)

        assert app_state.task_store.delete_task("task-unknown") is None
        assert len(app_state.task_store.tasks) == 1
        assert _project(app_state, project_id) == project_before
        assert len(app_state.activity_store) == activity_count


class TestTaskQueries:
    def test_new_task_defaults(self, app_state: AppState, project_id: str):
        task = app_state.task_store.add_task(CreateTaskDTO(project_id=project_id, title="t"))
        assert task.id.startswith("task-")
        assert task.tags == []
        assert task.status == TaskStatus.TODO
        assert task.created_at == task.updated_at

    def test_ids_are_unique_for_rapid_adds(self, app_state: AppState, project_id: str):
        ids = {
            app_state.task_store.add_task(
                CreateTaskDTO(project_id=project_id, title=str(i))
            ).id
            for i in range(20)
        }
        assert len(ids) == 20

    def test_filters_by_project_and_status(self, app_state: AppState, project_id: str):
        store = app_state.task_store
        store.add_task(CreateTaskDTO(project_id=project_id, title="a"))
        store.add_task(
            CreateTaskDTO(project_id=project_id, title="b", status=TaskStatus.DONE)
        )
        store.add_task(CreateTaskDTO(project_id="project-other", title="c"))

        assert [t.title for t in store.get_tasks_by_project(project_id)] == ["a", "b"]
        done = store.get_tasks_by_status(project_id, TaskStatus.DONE)
        assert [t.title for t in done] == ["b"]

    def test_update_dedupes_tags(self, app_state: AppState, project_id: str):
        task = app_state.task_store.add_task(CreateTaskDTO(project_id=project_id, title="t"))
        updated = app_state.task_store.update_task(
            task.id, TaskUpdate(tags=["ui", "api", "ui"])
        )
        assert updated.tags == ["ui", "api"]
        assert updated.updated_at >= task.updated_at


class TestNullUpdates:
    """必填字段的显式 null 在更新时被拒绝"""

    @pytest.mark.parametrize("field", ["status", "title", "projectId", "priority", "tags"])
    def test_update_dto_rejects_null(self, field: str):
        with pytest.raises(ValidationError):
            TaskUpdate.model_validate({field: None})

    def test_optional_fields_can_be_cleared(self):
        update = TaskUpdate.model_validate({"assignee": None, "dueDate": None})
        assert update.changes() == {"assignee": None, "due_date": None}

    def test_store_rejects_invalid_merge(self, app_state: AppState, project_id: str):
        """绕过 DTO 校验的非法合并不修改作业、项目和活动"""
        task = app_state.task_store.add_task(
            CreateTaskDTO(project_id=project_id, title="t", estimated_cost=10)
        )
        project_before = _project(app_state, project_id)
        activity_count = len(app_state.activity_store)

        invalid = (
            TaskUpdate.model_construct(status=None),
            TaskUpdate.model_construct(title=None),
        )
        for bad in invalid:
            with pytest.raises(ValidationError):
                app_state.task_store.update_task(task.id, bad)

        assert app_state.task_store.get_task(task.id) == task
        assert _project(app_state, project_id) == project_before
        assert len(app_state.activity_store) == activity_count
