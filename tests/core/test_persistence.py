"""键值持久化测试

测试内容：
1. 状态写入后重新加载一致
2. 损坏或缺失的 blob 回退为默认状态
3. blob 使用 {"state": ..., "version": 0} envelope 与 camelCase 字段
"""

import json

import aiosqlite
import pytest
from projecthub.core.models import AppSettings, CreateProjectDTO, CreateTaskDTO, TaskStatus
from projecthub.core.store import (
    ACTIVITY_STORAGE_KEY,
    PROJECT_STORAGE_KEY,
    SETTINGS_STORAGE_KEY,
    TASK_STORAGE_KEY,
    SqliteKeyValueStorage,
    StoreGroup,
    create_store_group,
    write_items,
)
from projecthub.core.store.persistence import decode_collection, decode_settings
from projecthub.core.store.sqlite_init import verify_wal_mode


class TestKeyValueStorage:
    async def test_set_get_remove(self, db_conn: aiosqlite.Connection):
        storage = SqliteKeyValueStorage(db_conn)
        await storage.set_item("k", "v1")
        await storage.set_item("k", "v2")
        await db_conn.commit()

        assert await storage.get_item("k") == "v2"
        assert await storage.keys() == ["k"]

        await storage.remove_item("k")
        await db_conn.commit()
        assert await storage.get_item("k") is None

    async def test_write_items_deletes_none_values(self, db_conn: aiosqlite.Connection):
        storage = SqliteKeyValueStorage(db_conn)
        await write_items(db_conn, storage, {"a": "1", "b": "2"})
        await write_items(db_conn, storage, {"a": None, "c": "3"})
        assert await storage.get_items(["a", "b", "c"]) == {"a": None, "b": "2", "c": "3"}

    async def test_wal_mode_enabled(self, tmp_path):
        conn = await aiosqlite.connect(str(tmp_path / "wal.db"))
        from projecthub.core.store.sqlite_init import init_db

        await init_db(conn)
        assert await verify_wal_mode(conn)
        await conn.close()


class TestStoreGroupPersistence:
    async def test_round_trip(self, store_group: StoreGroup, tmp_db_path):
        state = store_group.state
        project = state.project_store.add_project(CreateProjectDTO(name="p", budget=10))
        state.task_store.add_task(
            CreateTaskDTO(
                project_id=project.id,
                title="t",
                status=TaskStatus.DONE,
                estimated_cost=3,
            )
        )
        state.settings = AppSettings(theme="dark")
        await store_group.persist()

        reopened = await create_store_group(str(tmp_db_path))
        try:
            loaded = reopened.state
            assert loaded.project_store.projects == state.project_store.projects
            assert loaded.task_store.tasks == state.task_store.tasks
            assert loaded.activity_store.activities == state.activity_store.activities
            assert loaded.settings.theme == "dark"
            assert loaded.project_store.projects[0].progress == 100
        finally:
            await reopened.close()

    async def test_blob_format(self, store_group: StoreGroup):
        store_group.state.project_store.add_project(
            CreateProjectDTO(name="p", team_size=3)
        )
        await store_group.persist([PROJECT_STORAGE_KEY])

        raw = await store_group.storage.get_item(PROJECT_STORAGE_KEY)
        data = json.loads(raw)
        assert data["version"] == 0
        stored = data["state"]["projects"][0]
        assert stored["teamSize"] == 3
        assert stored["spentBudget"] == 0
        assert "isFavorite" in stored
        # 只写入指定的键
        assert await store_group.storage.get_item(TASK_STORAGE_KEY) is None

    async def test_reload_keeps_actor(self, store_group: StoreGroup):
        from projecthub.core.models import Actor

        store_group.state.current_actor = Actor(id="member-1", name="a")
        await store_group.reload()
        assert store_group.state.current_actor.id == "member-1"


class TestCorruptBlobs:
    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            "[]",
            '{"version": 0}',
            '{"state": {"tasks": [{"id": "task-1"}]}, "version": 0}',
        ],
    )
    def test_collection_falls_back_to_empty(self, raw: str):
        assert decode_collection(TASK_STORAGE_KEY, raw) == []

    def test_missing_field_in_state_is_empty(self):
        assert decode_collection(ACTIVITY_STORAGE_KEY, '{"state": {}, "version": 0}') == []

    def test_settings_merge_over_defaults(self):
        settings = decode_settings('{"theme": "dark", "language": "en"}')
        assert settings.theme == "dark"
        assert settings.language == "en"
        assert settings.primary_color == "#667eea"
        assert settings.notifications.deadline_days == 3

    @pytest.mark.parametrize("raw", ["oops", "1", '{"fontSize": "big"}'])
    def test_bad_settings_fall_back_to_defaults(self, raw: str):
        assert decode_settings(raw) == AppSettings()

    async def test_store_group_loads_with_corrupt_blob(self, tmp_db_path):
        group = await create_store_group(str(tmp_db_path))
        await write_items(
            group.conn,
            group.storage,
            {TASK_STORAGE_KEY: "garbage", SETTINGS_STORAGE_KEY: "garbage"},
        )
        await group.reload()
        assert group.state.task_store.tasks == []
        assert group.state.settings == AppSettings()
        await group.close()
