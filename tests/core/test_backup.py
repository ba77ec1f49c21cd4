"""备份导出/导入测试"""

import json

import pytest
from projecthub.core.backup import clear_all_data, export_backup, import_backup, parse_backup
from projecthub.core.exceptions import BackupFormatError
from projecthub.core.models import AppSettings, CreateMemberDTO, CreateProjectDTO, MemberRole
from projecthub.core.store import (
    ACTIVITY_STORAGE_KEY,
    MEMBER_STORAGE_KEY,
    PROJECT_STORAGE_KEY,
    SETTINGS_STORAGE_KEY,
    TASK_STORAGE_KEY,
    StoreGroup,
)


async def _seed(group: StoreGroup) -> None:
    state = group.state
    state.project_store.add_project(CreateProjectDTO(name="p"))
    state.member_store.add_member(
        CreateMemberDTO(name="m", email="m@example.com", role=MemberRole.QA)
    )
    state.settings = AppSettings(theme="dark")
    await group.persist()


class TestExport:
    async def test_export_contains_raw_blobs(self, store_group: StoreGroup):
        await _seed(store_group)
        document = await export_backup(store_group.storage)

        assert document["version"] == "1.0"
        assert "exportDate" in document
        assert document["projects"] == await store_group.storage.get_item(PROJECT_STORAGE_KEY)
        assert document["tasks"] == await store_group.storage.get_item(TASK_STORAGE_KEY)
        assert json.loads(document["settings"])["theme"] == "dark"
        # 活动日志不在备份范围内
        assert "activities" not in document

    async def test_export_of_empty_storage(self, store_group: StoreGroup):
        document = await export_backup(store_group.storage)
        assert document["projects"] is None
        assert document["settings"] is None


class TestImport:
    async def test_partial_import_keeps_other_keys(self, store_group: StoreGroup):
        await _seed(store_group)
        settings_before = await store_group.storage.get_item(SETTINGS_STORAGE_KEY)
        members_before = await store_group.storage.get_item(MEMBER_STORAGE_KEY)

        new_projects = json.dumps(
            {"state": {"projects": []}, "version": 0}, ensure_ascii=False
        )
        keys = await import_backup(
            store_group.conn,
            store_group.storage,
            json.dumps({"projects": new_projects, "members": ""}),
        )

        assert keys == [PROJECT_STORAGE_KEY]
        assert await store_group.storage.get_item(PROJECT_STORAGE_KEY) == new_projects
        assert await store_group.storage.get_item(SETTINGS_STORAGE_KEY) == settings_before
        assert await store_group.storage.get_item(MEMBER_STORAGE_KEY) == members_before

    async def test_import_then_reload(self, store_group: StoreGroup):
        await _seed(store_group)
        document = await export_backup(store_group.storage)

        await clear_all_data(store_group.conn, store_group.storage)
        await store_group.reload()
        assert store_group.state.project_store.projects == []

        await import_backup(store_group.conn, store_group.storage, json.dumps(document))
        await store_group.reload()
        assert [p.name for p in store_group.state.project_store.projects] == ["p"]
        assert store_group.state.settings.theme == "dark"

    @pytest.mark.parametrize("text", ["not json", "[1, 2]", '"string"', b"\xff\xfe"])
    async def test_malformed_import_writes_nothing(self, store_group: StoreGroup, text):
        await _seed(store_group)
        snapshot = await store_group.storage.get_items(
            [PROJECT_STORAGE_KEY, MEMBER_STORAGE_KEY, SETTINGS_STORAGE_KEY]
        )

        with pytest.raises(BackupFormatError):
            await import_backup(store_group.conn, store_group.storage, text)

        after = await store_group.storage.get_items(
            [PROJECT_STORAGE_KEY, MEMBER_STORAGE_KEY, SETTINGS_STORAGE_KEY]
        )
        assert after == snapshot

    def test_object_values_are_serialized(self):
        items = parse_backup(json.dumps({"settings": {"theme": "dark"}}))
        assert json.loads(items[SETTINGS_STORAGE_KEY]) == {"theme": "dark"}


class TestClearAllData:
    async def test_clears_entities_but_keeps_settings_and_activities(
        self, store_group: StoreGroup
    ):
        await _seed(store_group)
        await clear_all_data(store_group.conn, store_group.storage)

        storage = store_group.storage
        assert await storage.get_item(PROJECT_STORAGE_KEY) is None
        assert await storage.get_item(MEMBER_STORAGE_KEY) is None
        assert await storage.get_item(SETTINGS_STORAGE_KEY) is not None
        assert await storage.get_item(ACTIVITY_STORAGE_KEY) is not None
