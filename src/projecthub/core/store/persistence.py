"""Store 状态的序列化与反序列化

每个 Store 的完整状态以 JSON 保存在固定的存储键下：
    {"state": {<字段>: [...]}, "version": 0}
应用设置例外，直接保存扁平的设置对象。
问题跟踪的 envelope.state 同时包含 industry 与四个集合。

读取时数据缺失、无法解析或校验失败都静默回退到默认状态（只记录 warning 日志）。
"""

import json
from typing import Any

import structlog
from pydantic import TypeAdapter, ValidationError

from ..config import STORAGE_ENVELOPE_VERSION
from ..models.activity import Activity
from ..models.issue import IssueSnapshot
from ..models.member import Member
from ..models.project import Project
from ..models.settings import AppSettings
from ..models.task import Task

log = structlog.get_logger()

PROJECT_STORAGE_KEY = "project-storage"
TASK_STORAGE_KEY = "task-storage"
MEMBER_STORAGE_KEY = "member-storage"
ACTIVITY_STORAGE_KEY = "activity-storage"
SETTINGS_STORAGE_KEY = "app-settings"
ISSUE_STORAGE_KEY = "issue-storage"

ALL_STORAGE_KEYS: tuple[str, ...] = (
    PROJECT_STORAGE_KEY,
    TASK_STORAGE_KEY,
    MEMBER_STORAGE_KEY,
    ACTIVITY_STORAGE_KEY,
    SETTINGS_STORAGE_KEY,
    ISSUE_STORAGE_KEY,
)

# 存储键 -> envelope.state 中的列表字段名
_STATE_FIELDS: dict[str, str] = {
    PROJECT_STORAGE_KEY: "projects",
    TASK_STORAGE_KEY: "tasks",
    MEMBER_STORAGE_KEY: "members",
    ACTIVITY_STORAGE_KEY: "activities",
}

_ADAPTERS: dict[str, TypeAdapter] = {
    PROJECT_STORAGE_KEY: TypeAdapter(list[Project]),
    TASK_STORAGE_KEY: TypeAdapter(list[Task]),
    MEMBER_STORAGE_KEY: TypeAdapter(list[Member]),
    ACTIVITY_STORAGE_KEY: TypeAdapter(list[Activity]),
}


def encode_collection(key: str, items: list) -> str:
    """将实体列表编码为带 envelope 的 JSON 文本"""
    envelope = {
        "state": {_STATE_FIELDS[key]: [item.to_storage() for item in items]},
        "version": STORAGE_ENVELOPE_VERSION,
    }
    return json.dumps(envelope, ensure_ascii=False)


def decode_collection(key: str, raw: str | None) -> list:
    """从 envelope JSON 文本解码实体列表，任何错误都回退为空列表"""
    if raw is None:
        return []

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        log.warning("storage_blob_unparsable", key=key)
        return []

    state = data.get("state") if isinstance(data, dict) else None
    if not isinstance(state, dict):
        log.warning("storage_blob_missing_state", key=key)
        return []

    try:
        return _ADAPTERS[key].validate_python(state.get(_STATE_FIELDS[key], []))
    except ValidationError as e:
        log.warning("storage_blob_invalid", key=key, error_count=e.error_count())
        return []


def encode_settings(settings: AppSettings) -> str:
    return json.dumps(settings.to_storage(), ensure_ascii=False)


def decode_settings(raw: str | None) -> AppSettings:
    """解码设置：已保存字段覆盖默认值，失败时返回默认设置"""
    if raw is None:
        return AppSettings()

    try:
        saved: Any = json.loads(raw)
    except json.JSONDecodeError:
        log.warning("storage_blob_unparsable", key=SETTINGS_STORAGE_KEY)
        return AppSettings()

    if not isinstance(saved, dict):
        log.warning("storage_blob_invalid", key=SETTINGS_STORAGE_KEY)
        return AppSettings()

    try:
        return AppSettings.model_validate({**AppSettings().to_storage(), **saved})
    except ValidationError as e:
        log.warning(
            "storage_blob_invalid",
            key=SETTINGS_STORAGE_KEY,
            error_count=e.error_count(),
        )
        return AppSettings()


def encode_issues(snapshot: IssueSnapshot) -> str:
    envelope = {"state": snapshot.to_storage(), "version": STORAGE_ENVELOPE_VERSION}
    return json.dumps(envelope, ensure_ascii=False)


def decode_issues(raw: str | None) -> IssueSnapshot:
    """解码问题跟踪状态，失败时返回默认状态（含默认标签）"""
    if raw is None:
        return IssueSnapshot()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        log.warning("storage_blob_unparsable", key=ISSUE_STORAGE_KEY)
        return IssueSnapshot()

    state = data.get("state") if isinstance(data, dict) else None
    if not isinstance(state, dict):
        log.warning("storage_blob_missing_state", key=ISSUE_STORAGE_KEY)
        return IssueSnapshot()

    try:
        return IssueSnapshot.model_validate(state)
    except ValidationError as e:
        log.warning(
            "storage_blob_invalid",
            key=ISSUE_STORAGE_KEY,
            error_count=e.error_count(),
        )
        return IssueSnapshot()
