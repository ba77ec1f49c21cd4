"""数据备份与恢复

导出：把 project/task/member/settings 四个存储键的原始 JSON 文本打包为一个文档。
导入：解析失败则整体拒绝；成功时只覆盖文档中存在且非空的键，其余键保持不变。
导入后由调用方重新加载内存状态。
"""

import json
from datetime import UTC, datetime
from typing import Any

import aiosqlite
import structlog

from .config import BACKUP_VERSION
from .exceptions import BackupFormatError
from .store.kv_storage import SqliteKeyValueStorage
from .store.persistence import (
    MEMBER_STORAGE_KEY,
    PROJECT_STORAGE_KEY,
    SETTINGS_STORAGE_KEY,
    TASK_STORAGE_KEY,
)
from .store.transaction import write_items

log = structlog.get_logger()

# 备份文档字段 -> 存储键
BACKUP_FIELDS: dict[str, str] = {
    "projects": PROJECT_STORAGE_KEY,
    "tasks": TASK_STORAGE_KEY,
    "members": MEMBER_STORAGE_KEY,
    "settings": SETTINGS_STORAGE_KEY,
}

# "删除全部数据" 清理的存储键（不含设置与活动日志）
CLEARABLE_KEYS: tuple[str, ...] = (
    PROJECT_STORAGE_KEY,
    TASK_STORAGE_KEY,
    MEMBER_STORAGE_KEY,
)


async def export_backup(storage: SqliteKeyValueStorage) -> dict[str, Any]:
    """导出备份文档

    Returns:
        {"exportDate", "version", "projects", "tasks", "members", "settings"}，
        各数据字段为原始 JSON 文本，未保存过的键为 None
    """
    document: dict[str, Any] = {
        "exportDate": datetime.now(UTC).isoformat(),
        "version": BACKUP_VERSION,
    }
    for field, key in BACKUP_FIELDS.items():
        document[field] = await storage.get_item(key)
    return document


def parse_backup(text: str | bytes) -> dict[str, str]:
    """解析备份文档，返回待写入的 存储键 -> 文本

    Raises:
        BackupFormatError: 不是合法 JSON 或顶层不是对象
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise BackupFormatError(str(e)) from e

    if not isinstance(data, dict):
        raise BackupFormatError("top-level value must be an object")

    items: dict[str, str] = {}
    for field, key in BACKUP_FIELDS.items():
        value = data.get(field)
        if not value:
            continue
        items[key] = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
    return items


async def import_backup(
    conn: aiosqlite.Connection,
    storage: SqliteKeyValueStorage,
    text: str | bytes,
) -> list[str]:
    """导入备份文档

    Returns:
        被覆盖的存储键列表

    Raises:
        BackupFormatError: 文档无法解析，此时不写入任何键
    """
    items = parse_backup(text)
    await write_items(conn, storage, items)
    log.info("backup_imported", keys=sorted(items))
    return list(items)


async def clear_all_data(
    conn: aiosqlite.Connection,
    storage: SqliteKeyValueStorage,
) -> None:
    """删除项目、作业、成员数据"""
    await write_items(conn, storage, dict.fromkeys(CLEARABLE_KEYS))
    log.info("all_data_cleared", keys=list(CLEARABLE_KEYS))
