"""模型公共基类与 ID 生成

持久化 JSON 沿用 camelCase 字段名，Python 侧使用 snake_case 属性。
"""

import secrets
import string
import threading
import time
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_BASE36 = string.digits + string.ascii_lowercase


class CamelModel(BaseModel):
    """camelCase 别名的模型基类"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_storage(self) -> dict:
        """序列化为持久化用的 JSON 兼容 dict（camelCase，省略 None）"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class _MillisClock:
    """单调递增的毫秒时间戳，保证同一毫秒内生成的 ID 不重复"""

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            now = time.time_ns() // 1_000_000
            self._last = now if now > self._last else self._last + 1
            return self._last


_clock = _MillisClock()


def utc_now() -> datetime:
    return datetime.now(UTC)


def new_entity_id(prefix: str) -> str:
    """生成 `<prefix>-<毫秒时间戳>` 格式的实体 ID"""
    return f"{prefix}-{_clock.next()}"


def new_activity_id() -> str:
    """生成 `activity-<毫秒时间戳>-<9 位 base36 随机串>` 格式的活动 ID"""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"activity-{_clock.next()}-{suffix}"


def not_null(value):
    """部分更新中非空字段不接受显式 null"""
    if value is None:
        raise ValueError("field cannot be null")
    return value
