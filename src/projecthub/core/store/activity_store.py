"""ActivityStore 内存实现

活动日志 append-only：新记录插入到最前，超过上限时丢弃最旧的记录。
使用有界 deque，淘汰为 O(1)。
"""

from collections import deque
from collections.abc import Iterable

from ..config import ACTIVITY_LOG_LIMIT, RECENT_ACTIVITY_DEFAULT_LIMIT
from ..models.activity import Activity, ActivityDraft
from ..models.base import new_activity_id, utc_now


class ActivityStore:
    """活动日志存储，按时间倒序保存（索引 0 为最新）"""

    def __init__(
        self,
        activities: Iterable[Activity] = (),
        limit: int = ACTIVITY_LOG_LIMIT,
    ) -> None:
        # deque 的左端是最新记录，maxlen 触发时从右端（最旧）淘汰
        self._activities: deque[Activity] = deque(activities, maxlen=limit)

    @property
    def limit(self) -> int:
        return self._activities.maxlen or ACTIVITY_LOG_LIMIT

    @property
    def activities(self) -> list[Activity]:
        return list(self._activities)

    def __len__(self) -> int:
        return len(self._activities)

    def add_activity(self, draft: ActivityDraft) -> Activity:
        """分配 id 与时间戳并插入到最前"""
        activity = Activity(
            **draft.model_dump(),
            id=new_activity_id(),
            timestamp=utc_now(),
        )
        self._activities.appendleft(activity)
        return activity

    def clear_activities(self) -> None:
        self._activities.clear()

    def get_activities_by_project(self, project_id: str) -> list[Activity]:
        return [a for a in self._activities if a.project_id == project_id]

    def get_activities_by_member(self, member_id: str) -> list[Activity]:
        """按成员查询 -- 操作者 user_id 或目标 member_id 任一匹配即可"""
        return [
            a
            for a in self._activities
            if a.user_id == member_id or a.member_id == member_id
        ]

    def get_recent_activities(
        self, limit: int = RECENT_ACTIVITY_DEFAULT_LIMIT
    ) -> list[Activity]:
        return list(self._activities)[: max(limit, 0)]
