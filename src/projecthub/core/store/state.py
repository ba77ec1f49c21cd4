"""应用状态容器

由组合根统一持有所有 Store，并通过窄接口把 TaskStore 接到
ProjectStore（聚合写回）和 ActivityStore（活动追加）上。
"""

from collections.abc import Iterable, Mapping

from ..config import ACTIVITY_LOG_LIMIT
from ..models.issue import IssueSnapshot
from ..models.member import Actor
from ..models.settings import AppSettings
from .activity_store import ActivityStore
from .issue_store import IssueStore
from .member_store import MemberStore
from .persistence import (
    ACTIVITY_STORAGE_KEY,
    ALL_STORAGE_KEYS,
    ISSUE_STORAGE_KEY,
    MEMBER_STORAGE_KEY,
    PROJECT_STORAGE_KEY,
    SETTINGS_STORAGE_KEY,
    TASK_STORAGE_KEY,
    decode_collection,
    decode_issues,
    decode_settings,
    encode_collection,
    encode_issues,
    encode_settings,
)
from .project_store import ProjectStore
from .task_store import TaskStore


class AppState:
    """所有 Store 的内存状态"""

    def __init__(
        self,
        *,
        projects: Iterable = (),
        tasks: Iterable = (),
        members: Iterable = (),
        activities: Iterable = (),
        settings: AppSettings | None = None,
        issues: IssueSnapshot | None = None,
        activity_limit: int = ACTIVITY_LOG_LIMIT,
    ) -> None:
        self.current_actor: Actor | None = None
        self.settings = settings or AppSettings()

        self.activity_store = ActivityStore(activities, limit=activity_limit)
        self.project_store = ProjectStore(
            self.activity_store, projects, actor_provider=self._get_actor
        )
        self.member_store = MemberStore(
            self.activity_store, members, actor_provider=self._get_actor
        )
        self.task_store = TaskStore(
            aggregates=self.project_store,
            activities=self.activity_store,
            tasks=tasks,
            actor_provider=self._get_actor,
        )
        self.issue_store = IssueStore(issues)

    def _get_actor(self) -> Actor | None:
        return self.current_actor

    @classmethod
    def from_blobs(
        cls,
        blobs: Mapping[str, str | None],
        activity_limit: int = ACTIVITY_LOG_LIMIT,
    ) -> "AppState":
        """从各存储键的原始 JSON 文本重建状态，缺失或损坏的键使用默认值"""
        return cls(
            projects=decode_collection(PROJECT_STORAGE_KEY, blobs.get(PROJECT_STORAGE_KEY)),
            tasks=decode_collection(TASK_STORAGE_KEY, blobs.get(TASK_STORAGE_KEY)),
            members=decode_collection(MEMBER_STORAGE_KEY, blobs.get(MEMBER_STORAGE_KEY)),
            activities=decode_collection(
                ACTIVITY_STORAGE_KEY, blobs.get(ACTIVITY_STORAGE_KEY)
            ),
            settings=decode_settings(blobs.get(SETTINGS_STORAGE_KEY)),
            issues=decode_issues(blobs.get(ISSUE_STORAGE_KEY)),
            activity_limit=activity_limit,
        )

    def to_blobs(self, keys: Iterable[str] = ALL_STORAGE_KEYS) -> dict[str, str]:
        """序列化指定存储键对应的状态"""
        encoders = {
            PROJECT_STORAGE_KEY: lambda: encode_collection(
                PROJECT_STORAGE_KEY, self.project_store.projects
            ),
            TASK_STORAGE_KEY: lambda: encode_collection(
                TASK_STORAGE_KEY, self.task_store.tasks
            ),
            MEMBER_STORAGE_KEY: lambda: encode_collection(
                MEMBER_STORAGE_KEY, self.member_store.members
            ),
            ACTIVITY_STORAGE_KEY: lambda: encode_collection(
                ACTIVITY_STORAGE_KEY, self.activity_store.activities
            ),
            SETTINGS_STORAGE_KEY: lambda: encode_settings(self.settings),
            ISSUE_STORAGE_KEY: lambda: encode_issues(self.issue_store.snapshot()),
        }
        return {key: encoders[key]() for key in keys}
