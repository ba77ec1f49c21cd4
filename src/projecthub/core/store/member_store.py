"""MemberStore 内存实现

删除成员不会级联清理作业上的 assignee 引用。
"""

from collections.abc import Iterable

from ..config import DEFAULT_ACTOR_NAME
from ..models.activity import ActivityDraft
from ..models.base import new_entity_id
from ..models.enums import ActivityType
from ..models.member import CreateMemberDTO, Member, MemberUpdate
from .protocols import ActivitySink, ActorProvider


class MemberStore:
    """成员存储"""

    def __init__(
        self,
        activities: ActivitySink,
        members: Iterable[Member] = (),
        actor_provider: ActorProvider = lambda: None,
    ) -> None:
        self._members: list[Member] = list(members)
        self._activities = activities
        self._actor_provider = actor_provider

    @property
    def members(self) -> list[Member]:
        return list(self._members)

    def get_member_by_id(self, member_id: str) -> Member | None:
        return next((m for m in self._members if m.id == member_id), None)

    def _record(self, activity_type: ActivityType, member: Member, name: str | None = None) -> None:
        actor = self._actor_provider()
        self._activities.add_activity(
            ActivityDraft(
                type=activity_type,
                user_id=actor.id if actor else None,
                user_name=actor.name if actor else DEFAULT_ACTOR_NAME,
                member_id=member.id,
                member_name=name or member.name,
            )
        )

    def add_member(self, data: CreateMemberDTO) -> Member:
        member = Member(**data.model_dump(), id=new_entity_id("member"))
        self._members.append(member)
        self._record(ActivityType.MEMBER_ADDED, member)
        return member

    def update_member(self, member_id: str, data: MemberUpdate) -> Member | None:
        for i, member in enumerate(self._members):
            if member.id == member_id:
                changes = data.changes()
                updated = Member.model_validate({**member.model_dump(), **changes})
                self._members[i] = updated
                self._record(ActivityType.MEMBER_UPDATED, member, name=changes.get("name"))
                return updated
        return None

    def delete_member(self, member_id: str) -> Member | None:
        member = self.get_member_by_id(member_id)
        if member is None:
            return None
        self._members = [m for m in self._members if m.id != member_id]
        self._record(ActivityType.MEMBER_REMOVED, member)
        return member
