"""活动记录的展示映射 -- 消息模板、图标名、颜色

纯函数，不访问任何 Store。
"""

from .models.activity import Activity
from .models.enums import ActivityType

DEFAULT_MESSAGE = "활동이 기록되었습니다"
DEFAULT_ICON = "info-circle"
DEFAULT_COLOR = "#8c8c8c"

_MESSAGE_TEMPLATES: dict[ActivityType, str] = {
    ActivityType.TASK_CREATED: '새 작업 "{task_name}"을(를) 생성했습니다',
    ActivityType.TASK_UPDATED: '작업 "{task_name}"을(를) 수정했습니다',
    ActivityType.TASK_DELETED: '작업 "{task_name}"을(를) 삭제했습니다',
    ActivityType.TASK_STATUS_CHANGED: (
        '작업 "{task_name}" 상태를 {old_value}에서 {new_value}(으)로 변경했습니다'
    ),
    ActivityType.TASK_ASSIGNED: '작업 "{task_name}"을(를) {new_value}에게 할당했습니다',
    ActivityType.PROJECT_CREATED: '새 프로젝트 "{project_name}"을(를) 생성했습니다',
    ActivityType.PROJECT_UPDATED: '프로젝트 "{project_name}"을(를) 수정했습니다',
    ActivityType.PROJECT_DELETED: '프로젝트 "{project_name}"을(를) 삭제했습니다',
    ActivityType.PROJECT_COMPLETED: '프로젝트 "{project_name}"을(를) 완료했습니다',
    ActivityType.MEMBER_ADDED: '새 팀원 "{member_name}"을(를) 추가했습니다',
    ActivityType.MEMBER_UPDATED: '팀원 "{member_name}" 정보를 수정했습니다',
    ActivityType.MEMBER_REMOVED: '팀원 "{member_name}"을(를) 제거했습니다',
}

_ICONS: dict[ActivityType, str] = {
    ActivityType.TASK_CREATED: "plus-circle",
    ActivityType.TASK_UPDATED: "edit",
    ActivityType.TASK_DELETED: "delete",
    ActivityType.TASK_STATUS_CHANGED: "swap",
    ActivityType.TASK_ASSIGNED: "user",
    ActivityType.PROJECT_CREATED: "folder-add",
    ActivityType.PROJECT_UPDATED: "folder",
    ActivityType.PROJECT_DELETED: "folder-delete",
    ActivityType.PROJECT_COMPLETED: "check-circle",
    ActivityType.MEMBER_ADDED: "user-add",
    ActivityType.MEMBER_UPDATED: "user",
    ActivityType.MEMBER_REMOVED: "user-delete",
}

_COLORS: dict[ActivityType, str] = {
    ActivityType.TASK_CREATED: "#52c41a",
    ActivityType.PROJECT_CREATED: "#52c41a",
    ActivityType.MEMBER_ADDED: "#52c41a",
    ActivityType.TASK_UPDATED: "#1890ff",
    ActivityType.PROJECT_UPDATED: "#1890ff",
    ActivityType.MEMBER_UPDATED: "#1890ff",
    ActivityType.TASK_ASSIGNED: "#1890ff",
    ActivityType.TASK_DELETED: "#ff4d4f",
    ActivityType.PROJECT_DELETED: "#ff4d4f",
    ActivityType.MEMBER_REMOVED: "#ff4d4f",
    ActivityType.TASK_STATUS_CHANGED: "#faad14",
    ActivityType.PROJECT_COMPLETED: "#722ed1",
}


def _coerce_type(value: str) -> ActivityType | None:
    try:
        return ActivityType(value)
    except ValueError:
        return None


def get_activity_message(activity: Activity) -> str:
    """将活动记录渲染为可读消息；未知类型回退到 description 或默认文案"""
    template = _MESSAGE_TEMPLATES.get(_coerce_type(activity.type))
    if template is None:
        return activity.description or DEFAULT_MESSAGE
    fields = {
        name: "" if value is None else value
        for name, value in activity.model_dump(
            include={"task_name", "project_name", "member_name", "old_value", "new_value"}
        ).items()
    }
    return template.format(**fields)


def get_activity_icon(activity_type: str) -> str:
    return _ICONS.get(_coerce_type(activity_type), DEFAULT_ICON)


def get_activity_color(activity_type: str) -> str:
    return _COLORS.get(_coerce_type(activity_type), DEFAULT_COLOR)
