"""枚举定义

包含 TaskStatus、TaskPriority、ProjectStatus、MemberRole、ActivityType 等枚举，
以及状态标签 STATUS_LABELS 和进度权重 PROGRESS_WEIGHTS。

枚举取值是持久化 JSON 的一部分，不能修改。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """作业状态"""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    DONE = "DONE"


class TaskPriority(StrEnum):
    """作业优先级"""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class ProjectStatus(StrEnum):
    """项目状态"""

    PLANNING = "PLANNING"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ProjectPriority(StrEnum):
    """项目优先级"""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class Methodology(StrEnum):
    """开发方法论（仅为兼容旧数据保留）"""

    WATERFALL = "WATERFALL"
    AGILE = "AGILE"
    SCRUM = "SCRUM"
    KANBAN = "KANBAN"


class MemberRole(StrEnum):
    """成员角色"""

    PROJECT_MANAGER = "PROJECT_MANAGER"
    DEVELOPER = "DEVELOPER"
    DESIGNER = "DESIGNER"
    QA = "QA"
    ANALYST = "ANALYST"


class MemberStatus(StrEnum):
    """成员在线状态"""

    ONLINE = "online"
    OFFLINE = "offline"
    BUSY = "busy"
    VACATION = "vacation"
    MEETING = "meeting"


class ActivityType(StrEnum):
    """活动类型 -- 按实体分组"""

    # 作业
    TASK_CREATED = "TASK_CREATED"
    TASK_UPDATED = "TASK_UPDATED"
    TASK_DELETED = "TASK_DELETED"
    TASK_STATUS_CHANGED = "TASK_STATUS_CHANGED"
    TASK_ASSIGNED = "TASK_ASSIGNED"

    # 项目
    PROJECT_CREATED = "PROJECT_CREATED"
    PROJECT_UPDATED = "PROJECT_UPDATED"
    PROJECT_DELETED = "PROJECT_DELETED"
    PROJECT_COMPLETED = "PROJECT_COMPLETED"

    # 成员
    MEMBER_ADDED = "MEMBER_ADDED"
    MEMBER_UPDATED = "MEMBER_UPDATED"
    MEMBER_REMOVED = "MEMBER_REMOVED"


# 作业状态显示名（写入活动记录的 old_value / new_value）
STATUS_LABELS: dict[TaskStatus, str] = {
    TaskStatus.TODO: "할일",
    TaskStatus.IN_PROGRESS: "진행중",
    TaskStatus.REVIEW: "검토중",
    TaskStatus.DONE: "완료",
}

# 项目进度计算中各状态的权重
PROGRESS_WEIGHTS: dict[TaskStatus, float] = {
    TaskStatus.TODO: 0.0,
    TaskStatus.IN_PROGRESS: 0.5,
    TaskStatus.REVIEW: 0.8,
    TaskStatus.DONE: 1.0,
}

# 高优先级集合（看板负载统计用）
HIGH_PRIORITIES: set[TaskPriority] = {TaskPriority.HIGH, TaskPriority.URGENT}


def status_label(status: TaskStatus) -> str:
    """返回作业状态的显示名"""
    return STATUS_LABELS[TaskStatus(status)]
