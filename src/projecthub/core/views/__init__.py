"""派生视图 -- 对 Store 数据的纯读取计算"""

from .calendar import CalendarEvent, build_calendar_events, events_for_date
from .dashboard import DashboardStats, MemberWorkload, build_dashboard
from .notifications import Notification, derive_notifications
from .reports import Report, build_report
from .timeline import (
    ProjectTimeline,
    Timeline,
    TimelineRow,
    build_timeline,
    project_timeline,
    week_of_month,
)

__all__ = [
    "DashboardStats",
    "MemberWorkload",
    "build_dashboard",
    "Notification",
    "derive_notifications",
    "Report",
    "build_report",
    "CalendarEvent",
    "build_calendar_events",
    "events_for_date",
    "Timeline",
    "TimelineRow",
    "ProjectTimeline",
    "build_timeline",
    "project_timeline",
    "week_of_month",
]
