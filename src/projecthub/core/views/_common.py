"""视图层公共工具"""

import math
from datetime import UTC, datetime, timedelta


def round_half_up(value: float) -> int:
    """四舍五入到整数（0.5 向上取整）"""
    return math.floor(value + 0.5)


def percent(part: float, whole: float) -> int:
    """百分比，分母为 0 时返回 0"""
    return round_half_up(part / whole * 100) if whole > 0 else 0


def as_utc(value: datetime) -> datetime:
    """无时区的时间按 UTC 处理"""
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def whole_days_between(start: datetime, end: datetime) -> int:
    """end - start 的整天数，向零截断"""
    return int((as_utc(end) - as_utc(start)) / timedelta(days=1))


def start_of_week(moment: datetime) -> datetime:
    """所在周的周日 00:00"""
    moment = as_utc(moment)
    days_since_sunday = (moment.weekday() + 1) % 7
    day = moment - timedelta(days=days_since_sunday)
    return day.replace(hour=0, minute=0, second=0, microsecond=0)
