"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、上传目录、活动日志上限、备份版本等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("PROJECTHUB_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 键值存储路径"""
    return os.environ.get(
        "PROJECTHUB_DB_PATH",
        str(_get_base_dir() / "sqlite" / "projecthub.db"),
    )


def get_upload_dir() -> Path:
    """获取上传文件存储目录"""
    return Path(
        os.environ.get(
            "PROJECTHUB_UPLOAD_DIR",
            str(_get_base_dir() / "files"),
        )
    )


def get_activity_limit() -> int:
    """获取活动日志保留条数上限"""
    return int(os.environ.get("PROJECTHUB_ACTIVITY_LIMIT", str(ACTIVITY_LOG_LIMIT)))


# 活动日志最多保留的条数（超出后丢弃最旧的记录）
ACTIVITY_LOG_LIMIT: int = 500

# get_recent_activities 默认返回条数
RECENT_ACTIVITY_DEFAULT_LIMIT: int = 50

# 未登录时活动记录使用的操作者名称
DEFAULT_ACTOR_NAME: str = "사용자"

# 备份文件格式版本
BACKUP_VERSION: str = "1.0"

# 持久化 blob 的 envelope 版本
STORAGE_ENVELOPE_VERSION: int = 0
