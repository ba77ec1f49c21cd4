"""structlog 配置

PROJECTHUB_LOG_FORMAT=json 时输出 JSON（韩文原样输出，不转义），
否则输出控制台格式。每条日志都带 app="projecthub"。
启动时记录一次生效的存储配置（数据库路径、活动日志上限）。
"""

import logging
import os

import structlog
from projecthub.core.config import get_activity_limit, get_db_path

APP_NAME = "projecthub"

# uvicorn 自带的访问日志与 request_completed 重复
_NOISY_LOGGERS = ("uvicorn.access",)


def add_app_name(logger, method_name: str, event_dict: dict) -> dict:
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def build_renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer()


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog 与标准库 logging

    参数缺省时读取 PROJECTHUB_LOG_FORMAT（json / dev）与 PROJECTHUB_LOG_LEVEL。
    """
    log_format = log_format or os.environ.get("PROJECTHUB_LOG_FORMAT", "dev")
    log_level = log_level or os.environ.get("PROJECTHUB_LOG_LEVEL", "INFO")

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        add_app_name,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=build_renderer(log_format),
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger().info(
        "logging_configured",
        log_format=log_format,
        log_level=log_level.upper(),
        db_path=get_db_path(),
        activity_limit=get_activity_limit(),
    )


def setup_logfire(app) -> None:
    """LOGFIRE_SEND_TO_LOGFIRE=true 时启用 Logfire（需要 LOGFIRE_TOKEN）"""
    if os.environ.get("LOGFIRE_SEND_TO_LOGFIRE", "false").lower() != "true":
        return

    try:
        import logfire

        logfire.configure(service_name=APP_NAME)
        logfire.instrument_fastapi(app)
    except Exception as e:
        # 初始化失败时只保留本地日志
        structlog.get_logger().warning("logfire_init_failed", error=str(e))
