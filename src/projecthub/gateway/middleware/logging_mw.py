"""LoggingMiddleware

每个请求绑定 request_id 与操作者（X-User-Id / X-User-Name），
服务层的活动日志和 structlog 事件因此能按操作者检索。
客户端传入的 X-Request-ID 原样沿用，否则生成 ULID。
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

from ..deps import get_actor

REQUEST_ID_HEADER = "X-Request-ID"

# 健康检查不记录请求日志
_QUIET_PATHS = frozenset({"/health", "/ready"})


def bind_request_context(request: Request) -> str:
    """绑定请求级 contextvars，返回 request_id"""
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(ULID())

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    )
    actor = get_actor(request)
    if actor is not None:
        structlog.contextvars.bind_contextvars(user_id=actor.id, user_name=actor.name)
    return request_id


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求级日志中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = bind_request_context(request)
        quiet = request.url.path in _QUIET_PATHS
        log = structlog.get_logger()
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            await log.aexception("request_failed")
            raise

        if not quiet:
            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            if response.status_code >= 500:
                await log.aerror(
                    "request_completed",
                    status_code=response.status_code,
                    duration_ms=duration_ms,
                )
            else:
                await log.ainfo(
                    "request_completed",
                    status_code=response.status_code,
                    duration_ms=duration_ms,
                )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
