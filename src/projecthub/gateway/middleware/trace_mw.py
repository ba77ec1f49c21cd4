"""TraceMiddleware

从路径中提取实体 ID（projects、tasks、members、issues 下的 {id}），
绑定到 structlog context，便于按实体检索变更日志。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# 路径段 -> 绑定到日志的字段名
_ENTITY_SEGMENTS = {
    "projects": "project_id",
    "tasks": "task_id",
    "members": "member_id",
    "issues": "issue_id",
}


def extract_entity_ids(path: str) -> dict[str, str]:
    """从 URL 路径提取实体 ID

    只识别带前缀的实体 ID（例如 task-1712345678901），
    子路由（如 /favorite）不会被当作 ID。
    """
    parts = [p for p in path.split("/") if p]
    found: dict[str, str] = {}
    for i, part in enumerate(parts[:-1]):
        field = _ENTITY_SEGMENTS.get(part)
        if field is None:
            continue
        candidate = parts[i + 1]
        if candidate.startswith(f"{part[:-1]}-"):
            found[field] = candidate
    return found


class TraceMiddleware(BaseHTTPMiddleware):
    """实体级追踪中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        entity_ids = extract_entity_ids(request.url.path)
        if entity_ids:
            structlog.contextvars.bind_contextvars(**entity_ids)

        return await call_next(request)
