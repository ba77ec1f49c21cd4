"""中间件测试

1. 路径中的实体 ID 提取
2. 请求上下文绑定 request_id 与操作者
3. JSON 日志保留韩文并带 app 字段
"""

import json
from urllib.parse import quote

import structlog
from httpx import AsyncClient
from projecthub.gateway.middleware.logging_config import add_app_name, build_renderer
from projecthub.gateway.middleware.logging_mw import bind_request_context
from projecthub.gateway.middleware.trace_mw import extract_entity_ids
from starlette.requests import Request


def _request(headers: dict[str, str]) -> Request:
    return Request(
        {
            "type": "http",
            "method": "PATCH",
            "path": "/api/tasks/task-1",
            "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        }
    )


class TestExtractEntityIds:
    def test_task_id(self):
        assert extract_entity_ids("/api/tasks/task-1712345678901") == {
            "task_id": "task-1712345678901"
        }

    def test_nested_route(self):
        assert extract_entity_ids("/api/projects/project-1/activities") == {
            "project_id": "project-1"
        }

    def test_collection_paths_have_no_ids(self):
        assert extract_entity_ids("/api/tasks") == {}
        assert extract_entity_ids("/api/settings/item") == {}

    def test_non_entity_segment_ignored(self):
        assert extract_entity_ids("/api/projects/favorites") == {}

    def test_issue_id(self):
        assert extract_entity_ids("/api/issues/issue-1712345678901/comments") == {
            "issue_id": "issue-1712345678901"
        }


class TestRequestContext:
    def teardown_method(self):
        structlog.contextvars.clear_contextvars()

    def test_actor_bound_from_headers(self):
        request = _request({"X-User-Id": "member-1", "X-User-Name": quote("김철수")})
        request_id = bind_request_context(request)

        bound = structlog.contextvars.get_contextvars()
        assert bound["request_id"] == request_id
        assert bound["user_id"] == "member-1"
        assert bound["user_name"] == "김철수"
        assert bound["path"] == "/api/tasks/task-1"

    def test_anonymous_request(self):
        bind_request_context(_request({"X-User-Id": "stale"}))
        bind_request_context(_request({}))
        assert "user_id" not in structlog.contextvars.get_contextvars()

    def test_incoming_request_id_kept(self):
        assert bind_request_context(_request({"X-Request-ID": "req-42"})) == "req-42"

    async def test_response_carries_request_id(self, client: AsyncClient):
        resp = await client.get("/api/projects")
        assert resp.headers["X-Request-ID"]

        resp = await client.get("/api/projects", headers={"X-Request-ID": "req-7"})
        assert resp.headers["X-Request-ID"] == "req-7"


class TestLogRendering:
    def test_json_keeps_korean(self):
        event = add_app_name(None, "info", {"event": "작업 완료", "user_name": "김철수"})
        line = build_renderer("json")(None, "info", event)
        assert "작업 완료" in line
        assert json.loads(line)["app"] == "projecthub"

    def test_app_name_not_overwritten(self):
        assert add_app_name(None, "info", {"app": "worker"})["app"] == "worker"
