"""端到端集成测试 -- 通过完整 lifespan 启动应用

1. 项目 X 的预算场景经 HTTP 驱动，数值与核心计算一致
2. 重启应用后状态从 SQLite 恢复
"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest_asyncio.fixture
async def app_factory(tmp_path: Path) -> AsyncGenerator:
    os.environ["PROJECTHUB_DATA_DIR"] = str(tmp_path / "data")
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from projecthub.gateway.main import create_app

    yield create_app

    os.environ.pop("PROJECTHUB_DATA_DIR", None)
    os.environ.pop("LOGFIRE_SEND_TO_LOGFIRE", None)


async def _run(app, scenario):
    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as client:
            return await scenario(client)


class TestWorkspaceEndToEnd:
    async def test_budget_scenario_survives_restart(self, app_factory, tmp_path: Path):
        async def scenario(client: AsyncClient):
            project = (
                await client.post(
                    "/api/projects", json={"name": "X", "budget": 1_000_000}
                )
            ).json()
            pid = project["id"]

            task_a = (
                await client.post(
                    "/api/tasks",
                    json={"projectId": pid, "title": "A", "estimatedCost": 100_000},
                )
            ).json()
            current = (await client.get(f"/api/projects/{pid}")).json()
            assert (current["progress"], current["spentBudget"]) == (0, 100_000)

            await client.patch(f"/api/tasks/{task_a['id']}", json={"status": "IN_PROGRESS"})
            assert (await client.get(f"/api/projects/{pid}")).json()["progress"] == 50

            await client.post(
                "/api/tasks",
                json={
                    "projectId": pid,
                    "title": "B",
                    "status": "DONE",
                    "actualCost": 200_000,
                },
            )
            current = (await client.get(f"/api/projects/{pid}")).json()
            assert (current["progress"], current["spentBudget"]) == (75, 300_000)

            await client.delete(f"/api/tasks/{task_a['id']}")
            current = (await client.get(f"/api/projects/{pid}")).json()
            assert (current["progress"], current["spentBudget"]) == (100, 200_000)
            return pid

        pid = await _run(app_factory(), scenario)

        assert (tmp_path / "data" / "sqlite" / "projecthub.db").exists()
        assert (tmp_path / "data" / "files").is_dir()

        async def after_restart(client: AsyncClient):
            project = (await client.get(f"/api/projects/{pid}")).json()
            assert (project["progress"], project["spentBudget"]) == (100, 200_000)
            tasks = (await client.get("/api/tasks", params={"projectId": pid})).json()
            assert [t["title"] for t in tasks] == ["B"]
            types = [a["type"] for a in (await client.get("/api/activities")).json()]
            assert types == [
                "TASK_DELETED",
                "TASK_CREATED",
                "TASK_STATUS_CHANGED",
                "TASK_CREATED",
                "PROJECT_CREATED",
            ]

        await _run(app_factory(), after_restart)
