"""Integration tests for the FastAPI push router."""

import httpx
import pytest

fastapi = pytest.importorskip("fastapi")

from lineframes.adapters.frameworks.fastapi import create_frames_router  # noqa: E402
from lineframes.core.converter import GroupingConverter  # noqa: E402


@pytest.fixture
def app(frame_storage):
    """FastAPI app with the frames router mounted."""
    application = fastapi.FastAPI()
    application.include_router(create_frames_router(GroupingConverter(), frame_storage))
    return application


@pytest.fixture
async def client(app):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client


class TestFastAPIRouter:
    """Tests for create_frames_router()."""

    @pytest.mark.tier(2)
    @pytest.mark.fastapi
    async def test_push_returns_frames(self, client, load_testdata) -> None:
        response = await client.post("/push", content=load_testdata("single_metric"))

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/x-ndjson")
        assert len(response.text.splitlines()) == 1

    @pytest.mark.tier(2)
    @pytest.mark.fastapi
    async def test_push_parse_error(self, client) -> None:
        response = await client.post("/push", content=b"nonsense")

        assert response.status_code == 400
        assert "error" in response.json()

    @pytest.mark.tier(2)
    @pytest.mark.fastapi
    async def test_get_frames_with_filter(self, client) -> None:
        await client.post("/push", content=b"cpu v=1 1\nmem v=2 1\n")

        all_frames = await client.get("/frames")
        mem_only = await client.get("/frames", params={"name": "mem"})

        assert len(all_frames.text.splitlines()) == 2
        assert len(mem_only.text.splitlines()) == 1
        assert '"name": "mem"' in mem_only.text
