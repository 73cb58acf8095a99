"""Tests for the post endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, patch

import pytest

from socialdesk.exceptions import AgentOutputNotFoundError, AgentUnavailableError
from socialdesk.services.agent_output import ParsedSocialPost
from tests.conftest import create_test_client

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from httpx import AsyncClient

    from socialdesk.config import Settings

PARSED = ParsedSocialPost(
    title="Storm closes harbour",
    twitter="tweet",
    instagram="gram",
    facebook="fb",
    sources=["[1] https://news.example.com"],
    images={"facebook": True, "instagram": False, "twitter": False},
)


@pytest.fixture
async def client(test_settings: Settings) -> AsyncGenerator[AsyncClient]:
    async with create_test_client(test_settings) as ac:
        yield ac


def _agent_returns(result: ParsedSocialPost | Exception) -> Any:
    outcome = "side_effect" if isinstance(result, Exception) else "return_value"
    return patch(
        "socialdesk.api.posts.fetch_latest_agent_posts",
        new_callable=AsyncMock,
        **{outcome: result},
    )


class TestPostEndpoints:
    async def test_import_get_list_delete(self, client: AsyncClient) -> None:
        with _agent_returns(PARSED):
            resp = await client.post(
                "/api/posts/import", json={"image_url": "https://img.test/a.png"}
            )
        assert resp.status_code == 201
        post = resp.json()
        assert post["title"] == "Storm closes harbour"
        assert post["image_url"] == "https://img.test/a.png"
        assert post["images"]["facebook"] is True
        assert post["published_to"] == {}

        resp = await client.get(f"/api/posts/{post['id']}")
        assert resp.status_code == 200
        assert resp.json()["sources"] == ["[1] https://news.example.com"]

        resp = await client.get("/api/posts")
        assert [p["id"] for p in resp.json()] == [post["id"]]

        resp = await client.delete(f"/api/posts/{post['id']}")
        assert resp.status_code == 204
        resp = await client.get(f"/api/posts/{post['id']}")
        assert resp.status_code == 404

    async def test_delete_missing_returns_404(self, client: AsyncClient) -> None:
        resp = await client.delete("/api/posts/missing")
        assert resp.status_code == 404

    async def test_latest_agent_posts_are_not_stored(self, client: AsyncClient) -> None:
        with _agent_returns(PARSED):
            resp = await client.get("/api/posts/agent/latest")
        assert resp.status_code == 200
        assert resp.json()["twitter"] == "tweet"

        resp = await client.get("/api/posts")
        assert resp.json() == []

    async def test_agent_unavailable_returns_503(self, client: AsyncClient) -> None:
        with _agent_returns(AgentUnavailableError("Cannot reach LangGraph server at x")):
            resp = await client.post("/api/posts/import", json={})
        assert resp.status_code == 503
        assert "Cannot reach" in resp.json()["detail"]

    async def test_no_agent_output_returns_404(self, client: AsyncClient) -> None:
        with _agent_returns(AgentOutputNotFoundError("No agent runs found. Run the agent first.")):
            resp = await client.get("/api/posts/agent/latest")
        assert resp.status_code == 404
