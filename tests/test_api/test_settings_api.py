"""Tests for the settings endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from socialdesk.services.settings_service import SECRET_MASK
from tests.conftest import create_test_client

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from httpx import AsyncClient

    from socialdesk.config import Settings


@pytest.fixture
async def client(test_settings: Settings) -> AsyncGenerator[AsyncClient]:
    async with create_test_client(test_settings) as ac:
        yield ac


class TestSettingsEndpoints:
    async def test_update_and_read_back_masked(self, client: AsyncClient) -> None:
        resp = await client.put(
            "/api/settings",
            json={"values": {"social_fb_token": "secret", "social_fb_page_id": "42"}},
        )
        assert resp.status_code == 200
        assert resp.json()["values"] == {
            "social_fb_token": SECRET_MASK,
            "social_fb_page_id": "42",
        }

        resp = await client.get("/api/settings")
        assert resp.json()["values"]["social_fb_token"] == SECRET_MASK

    async def test_masked_map_can_be_sent_back(self, client: AsyncClient) -> None:
        await client.put("/api/settings", json={"values": {"social_fb_token": "secret"}})
        await client.put(
            "/api/settings",
            json={"values": {"social_fb_token": SECRET_MASK, "social_fb_enabled": "true"}},
        )
        resp = await client.get("/api/settings")
        values = resp.json()["values"]
        assert values["social_fb_token"] == SECRET_MASK
        assert values["social_fb_enabled"] == "true"

    async def test_empty_key_is_rejected(self, client: AsyncClient) -> None:
        resp = await client.put("/api/settings", json={"values": {"": "x"}})
        assert resp.status_code == 422
        assert "non-empty" in resp.json()["detail"]


class TestSocialSettings:
    async def test_reports_environment_credentials(
        self, client: AsyncClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("FB_TOKEN", "env-secret")
        monkeypatch.setenv("FB_PAGE_ID", "12345")

        resp = await client.get("/api/social-settings")

        assert resp.status_code == 200
        data = resp.json()
        assert data["fb_token_in_env"] is True
        assert data["fb_page_id_value"] == "12345"
        assert data["twitter_api_key_in_env"] is False
        assert "env-secret" not in resp.text
