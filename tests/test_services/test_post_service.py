"""Tests for the post store."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from socialdesk.exceptions import PostNotFoundError
from socialdesk.services.agent_output import ParsedSocialPost
from socialdesk.services.post_service import (
    create_post,
    delete_post,
    get_post,
    list_posts,
    update_published_to,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


def _parsed(title: str = "Headline") -> ParsedSocialPost:
    return ParsedSocialPost(
        title=title,
        twitter="tweet",
        instagram="gram",
        facebook="fb",
        sources=["[1] https://example.com"],
        images={"facebook": True, "instagram": False, "twitter": False},
    )


class TestPostStore:
    async def test_create_and_get(self, db_session: AsyncSession) -> None:
        post = await create_post(db_session, _parsed(), image_url="https://img.test/a.png")

        loaded = await get_post(db_session, post.id)
        assert loaded.title == "Headline"
        assert loaded.sources == ["[1] https://example.com"]
        assert loaded.images["facebook"] is True
        assert loaded.image_url == "https://img.test/a.png"
        assert loaded.published_to == {}

    async def test_get_missing_raises(self, db_session: AsyncSession) -> None:
        with pytest.raises(PostNotFoundError):
            await get_post(db_session, "missing")

    async def test_list_newest_first(self, db_session: AsyncSession) -> None:
        first = await create_post(db_session, _parsed("first"))
        await asyncio.sleep(0.01)
        second = await create_post(db_session, _parsed("second"))

        posts = await list_posts(db_session)
        assert [p.id for p in posts] == [second.id, first.id]
        assert len(await list_posts(db_session, limit=1)) == 1

    async def test_update_published_to_only_touches_that_column(
        self, db_session: AsyncSession
    ) -> None:
        post = await create_post(db_session, _parsed())
        await update_published_to(db_session, post.id, {"facebook": True})

        await db_session.refresh(post)
        assert post.published_to == {"facebook": True}
        assert post.facebook == "fb"

    async def test_delete(self, db_session: AsyncSession) -> None:
        post = await create_post(db_session, _parsed())
        assert await delete_post(db_session, post.id) is True
        assert await delete_post(db_session, post.id) is False
