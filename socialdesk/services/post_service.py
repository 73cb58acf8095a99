"""Post store: read, create, delete, and record publication of social posts."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select, update

from socialdesk.exceptions import PostNotFoundError
from socialdesk.models.post import SocialPost

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from socialdesk.services.agent_output import ParsedSocialPost

logger = logging.getLogger(__name__)


async def get_post(session: AsyncSession, post_id: str) -> SocialPost:
    """Return a post by id.

    Raises PostNotFoundError if it does not exist.
    """
    post = await session.get(SocialPost, post_id)
    if post is None:
        msg = f"Post not found: {post_id}"
        raise PostNotFoundError(msg)
    return post


async def list_posts(session: AsyncSession, limit: int = 50) -> list[SocialPost]:
    """List posts, newest first."""
    stmt = select(SocialPost).order_by(SocialPost.created_at.desc()).limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def create_post(
    session: AsyncSession,
    parsed: ParsedSocialPost,
    image_url: str | None = None,
) -> SocialPost:
    """Store a post parsed from agent output."""
    post = SocialPost(
        title=parsed.title,
        twitter=parsed.twitter,
        instagram=parsed.instagram,
        facebook=parsed.facebook,
        sources=list(parsed.sources),
        images=dict(parsed.images),
        image_url=image_url,
        published_to={},
    )
    session.add(post)
    await session.commit()
    await session.refresh(post)
    logger.info("Stored post %s (%r)", post.id, post.title)
    return post


async def update_published_to(
    session: AsyncSession,
    post_id: str,
    published_to: dict[str, bool],
) -> None:
    """Overwrite only the ``published_to`` column of a post and commit."""
    stmt = (
        update(SocialPost)
        .where(SocialPost.id == post_id)
        .values(published_to=dict(published_to))
    )
    await session.execute(stmt)
    await session.commit()


async def delete_post(session: AsyncSession, post_id: str) -> bool:
    """Delete a post. Returns True if found and deleted."""
    post = await session.get(SocialPost, post_id)
    if post is None:
        return False
    await session.delete(post)
    await session.commit()
    logger.info("Deleted post %s", post_id)
    return True
