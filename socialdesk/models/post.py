"""Social post model."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from socialdesk.models.base import Base


def _new_post_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SocialPost(Base):
    """A post produced by the agent, with one caption per platform.

    ``published_to`` maps platform name to ``True`` once that platform has
    received the post. Entries are only ever added.
    """

    __tablename__ = "social_posts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_post_id)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    twitter: Mapped[str] = mapped_column(Text, nullable=False, default="")
    instagram: Mapped[str] = mapped_column(Text, nullable=False, default="")
    facebook: Mapped[str] = mapped_column(Text, nullable=False, default="")
    sources: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    images: Mapped[dict[str, bool]] = mapped_column(JSON, nullable=False, default=dict)
    published_to: Mapped[dict[str, bool]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    __table_args__ = (Index("idx_social_posts_created_at", "created_at"),)
