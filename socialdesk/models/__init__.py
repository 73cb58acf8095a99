"""SQLAlchemy ORM models for SocialDesk."""

from socialdesk.models.base import Base
from socialdesk.models.post import SocialPost
from socialdesk.models.setting import AgentSetting

__all__ = [
    "AgentSetting",
    "Base",
    "SocialPost",
]
