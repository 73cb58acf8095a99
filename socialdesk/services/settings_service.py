"""Settings store: a flat key-value table shared with the agent."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import select

from socialdesk.models.setting import AgentSetting
from socialdesk.publishing.credentials import CREDENTIALS

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

SECRET_MASK = "********"

SECRET_KEYS = frozenset(
    source.settings_key for source in CREDENTIALS.values() if source.secret
)


async def get_settings_map(session: AsyncSession) -> dict[str, str]:
    """Return every stored setting. Missing values read as empty strings."""
    result = await session.execute(select(AgentSetting))
    return {row.key: row.value or "" for row in result.scalars().all()}


async def _stage_setting(session: AsyncSession, key: str, value: str) -> None:
    now = datetime.now(timezone.utc)
    row = await session.get(AgentSetting, key)
    if row is None:
        session.add(AgentSetting(key=key, value=value, updated_at=now))
    else:
        row.value = value
        row.updated_at = now


async def upsert_setting(session: AsyncSession, key: str, value: str) -> None:
    """Insert or replace one setting and commit. Idempotent on key."""
    await _stage_setting(session, key, value)
    await session.commit()
    logger.debug("Stored setting %s", key)


async def update_settings(session: AsyncSession, values: Mapping[str, str]) -> dict[str, str]:
    """Upsert several settings in one transaction and return the full map.

    Secret values equal to the mask are left unchanged, so a masked map read
    from the API can be sent back as is.
    """
    for key, value in values.items():
        if not key:
            msg = "Setting keys must be non-empty"
            raise ValueError(msg)
        if key in SECRET_KEYS and value == SECRET_MASK:
            continue
        await _stage_setting(session, key, value)
    await session.commit()
    logger.info("Updated %d settings", len(values))
    return await get_settings_map(session)


def mask_secrets(settings_map: Mapping[str, str]) -> dict[str, str]:
    """Replace non-empty secret credential values with a fixed mask."""
    return {
        key: SECRET_MASK if key in SECRET_KEYS and value else value
        for key, value in settings_map.items()
    }
