"""Publish orchestration: sends one post to several platforms and records the outcome."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

from socialdesk.exceptions import PublishError
from socialdesk.publishing.base import PublishContent, PublishOptions, PublishResult
from socialdesk.publishing.credentials import resolve_credentials
from socialdesk.publishing.registry import (
    get_publisher,
    get_spec,
    is_enabled,
    missing_credentials,
)
from socialdesk.services.post_service import get_post, update_published_to
from socialdesk.services.settings_service import get_settings_map, upsert_setting

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable, Mapping

    from sqlalchemy.ext.asyncio import AsyncSession

    from socialdesk.models.post import SocialPost
    from socialdesk.publishing.base import SettingWriter
    from socialdesk.publishing.registry import PlatformSpec

logger = logging.getLogger(__name__)


@dataclass
class PublishOutcome:
    """Aggregate result of one publish request."""

    success: bool
    results: dict[str, PublishResult] = field(default_factory=dict)
    published_to: dict[str, bool] = field(default_factory=dict)


def resolve_image_url(post: SocialPost, platform: str, public_base_url: str = "") -> str | None:
    """Return the image to attach for a platform.

    An explicit ``image_url`` wins. Otherwise, when the agent rendered an image
    for this platform and a public base URL is configured, the image route of
    this service is used.
    """
    if post.image_url:
        return post.image_url
    if public_base_url and (post.images or {}).get(platform):
        return f"{public_base_url.rstrip('/')}/api/image/{platform}"
    return None


def build_content(post: SocialPost, spec: PlatformSpec, public_base_url: str = "") -> PublishContent:
    """Pick the caption for a platform, falling back to sibling captions when empty."""
    text = ""
    for field_name in spec.caption_fields:
        text = getattr(post, field_name, "") or ""
        if text:
            break
    return PublishContent(
        text=text,
        image_url=resolve_image_url(post, spec.platform.value, public_base_url),
    )


@asynccontextmanager
async def _client_scope(
    client: httpx.AsyncClient | None, options: PublishOptions
) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=options.http_timeout) as owned:
        yield owned


async def _publish_one(
    post: SocialPost,
    spec: PlatformSpec,
    settings_map: Mapping[str, str],
    credentials: dict[str, str],
    client: httpx.AsyncClient,
    options: PublishOptions,
    write_setting: SettingWriter,
    public_base_url: str,
) -> PublishResult:
    platform = spec.platform.value

    if not is_enabled(spec, settings_map):
        return PublishResult(platform=platform, success=False, error=spec.disabled_message)

    missing = missing_credentials(spec, credentials)
    if missing:
        logger.info("Skipping %s for post %s: missing %s", platform, post.id, ", ".join(missing))
        return PublishResult(platform=platform, success=False, error=spec.not_configured_message)

    publisher = spec.factory(client, credentials, options, write_setting)
    content = build_content(post, spec, public_base_url)
    try:
        external_id = await publisher.publish(content)
    except PublishError as exc:
        logger.warning("Publishing post %s to %s failed: %s", post.id, platform, exc)
        return PublishResult(platform=platform, success=False, error=str(exc))
    except Exception as exc:
        logger.exception("Publishing post %s to %s failed unexpectedly", post.id, platform)
        return PublishResult(
            platform=platform, success=False, error=str(exc) or type(exc).__name__
        )

    logger.info("Published post %s to %s: %s", post.id, platform, external_id)
    return PublishResult(platform=platform, success=True, post_id=external_id)


async def publish_post(
    session: AsyncSession,
    post_id: str,
    platforms: Iterable[str],
    *,
    options: PublishOptions | None = None,
    http_client: httpx.AsyncClient | None = None,
    public_base_url: str = "",
    environ: Mapping[str, str] | None = None,
) -> PublishOutcome:
    """Publish a stored post to each requested platform.

    Platforms are attempted one after another and independently: a failure
    is recorded for that platform only. ``published_to`` is persisted only if
    at least one platform succeeded, and entries are only ever set to True.

    Raises PostNotFoundError if the post does not exist and ValueError for an
    unknown platform name.
    """
    options = options or PublishOptions()
    specs = [get_spec(name) for name in dict.fromkeys(platforms)]

    settings_map = await get_settings_map(session)
    post = await get_post(session, post_id)
    credentials = resolve_credentials(settings_map, environ)

    published_to = dict(post.published_to or {})
    results: dict[str, PublishResult] = {}

    async def write_setting(key: str, value: str) -> None:
        await upsert_setting(session, key, value)

    async with _client_scope(http_client, options) as client:
        for spec in specs:
            result = await _publish_one(
                post,
                spec,
                settings_map,
                credentials,
                client,
                options,
                write_setting,
                public_base_url,
            )
            results[result.platform] = result
            if result.success:
                published_to[result.platform] = True

    success = any(result.success for result in results.values())
    if success:
        await update_published_to(session, post_id, published_to)
    else:
        logger.warning("Post %s was not published to any of %s", post_id, list(results))

    return PublishOutcome(success=success, results=results, published_to=published_to)


async def check_platform_connection(
    session: AsyncSession,
    platform: str,
    *,
    options: PublishOptions | None = None,
    http_client: httpx.AsyncClient | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Verify that the configured credentials for a platform work.

    Returns a short description of the connected account. Raises ValueError
    for an unknown platform and PublishError (or an httpx error) on failure.
    """
    options = options or PublishOptions()
    get_spec(platform)
    settings_map = await get_settings_map(session)
    credentials = resolve_credentials(settings_map, environ)

    async def write_setting(key: str, value: str) -> None:
        await upsert_setting(session, key, value)

    async with _client_scope(http_client, options) as client:
        publisher = get_publisher(platform, client, credentials, options, write_setting)
        return await publisher.check()
