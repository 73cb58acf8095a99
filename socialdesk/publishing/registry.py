"""Platform registry for publishing."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from socialdesk.publishing.base import Platform
from socialdesk.publishing.facebook import FacebookPublisher
from socialdesk.publishing.instagram import InstagramPublisher
from socialdesk.publishing.twitter import TwitterPublisher

if TYPE_CHECKING:
    import httpx

    from socialdesk.publishing.base import (
        Publisher,
        PublisherFactory,
        PublishOptions,
        SettingWriter,
    )


@dataclass(frozen=True)
class PlatformSpec:
    """Static description of how a platform is gated and published to."""

    platform: Platform
    enabled_key: str
    disabled_message: str
    required_credentials: tuple[str, ...]
    not_configured_message: str
    caption_fields: tuple[str, ...]
    factory: PublisherFactory


PLATFORMS: dict[Platform, PlatformSpec] = {
    Platform.FACEBOOK: PlatformSpec(
        platform=Platform.FACEBOOK,
        enabled_key="social_fb_enabled",
        disabled_message="Facebook publishing is disabled in settings.",
        required_credentials=("fb_token", "fb_page_id"),
        not_configured_message="Facebook token or page ID not configured.",
        caption_fields=("facebook", "twitter"),
        factory=FacebookPublisher,
    ),
    Platform.INSTAGRAM: PlatformSpec(
        platform=Platform.INSTAGRAM,
        enabled_key="social_ig_enabled",
        disabled_message="Instagram publishing is disabled in settings.",
        required_credentials=("fb_token", "ig_account_id"),
        not_configured_message="Instagram credentials not configured.",
        caption_fields=("instagram", "facebook"),
        factory=InstagramPublisher,
    ),
    Platform.TWITTER: PlatformSpec(
        platform=Platform.TWITTER,
        enabled_key="social_twitter_enabled",
        disabled_message="Twitter/X publishing is disabled in settings.",
        required_credentials=(
            "twitter_api_key",
            "twitter_username",
            "twitter_email",
            "twitter_password",
        ),
        not_configured_message=(
            "Twitter credentials incomplete (API key, username, email, password required)."
        ),
        caption_fields=("twitter", "facebook"),
        factory=TwitterPublisher,
    ),
}


def get_spec(platform: str) -> PlatformSpec:
    """Look up a platform by name.

    Raises ValueError if the platform is unknown.
    """
    try:
        return PLATFORMS[Platform(platform)]
    except ValueError:
        msg = f"Unknown platform: {platform!r}. Available: {list_platforms()}"
        raise ValueError(msg) from None


def is_enabled(spec: PlatformSpec, settings_map: Mapping[str, str]) -> bool:
    """A platform is enabled only when its flag is exactly ``"true"``."""
    return (settings_map.get(spec.enabled_key) or "").strip() == "true"


def missing_credentials(spec: PlatformSpec, credentials: Mapping[str, str]) -> list[str]:
    """Return the names of required credentials that resolved to empty."""
    return [name for name in spec.required_credentials if not credentials.get(name)]


def get_publisher(
    platform: str,
    client: httpx.AsyncClient,
    credentials: dict[str, str],
    options: PublishOptions,
    write_setting: SettingWriter,
) -> Publisher:
    """Create the publisher for the given platform."""
    spec = get_spec(platform)
    return spec.factory(client, credentials, options, write_setting)


def list_platforms() -> list[str]:
    """Return the list of supported platform names."""
    return [platform.value for platform in PLATFORMS]
