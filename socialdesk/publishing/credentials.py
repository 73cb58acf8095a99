"""Credential resolution: process environment first, settings store second.

Resolution runs on every publish attempt; nothing is cached because the
settings table can change between requests.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class CredentialSource:
    """Where a credential may come from.

    ``env_key`` is None for credentials that only live in the settings store.
    """

    env_key: str | None
    settings_key: str
    secret: bool = True


CREDENTIALS: dict[str, CredentialSource] = {
    "fb_token": CredentialSource("FB_TOKEN", "social_fb_token"),
    "fb_page_id": CredentialSource("FB_PAGE_ID", "social_fb_page_id", secret=False),
    "ig_account_id": CredentialSource("IG_ACCOUNT_ID", "social_ig_account_id", secret=False),
    "twitter_api_key": CredentialSource("TWITTER_API_KEY", "social_twitter_api_key"),
    "twitter_username": CredentialSource(
        "TWITTER_USERNAME", "social_twitter_username", secret=False
    ),
    "twitter_email": CredentialSource("TWITTER_EMAIL", "social_twitter_email"),
    "twitter_password": CredentialSource("TWITTER_PASSWORD", "social_twitter_password"),
    "twitter_proxy": CredentialSource("TWITTER_PROXY", "social_twitter_proxy"),
    "twitter_totp": CredentialSource("TWITTER_TOTP", "social_twitter_totp"),
    "twitter_cookie": CredentialSource(None, "social_twitter_cookie"),
}

TWITTER_COOKIE_KEY = CREDENTIALS["twitter_cookie"].settings_key


def resolve_credential(
    env_key: str | None,
    stored: str | None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Return the trimmed environment value if non-blank, else the trimmed stored value.

    An empty string means "not configured"; this function never raises.
    """
    env = os.environ if environ is None else environ
    if env_key is not None:
        from_env = (env.get(env_key) or "").strip()
        if from_env:
            return from_env
    return (stored or "").strip()


def resolve_credentials(
    settings_map: Mapping[str, str],
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Resolve every known credential against the environment and settings map."""
    return {
        name: resolve_credential(source.env_key, settings_map.get(source.settings_key), environ)
        for name, source in CREDENTIALS.items()
    }


def credential_env_status(
    environ: Mapping[str, str] | None = None,
) -> dict[str, bool | str | None]:
    """Report which credentials the environment supplies.

    Values are included only for non-secret identifiers.
    """
    env = os.environ if environ is None else environ
    status: dict[str, bool | str | None] = {}
    for name, source in CREDENTIALS.items():
        if source.env_key is None:
            continue
        value = (env.get(source.env_key) or "").strip()
        status[f"{name}_in_env"] = bool(value)
        if not source.secret:
            status[f"{name}_value"] = value or None
    return status
