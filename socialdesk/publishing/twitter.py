"""X (Twitter) publishing through the twitterapi.io login-cookie API.

The service authenticates with account credentials and hands back a login
cookie. The cookie is cached in the settings store and reused until the
service reports that the session is no longer valid.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from socialdesk.exceptions import PreconditionError, RemoteRejectionError
from socialdesk.publishing.base import Platform, PublishContent, PublishOptions, SettingWriter
from socialdesk.publishing.credentials import TWITTER_COOKIE_KEY

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)

SESSION_ERROR_KEYWORDS = ("cookie", "expired", "login")


def is_session_error(message: str | None) -> bool:
    """Return True if an error message looks like an expired or invalid session.

    Plain substring matching on the lower-cased text, so unrelated errors that
    mention one of the keywords are classified as session errors too.
    """
    text = (message or "").lower()
    return any(keyword in text for keyword in SESSION_ERROR_KEYWORDS)


@dataclass
class TwitterCredentials:
    """Account credentials for the login-cookie API."""

    api_key: str
    username: str
    email: str
    password: str
    proxy: str = ""
    totp_secret: str = ""
    cookie: str = ""

    @classmethod
    def from_resolved(cls, credentials: dict[str, str]) -> TwitterCredentials:
        return cls(
            api_key=credentials.get("twitter_api_key", ""),
            username=credentials.get("twitter_username", ""),
            email=credentials.get("twitter_email", ""),
            password=credentials.get("twitter_password", ""),
            proxy=credentials.get("twitter_proxy", ""),
            totp_secret=credentials.get("twitter_totp", ""),
            cookie=credentials.get("twitter_cookie", ""),
        )

    @property
    def is_complete(self) -> bool:
        return all((self.api_key, self.username, self.email, self.password))


def _succeeded(data: Any) -> bool:
    return isinstance(data, dict) and data.get("status") == "success"


async def login(client: httpx.AsyncClient, creds: TwitterCredentials, api_url: str) -> str:
    """Log in and return a fresh login cookie.

    Raises ``RemoteRejectionError`` with the service's message when the
    response lacks a success status or a cookie.
    """
    payload: dict[str, str] = {
        "user_name": creds.username,
        "email": creds.email,
        "password": creds.password,
    }
    if creds.proxy:
        payload["proxy"] = creds.proxy
    if creds.totp_secret:
        payload["totp_secret"] = creds.totp_secret

    resp = await client.post(
        f"{api_url}/twitter/user_login_v2",
        json=payload,
        headers={"X-API-Key": creds.api_key},
    )
    data = resp.json()
    if not _succeeded(data) or not data.get("login_cookie"):
        detail = None
        if isinstance(data, dict):
            detail = data.get("msg") or data.get("message") or data.get("error")
        detail = detail or json.dumps(data)
        logger.warning("Twitter login failed for %s: %s", creds.username, detail)
        raise RemoteRejectionError(f"Twitter login failed: {detail}")
    logger.info("Twitter login succeeded for %s", creds.username)
    return str(data["login_cookie"])


class TwitterPublisher:
    """Publisher that posts tweets with a cached login cookie.

    When a tweet is rejected with a session-related message the cookie is
    cleared, a new one is obtained and the tweet is retried exactly once.
    """

    platform = Platform.TWITTER

    def __init__(
        self,
        client: httpx.AsyncClient,
        credentials: dict[str, str],
        options: PublishOptions,
        write_setting: SettingWriter,
    ) -> None:
        self._client = client
        self._creds = TwitterCredentials.from_resolved(credentials)
        self._api_url = options.twitter_api_url
        self._write_setting = write_setting

    async def _relogin(self) -> str:
        cookie = await login(self._client, self._creds, self._api_url)
        await self._write_setting(TWITTER_COOKIE_KEY, cookie)
        self._creds.cookie = cookie
        return cookie

    async def _create_tweet(self, cookie: str, text: str) -> dict[str, Any]:
        payload: dict[str, str] = {"login_cookies": cookie, "tweet_text": text}
        if self._creds.proxy:
            payload["proxy"] = self._creds.proxy
        resp = await self._client.post(
            f"{self._api_url}/twitter/create_tweet_v2",
            json=payload,
            headers={"X-API-Key": self._creds.api_key},
        )
        data = resp.json()
        return data if isinstance(data, dict) else {"msg": str(data)}

    async def publish(self, content: PublishContent) -> str:
        if not self._creds.is_complete:
            raise PreconditionError(
                "Twitter credentials incomplete (API key, username, email, password required)."
            )

        cookie = self._creds.cookie or await self._relogin()
        data = await self._create_tweet(cookie, content.text)

        if not _succeeded(data):
            if is_session_error(data.get("msg")):
                logger.info("Twitter session rejected (%s), logging in again", data.get("msg"))
                await self._write_setting(TWITTER_COOKIE_KEY, "")
                self._creds.cookie = ""
                cookie = await self._relogin()
                data = await self._create_tweet(cookie, content.text)
            if not _succeeded(data):
                raise RemoteRejectionError(
                    f"Twitter post failed: {data.get('msg') or 'Unknown error'}"
                )

        tweet_id = data.get("tweet_id")
        logger.info("Published tweet %s for %s", tweet_id, self._creds.username)
        return str(tweet_id or "")

    async def check(self) -> str:
        if not self._creds.api_key or not self._creds.username:
            raise PreconditionError("Twitter API key or username not configured.")
        resp = await self._client.get(
            f"{self._api_url}/twitter/user/info",
            params={"userName": self._creds.username},
            headers={"X-API-Key": self._creds.api_key},
        )
        data = resp.json()
        if isinstance(data, dict) and data.get("status") == "error":
            raise RemoteRejectionError(data.get("msg") or "Failed to get Twitter user info.")
        return f"Connected as: @{self._creds.username}"
