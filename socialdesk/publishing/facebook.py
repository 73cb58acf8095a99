"""Facebook Page publishing through the Graph API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from socialdesk.exceptions import PreconditionError, RemoteRejectionError
from socialdesk.publishing.base import (
    Platform,
    PublishContent,
    PublishOptions,
    SettingWriter,
    graph_error_message,
    raise_for_graph_error,
)

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)


async def exchange_page_token(
    client: httpx.AsyncClient,
    user_token: str,
    page_id: str,
    graph_api_url: str,
) -> str:
    """Exchange a user or system token for the page-scoped access token.

    Never raises on an API error: the failure is logged and the original token
    is returned so the caller can try with the broader token.
    """
    resp = await client.get(
        f"{graph_api_url}/{page_id}",
        params={"fields": "access_token", "access_token": user_token},
    )
    data = resp.json()
    error = graph_error_message(data)
    if error is not None:
        logger.warning(
            "Failed to get page token for page %s: %s - falling back to user token",
            page_id,
            error,
        )
        return user_token
    return data.get("access_token") or user_token


class FacebookPublisher:
    """Publisher for a Facebook Page (photo post when an image is given, feed post otherwise)."""

    platform = Platform.FACEBOOK

    def __init__(
        self,
        client: httpx.AsyncClient,
        credentials: dict[str, str],
        options: PublishOptions,
        write_setting: SettingWriter,
    ) -> None:
        self._client = client
        self._token = credentials.get("fb_token", "")
        self._page_id = credentials.get("fb_page_id", "")
        self._graph = options.graph_api_url

    async def publish(self, content: PublishContent) -> str:
        if not self._token or not self._page_id:
            raise PreconditionError("Facebook token or page ID not configured.")

        page_token = await exchange_page_token(
            self._client, self._token, self._page_id, self._graph
        )

        if content.image_url:
            resp = await self._client.post(
                f"{self._graph}/{self._page_id}/photos",
                json={
                    "url": content.image_url,
                    "message": content.text,
                    "access_token": page_token,
                },
            )
            data = resp.json()
            raise_for_graph_error(data, "Facebook photo post failed")
            post_id = data.get("post_id") or data.get("id")
        else:
            resp = await self._client.post(
                f"{self._graph}/{self._page_id}/feed",
                json={"message": content.text, "access_token": page_token},
            )
            data = resp.json()
            raise_for_graph_error(data, "Facebook feed post failed")
            post_id = data.get("id")

        if not post_id:
            raise RemoteRejectionError("Facebook response did not include a post id")
        logger.info("Published to Facebook page %s: %s", self._page_id, post_id)
        return str(post_id)

    async def check(self) -> str:
        """Verify the token and page access; returns ``User: <name> | Page: <name>``."""
        if not self._token:
            raise PreconditionError("Facebook token not configured.")

        resp = await self._client.get(
            f"{self._graph}/me",
            params={"fields": "id,name", "access_token": self._token},
        )
        user = resp.json()
        message = graph_error_message(user)
        if message is not None:
            raise RemoteRejectionError(message)

        resp = await self._client.get(
            f"{self._graph}/{self._page_id}",
            params={"fields": "name", "access_token": self._token},
        )
        page = resp.json()
        message = graph_error_message(page)
        if message is not None:
            raise RemoteRejectionError(f"Page access error: {message}")

        return f"User: {user.get('name')} | Page: {page.get('name')}"
