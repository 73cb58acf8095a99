"""Instagram publishing through the Graph API content-publishing flow.

Publishing an image is a three-step job: create a media container, poll the
container until Instagram has processed it, then publish the container.
"""

from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from typing import TYPE_CHECKING

from socialdesk.exceptions import PreconditionError, PublishTimeoutError, RemoteRejectionError
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

DEFAULT_POLL_ATTEMPTS = 20
DEFAULT_POLL_INTERVAL = 3.0


class ContainerStatus(StrEnum):
    """Processing state of a media container."""

    PENDING = "PENDING"
    FINISHED = "FINISHED"
    ERROR = "ERROR"
    TIMEOUT = "TIMEOUT"

    @classmethod
    def from_status_code(cls, status_code: object) -> ContainerStatus:
        """Map a Graph API ``status_code`` to a state; unknown codes are still pending."""
        if status_code == "FINISHED":
            return cls.FINISHED
        if status_code == "ERROR":
            return cls.ERROR
        return cls.PENDING


async def create_container(
    client: httpx.AsyncClient,
    token: str,
    account_id: str,
    image_url: str,
    caption: str,
    graph_api_url: str,
) -> str:
    """Create an image container and return its id."""
    resp = await client.post(
        f"{graph_api_url}/{account_id}/media",
        json={
            "media_type": "IMAGE",
            "image_url": image_url,
            "caption": caption,
            "access_token": token,
        },
    )
    data = resp.json()
    raise_for_graph_error(data, "Instagram container creation failed")
    container_id = data.get("id")
    if not container_id:
        raise RemoteRejectionError("Instagram container creation failed: no container id returned")
    logger.info("Instagram container created: %s", container_id)
    return str(container_id)


async def wait_for_container(
    client: httpx.AsyncClient,
    token: str,
    container_id: str,
    graph_api_url: str,
    *,
    max_attempts: int = DEFAULT_POLL_ATTEMPTS,
    interval: float = DEFAULT_POLL_INTERVAL,
) -> ContainerStatus:
    """Poll a container until it is FINISHED.

    Each attempt waits ``interval`` seconds before querying. FINISHED returns
    at once and ERROR raises at once, whatever attempts remain. When all
    ``max_attempts`` report another state, ``PublishTimeoutError`` is raised.
    """
    for attempt in range(1, max_attempts + 1):
        await asyncio.sleep(interval)
        resp = await client.get(
            f"{graph_api_url}/{container_id}",
            params={"fields": "status_code", "access_token": token},
        )
        data = resp.json()
        status_code = data.get("status_code") if isinstance(data, dict) else None
        logger.info(
            "Instagram container %s status: %s (attempt %d/%d)",
            container_id,
            status_code,
            attempt,
            max_attempts,
        )
        status = ContainerStatus.from_status_code(status_code)
        if status is ContainerStatus.FINISHED:
            return status
        if status is ContainerStatus.ERROR:
            raise RemoteRejectionError(
                "Instagram media processing failed. The image URL may not be publicly "
                "accessible or the format is unsupported."
            )

    logger.warning(
        "Instagram container %s not ready after %d attempts", container_id, max_attempts
    )
    raise PublishTimeoutError(
        f"Instagram media processing timed out ({max_attempts * interval:g}s). Try again later."
    )


class InstagramPublisher:
    """Publisher for an Instagram business account (image posts only)."""

    platform = Platform.INSTAGRAM

    def __init__(
        self,
        client: httpx.AsyncClient,
        credentials: dict[str, str],
        options: PublishOptions,
        write_setting: SettingWriter,
    ) -> None:
        self._client = client
        self._token = credentials.get("fb_token", "")
        self._account_id = credentials.get("ig_account_id", "")
        self._graph = options.graph_api_url
        self._poll_attempts = options.instagram_poll_attempts
        self._poll_interval = options.instagram_poll_interval

    async def publish(self, content: PublishContent) -> str:
        if not content.image_url:
            raise PreconditionError("Instagram requires an image. This post has no image.")
        if not self._token or not self._account_id:
            raise PreconditionError("Instagram credentials not configured.")

        container_id = await create_container(
            self._client,
            self._token,
            self._account_id,
            content.image_url,
            content.text,
            self._graph,
        )
        await wait_for_container(
            self._client,
            self._token,
            container_id,
            self._graph,
            max_attempts=self._poll_attempts,
            interval=self._poll_interval,
        )

        resp = await self._client.post(
            f"{self._graph}/{self._account_id}/media_publish",
            json={"creation_id": container_id, "access_token": self._token},
        )
        data = resp.json()
        raise_for_graph_error(data, "Instagram publish failed")
        media_id = data.get("id")
        if not media_id:
            raise RemoteRejectionError("Instagram publish failed: no media id returned")
        logger.info("Published Instagram container %s as media %s", container_id, media_id)
        return str(media_id)

    async def check(self) -> str:
        if not self._token or not self._account_id:
            raise PreconditionError("Instagram credentials not configured.")
        resp = await self._client.get(
            f"{self._graph}/{self._account_id}",
            params={"fields": "id,username", "access_token": self._token},
        )
        data = resp.json()
        message = graph_error_message(data)
        if message is not None:
            raise RemoteRejectionError(message)
        return f"Connected as: @{data.get('username')}"
