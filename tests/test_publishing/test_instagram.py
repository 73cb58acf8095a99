"""Tests for Instagram container creation, polling and publishing."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from socialdesk.exceptions import PreconditionError, PublishTimeoutError, RemoteRejectionError
from socialdesk.publishing.base import PublishContent, PublishOptions
from socialdesk.publishing.instagram import (
    ContainerStatus,
    InstagramPublisher,
    wait_for_container,
)

if TYPE_CHECKING:
    from collections.abc import Callable

GRAPH = "https://graph.test/v21.0"
IMAGE = "https://img.test/instagram.png"


def _client(
    handler: Callable[[httpx.Request], httpx.Response], calls: list[httpx.Request]
) -> httpx.AsyncClient:
    def recording(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return handler(request)

    return httpx.AsyncClient(transport=httpx.MockTransport(recording))


def _status_handler(statuses: list[str]) -> Callable[[httpx.Request], httpx.Response]:
    """Answer container status polls with ``statuses`` in order, repeating the last one."""
    polls = iter(statuses)
    last = {"status": statuses[-1]}

    def handler(request: httpx.Request) -> httpx.Response:
        last["status"] = next(polls, last["status"])
        return httpx.Response(200, json={"status_code": last["status"], "id": "c1"})

    return handler


def _publisher(client: httpx.AsyncClient, attempts: int = 20) -> InstagramPublisher:
    options = PublishOptions(
        graph_api_url=GRAPH, instagram_poll_attempts=attempts, instagram_poll_interval=0
    )
    return InstagramPublisher(
        client, {"fb_token": "tok", "ig_account_id": "ig1"}, options, AsyncMock()
    )


class TestContainerStatus:
    def test_maps_terminal_codes(self) -> None:
        assert ContainerStatus.from_status_code("FINISHED") is ContainerStatus.FINISHED
        assert ContainerStatus.from_status_code("ERROR") is ContainerStatus.ERROR

    def test_other_codes_are_pending(self) -> None:
        assert ContainerStatus.from_status_code("IN_PROGRESS") is ContainerStatus.PENDING
        assert ContainerStatus.from_status_code(None) is ContainerStatus.PENDING


class TestWaitForContainer:
    async def test_stops_polling_once_finished(self) -> None:
        calls: list[httpx.Request] = []
        handler = _status_handler(["IN_PROGRESS", "IN_PROGRESS", "FINISHED"])
        with patch(
            "socialdesk.publishing.instagram.asyncio.sleep", new_callable=AsyncMock
        ) as sleep:
            async with _client(handler, calls) as client:
                status = await wait_for_container(client, "tok", "c1", GRAPH)

        assert status is ContainerStatus.FINISHED
        assert len(calls) == 3
        assert sleep.await_count == 3
        assert calls[0].url.params["fields"] == "status_code"

    async def test_error_fails_immediately(self) -> None:
        calls: list[httpx.Request] = []
        handler = _status_handler(["IN_PROGRESS", "ERROR", "FINISHED"])
        with patch("socialdesk.publishing.instagram.asyncio.sleep", new_callable=AsyncMock):
            async with _client(handler, calls) as client:
                with pytest.raises(RemoteRejectionError, match="media processing failed"):
                    await wait_for_container(client, "tok", "c1", GRAPH)

        assert len(calls) == 2

    async def test_times_out_after_all_attempts(self) -> None:
        calls: list[httpx.Request] = []
        handler = _status_handler(["IN_PROGRESS"])
        with patch(
            "socialdesk.publishing.instagram.asyncio.sleep", new_callable=AsyncMock
        ) as sleep:
            async with _client(handler, calls) as client:
                with pytest.raises(PublishTimeoutError, match=r"timed out \(60s\)"):
                    await wait_for_container(
                        client, "tok", "c1", GRAPH, max_attempts=20, interval=3.0
                    )

        assert len(calls) == 20
        assert sleep.await_count == 20
        assert sum(call.args[0] for call in sleep.await_args_list) == 60.0

    async def test_waits_before_first_poll(self) -> None:
        calls: list[httpx.Request] = []
        order: list[str] = []

        async def fake_sleep(seconds: float) -> None:
            order.append("sleep")

        def handler(request: httpx.Request) -> httpx.Response:
            order.append("poll")
            return httpx.Response(200, json={"status_code": "FINISHED"})

        with patch("socialdesk.publishing.instagram.asyncio.sleep", fake_sleep):
            async with _client(handler, calls) as client:
                await wait_for_container(client, "tok", "c1", GRAPH)

        assert order == ["sleep", "poll"]


class TestInstagramPublisher:
    async def test_publishes_after_container_finishes(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/ig1/media"):
                return httpx.Response(200, json={"id": "c1"})
            if request.url.path.endswith("/media_publish"):
                return httpx.Response(200, json={"id": "media-9"})
            return httpx.Response(200, json={"status_code": "FINISHED"})

        async with _client(handler, calls) as client:
            media_id = await _publisher(client).publish(
                PublishContent(text="Caption", image_url=IMAGE)
            )

        assert media_id == "media-9"
        create_body = json.loads(calls[0].content)
        assert create_body["media_type"] == "IMAGE"
        assert create_body["image_url"] == IMAGE
        assert create_body["caption"] == "Caption"
        assert json.loads(calls[-1].content)["creation_id"] == "c1"

    async def test_requires_image_before_any_network_call(self) -> None:
        calls: list[httpx.Request] = []
        async with _client(lambda r: httpx.Response(200, json={}), calls) as client:
            with pytest.raises(PreconditionError, match="Instagram requires an image"):
                await _publisher(client).publish(PublishContent(text="No picture"))

        assert calls == []

    async def test_container_creation_error(self) -> None:
        calls: list[httpx.Request] = []
        async with _client(
            lambda r: httpx.Response(400, json={"error": {"message": "Bad image"}}), calls
        ) as client:
            with pytest.raises(
                RemoteRejectionError, match="Instagram container creation failed: Bad image"
            ):
                await _publisher(client).publish(PublishContent(text="x", image_url=IMAGE))

        assert len(calls) == 1

    async def test_timeout_does_not_publish(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return httpx.Response(200, json={"id": "c1"})
            return httpx.Response(200, json={"status_code": "IN_PROGRESS"})

        async with _client(handler, calls) as client:
            with pytest.raises(PublishTimeoutError):
                await _publisher(client, attempts=3).publish(
                    PublishContent(text="x", image_url=IMAGE)
                )

        assert not any(call.url.path.endswith("/media_publish") for call in calls)
        assert len(calls) == 4

    async def test_check_reports_username(self) -> None:
        calls: list[httpx.Request] = []
        async with _client(
            lambda r: httpx.Response(200, json={"id": "ig1", "username": "dailynews"}), calls
        ) as client:
            assert await _publisher(client).check() == "Connected as: @dailynews"
