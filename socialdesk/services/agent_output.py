"""Reading social posts out of the agent's markdown output.

The agent writes a ``social_posts.md`` file into its thread state::

    # Headline

    ## X (Twitter)
    ...
    *Character count: 212*

    ## Instagram
    ...

    ## Facebook
    ...

    ## Sources
    [1] https://...
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from socialdesk.exceptions import AgentOutputNotFoundError, AgentUnavailableError
from socialdesk.publishing.base import Platform

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

POSTS_FILE_NAMES = ("/social_posts.md", "social_posts.md")

_TITLE_RE = re.compile(r"^#\s+(.+)$", re.MULTILINE)
_CHAR_COUNT_RE = re.compile(r"\*Character count:.*\*", re.IGNORECASE)


@dataclass
class ParsedSocialPost:
    """Per-platform captions extracted from agent markdown."""

    title: str = ""
    twitter: str = ""
    instagram: str = ""
    facebook: str = ""
    sources: list[str] = field(default_factory=list)
    images: dict[str, bool] = field(
        default_factory=lambda: {platform.value: False for platform in Platform}
    )


def _extract_section(markdown: str, heading: str, stops: Iterable[str]) -> str:
    """Return the body under ``## <heading>`` up to the next stop heading or the end."""
    stop_alternatives = "|".join(re.escape(stop) for stop in stops)
    pattern = re.compile(
        rf"##\s+(?:{heading})\s*\n([\s\S]*?)(?=##\s+(?:{stop_alternatives})|\Z)",
        re.IGNORECASE,
    )
    match = pattern.search(markdown)
    return match.group(1).strip() if match else ""


def parse_social_posts(markdown: str) -> ParsedSocialPost:
    """Parse the agent's ``social_posts.md`` into a ParsedSocialPost."""
    result = ParsedSocialPost()

    title_match = _TITLE_RE.search(markdown)
    if title_match:
        result.title = title_match.group(1).strip()

    twitter = _extract_section(
        markdown,
        r"X \(Twitter\)|Twitter",
        ("Instagram", "Facebook", "Sources", "Images"),
    )
    result.twitter = _CHAR_COUNT_RE.sub("", twitter).strip()
    result.instagram = _extract_section(
        markdown, "Instagram", ("Facebook", "Sources", "Images")
    )
    result.facebook = _extract_section(markdown, "Facebook", ("Sources", "Images"))

    sources = _extract_section(markdown, "Sources", ("Images", "STOP"))
    if sources:
        result.sources = [
            line.strip() for line in sources.splitlines() if line.strip().startswith("[")
        ]

    for platform in Platform:
        result.images[platform.value] = f"{platform.value}.png" in markdown

    return result


def _find_posts_file(state: Any) -> str | None:
    if not isinstance(state, dict):
        return None
    values = state.get("values")
    if not isinstance(values, dict):
        return None
    files = values.get("files") or {}
    for name in POSTS_FILE_NAMES:
        content = files.get(name)
        if content:
            return str(content)
    return None


async def fetch_latest_agent_posts(
    client: httpx.AsyncClient,
    langgraph_url: str,
    thread_limit: int = 10,
) -> ParsedSocialPost:
    """Find the newest agent thread that produced social posts and parse them.

    Raises AgentUnavailableError if the agent server cannot be reached and
    AgentOutputNotFoundError if no recent thread has a posts file.
    """
    base_url = langgraph_url.rstrip("/")
    try:
        threads_resp = await client.get(
            f"{base_url}/threads",
            params={"limit": thread_limit, "status": "idle"},
        )
    except httpx.HTTPError as exc:
        msg = f"Cannot reach LangGraph server at {base_url}"
        raise AgentUnavailableError(msg) from exc
    if threads_resp.status_code != 200:
        msg = f"Cannot reach LangGraph server at {base_url}"
        raise AgentUnavailableError(msg)

    threads = threads_resp.json()
    if not threads:
        raise AgentOutputNotFoundError("No agent runs found. Run the agent first.")

    for thread in threads:
        thread_id = thread.get("thread_id")
        if not thread_id:
            continue
        state_resp = await client.get(f"{base_url}/threads/{thread_id}/state")
        if state_resp.status_code != 200:
            logger.warning(
                "Skipping agent thread %s: state request returned %s",
                thread_id,
                state_resp.status_code,
            )
            continue
        content = _find_posts_file(state_resp.json())
        if content:
            logger.info("Found social posts in agent thread %s", thread_id)
            return parse_social_posts(content)

    raise AgentOutputNotFoundError(
        "No posts found in recent agent runs. Run the agent with a news story first."
    )
