"""CLI client for a running SocialDesk server."""

from __future__ import annotations

import argparse
import sys
from typing import Any
from urllib.parse import urlparse

import httpx

DEFAULT_SERVER = "http://127.0.0.1:8000"
PLATFORM_CHOICES = ("facebook", "instagram", "twitter")


class PublishClient:
    """Thin wrapper over the SocialDesk HTTP API."""

    def __init__(
        self,
        server_url: str,
        timeout: float = 120.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.server_url = server_url.rstrip("/")
        self.client = httpx.Client(base_url=self.server_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> PublishClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def publish(self, post_id: str, platforms: list[str]) -> dict[str, Any]:
        """Publish a stored post and return the aggregate result."""
        resp = self.client.post(
            "/api/publish",
            json={"post_id": post_id, "platforms": platforms},
        )
        resp.raise_for_status()
        result: dict[str, Any] = resp.json()
        return result

    def check(self, platform: str) -> dict[str, Any]:
        """Verify one platform's credentials."""
        resp = self.client.get("/api/publish", params={"platform": platform})
        resp.raise_for_status()
        result: dict[str, Any] = resp.json()
        return result

    def list_posts(self, limit: int = 20) -> list[dict[str, Any]]:
        """List stored posts, newest first."""
        resp = self.client.get("/api/posts", params={"limit": limit})
        resp.raise_for_status()
        result: list[dict[str, Any]] = resp.json()
        return result


def validate_server_url(server_url: str) -> str:
    """Require an http(s) URL with a host."""
    normalized = server_url.strip().rstrip("/")
    parsed = urlparse(normalized)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError("Server URL must include scheme and host (e.g. http://127.0.0.1:8000)")
    return normalized


def format_publish_result(result: dict[str, Any]) -> list[str]:
    """Render a publish response as one line per platform."""
    lines = []
    for platform, outcome in result.get("results", {}).items():
        if outcome.get("success"):
            lines.append(f"  {platform}: ok ({outcome.get('post_id')})")
        else:
            lines.append(f"  {platform}: failed - {outcome.get('error')}")
    return lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="socialdesk",
        description="Publish stored posts through a SocialDesk server",
    )
    parser.add_argument(
        "--server", "-s", default=DEFAULT_SERVER, help=f"Server URL (default: {DEFAULT_SERVER})"
    )

    subparsers = parser.add_subparsers(dest="command")

    publish_parser = subparsers.add_parser("publish", help="Publish a post")
    publish_parser.add_argument("post_id", help="Identifier of the stored post")
    publish_parser.add_argument(
        "--platform",
        "-p",
        dest="platforms",
        action="append",
        choices=PLATFORM_CHOICES,
        help="Platform to publish to (repeatable, default: all)",
    )

    check_parser = subparsers.add_parser("check", help="Verify platform credentials")
    check_parser.add_argument("platform", choices=PLATFORM_CHOICES)

    posts_parser = subparsers.add_parser("posts", help="List stored posts")
    posts_parser.add_argument("--limit", type=int, default=20)
    return parser


def main(argv: list[str] | None = None, transport: httpx.BaseTransport | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return

    try:
        server_url = validate_server_url(args.server)
    except ValueError as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    with PublishClient(server_url, transport=transport) as client:
        try:
            if args.command == "publish":
                platforms = args.platforms or list(PLATFORM_CHOICES)
                result = client.publish(args.post_id, platforms)
                print(f"Post {args.post_id}:")
                for line in format_publish_result(result):
                    print(line)
                if not result.get("success"):
                    sys.exit(1)
            elif args.command == "check":
                result = client.check(args.platform)
                if result.get("success"):
                    print(f"{args.platform}: {result.get('info')}")
                else:
                    print(f"{args.platform}: {result.get('error')}")
                    sys.exit(1)
            elif args.command == "posts":
                for post in client.list_posts(args.limit):
                    published = ", ".join(sorted(post.get("published_to") or {})) or "-"
                    print(f"{post['id']}  {post['title']}  [{published}]")
        except httpx.HTTPStatusError as exc:
            print(f"Error: server returned {exc.response.status_code}: {exc.response.text}")
            sys.exit(1)
        except httpx.HTTPError as exc:
            print(f"Error: cannot reach {server_url}: {exc}")
            sys.exit(1)


if __name__ == "__main__":
    main()
