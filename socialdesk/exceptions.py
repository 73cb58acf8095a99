"""Application-level exception types.

Convention:
- ``PublishError`` and its subclasses describe why a single platform could not
  be published to. The orchestrator converts them (and any other exception
  raised while talking to a platform) into a failure entry for that platform;
  they never reach the HTTP layer.
- ``LookupError`` subclasses (``PostNotFoundError``,
  ``AgentOutputNotFoundError``) are mapped to 404 by the routers.
- ``AgentUnavailableError`` and ``FeederError`` wrap failures of local
  collaborators (the agent server, the feeder process).
"""

from __future__ import annotations


class PublishError(Exception):
    """Base class for per-platform publish failures."""


class PreconditionError(PublishError):
    """Raised when required configuration or input is missing.

    Always raised before any network call is made.
    """


class RemoteRejectionError(PublishError):
    """Raised when a platform API answers with an explicit error payload."""


class PublishTimeoutError(PublishError):
    """Raised when bounded polling ends without reaching a terminal state."""


class PostNotFoundError(LookupError):
    """Raised when a post id does not exist in the post store."""


class AgentUnavailableError(Exception):
    """Raised when the agent server cannot be reached."""


class AgentOutputNotFoundError(LookupError):
    """Raised when no recent agent run produced social posts."""


class FeederError(Exception):
    """Raised when the feeder pipeline fails to run to completion."""
