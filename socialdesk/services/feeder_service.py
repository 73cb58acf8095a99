"""Runs the content feeder pipeline as a child process."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import TYPE_CHECKING

from socialdesk.exceptions import FeederError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

logger = logging.getLogger(__name__)


async def run_feeder(command: Sequence[str], cwd: Path, timeout: float = 300.0) -> str:
    """Run the feeder command to completion and return its stdout.

    The child's stdio encoding is forced to UTF-8.

    Raises FeederError if the command cannot start, times out, or exits non-zero.
    """
    if not command:
        raise FeederError("Feeder command is not configured")

    env = {**os.environ, "PYTHONIOENCODING": "utf-8", "PYTHONUTF8": "1"}
    try:
        proc = await asyncio.create_subprocess_exec(
            *command,
            cwd=str(cwd),
            env=env,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        msg = f"Failed to start feeder pipeline: {exc}"
        raise FeederError(msg) from exc

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except TimeoutError:
        proc.kill()
        await proc.wait()
        msg = f"Feeder pipeline timed out after {timeout:g}s"
        raise FeederError(msg) from None

    out = stdout.decode("utf-8", errors="replace")
    err = stderr.decode("utf-8", errors="replace")
    logger.info("Feeder pipeline output:\n%s", out)
    if err:
        logger.warning("Feeder pipeline stderr:\n%s", err)

    if proc.returncode != 0:
        msg = f"Feeder pipeline exited with code {proc.returncode}: {err.strip()[:500]}"
        raise FeederError(msg)
    return out
