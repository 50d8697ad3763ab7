"""Run diagnostic shell commands and capture their output."""

from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30  # seconds


class CommandError(Exception):
    """Raised when a diagnostic command cannot run or exits non-zero."""

    def __init__(self, command: str, cause: str) -> None:
        super().__init__(f"{command!r} failed: {cause}")
        self.command = command
        self.cause = cause


def run_command(command: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Run ``command`` through bash and return its stdout."""
    logger.info("Checking output of '%s'", command)
    try:
        result = subprocess.run(
            ["bash", "-c", command],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        raise CommandError(command, f"timed out after {timeout}s") from None
    except OSError as e:
        raise CommandError(command, str(e)) from e

    if result.returncode != 0:
        stderr = result.stderr.strip()
        cause = f"exit status {result.returncode}"
        if stderr:
            cause = f"{cause}: {stderr}"
        raise CommandError(command, cause)
    return result.stdout
