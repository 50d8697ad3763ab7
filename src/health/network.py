"""HTTP and DNS reachability primitives."""

from __future__ import annotations

import logging
import socket

import httpx

logger = logging.getLogger(__name__)


def check_http(url: str, verify_tls: bool = True, timeout_ms: int = 10_000) -> None:
    """Issue a single GET to ``url``. Raises on transport failure or a malformed URL.

    Any response counts, whatever its status code. Certificate validation
    is only skipped for https URLs and only when ``verify_tls`` is False,
    which is meant for self-signed endpoints inside the cluster network.
    """
    logger.info("Checking access to: %s", url)
    verify = verify_tls or not url.startswith("https")
    try:
        with httpx.Client(timeout=timeout_ms / 1000, verify=verify) as client:
            with client.stream("GET", url) as resp:
                logger.debug("%s answered %d", url, resp.status_code)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning("error in http check: %s", e)
        raise


def resolve_addresses(name: str) -> list[str]:
    """Resolve ``name`` to its sorted unique addresses, or [] on failure."""
    try:
        infos = socket.getaddrinfo(name, None)
    except (socket.gaierror, UnicodeError) as e:
        logger.warning("failed to lookup ip for name %s: %s", name, e)
        return []
    return sorted({info[4][0] for info in infos})
