"""Text scanning for diagnostic command output.

Time-sync daemons and LVM tools print human-oriented reports whose column
layout is not stable, but the labelled fields are. Parsers here locate the
first line carrying a label and pull the number out of it.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

# Unsigned decimal, optional fraction. No exponent, no thousands separators.
NUMBER = re.compile(r"\d+(?:\.\d+)?")

# Last offset     : +0.000061081 seconds
_CHRONY_OFFSET = re.compile(r"offset\s+:\s+(.*?)\s+seconds")

# tc=10, mintc=3, offset=-0.648, frequency=3.934, sys_jitter=0.253,
_NTPD_OFFSET = re.compile(r"offset=([^,]*?)\s*(?:,|$)")


class ParseError(Exception):
    """Raised when diagnostic output does not have the expected shape."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"couldn't parse {source}: {reason}")
        self.source = source
        self.reason = reason


def extract_numbers(text: str, limit: int | None = None) -> list[str]:
    """Return up to ``limit`` decimal tokens from ``text``, left to right.

    ``None`` or a negative limit means no limit.
    """
    if limit is None or limit < 0:
        return NUMBER.findall(text)
    tokens: list[str] = []
    if limit == 0:
        return tokens
    for match in NUMBER.finditer(text):
        tokens.append(match.group())
        if len(tokens) == limit:
            break
    return tokens


def to_float(token: str, source: str) -> float:
    """Convert a captured token, raising ParseError instead of ValueError."""
    try:
        return float(token)
    except ValueError:
        raise ParseError(source, f"value was {token!r}") from None


def _parse_offset_line(
    text: str, marker: str, pattern: re.Pattern[str], source: str,
) -> float:
    for line in text.splitlines():
        if marker not in line:
            continue
        match = pattern.search(line)
        if match is None:
            raise ParseError(source, f"offset line has unexpected format: {line.strip()!r}")
        value = match.group(1).strip()
        logger.info("Found %s: %s", source, value)
        return to_float(value, source)
    raise ParseError(source, "offset line was not found")


def parse_chrony_offset(text: str) -> float:
    """Extract the ``Last offset`` value (seconds) from ``chronyc tracking``.

    Example report::

        Reference ID    : 0A7CD814 (some-ntp-server)
        Stratum         : 2
        System time     : 0.000037743 seconds fast of NTP time
        Last offset     : +0.000061081 seconds
        RMS offset      : 0.000333012 seconds
        Leap status     : Normal

    Only the first matching line is considered.
    """
    return _parse_offset_line(text, "Last offset", _CHRONY_OFFSET, "chrony offset")


def parse_ntpd_offset(text: str) -> float:
    """Extract ``offset=`` from ``ntpq -c rv 0 offset`` output.

    ntpq reports the offset in milliseconds::

        mintc=3, offset=0.400, frequency=-4.546, sys_jitter=1.015,
    """
    return _parse_offset_line(text, "offset", _NTPD_OFFSET, "ntpd offset")
