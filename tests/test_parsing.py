"""Tests for number tokens and offset line parsing."""

from __future__ import annotations

import pytest

from src.health.parsing import (
    ParseError,
    extract_numbers,
    parse_chrony_offset,
    parse_ntpd_offset,
    to_float,
)

CHRONY_TRACKING = """\
Reference ID    : 0A7CD814 (some-ntp-server)
Stratum         : 2
Ref time (UTC)  : Thu May 31 13:41:40 2018
System time     : 0.000037743 seconds fast of NTP time
Last offset     : +0.000061081 seconds
RMS offset      : 0.000333012 seconds
Frequency       : 6.629 ppm fast
Residual freq   : +0.004 ppm
Skew            : 0.140 ppm
Root delay      : 0.002649408 seconds
Root dispersion : 0.000559144 seconds
Update interval : 517.4 seconds
Leap status     : Normal
"""


# ── extract_numbers ──────────────────────────────────────────────────────────


class TestExtractNumbers:
    def test_vgs_line(self) -> None:
        assert extract_numbers("5.37 26.84 vg_fast_registry") == ["5.37", "26.84"]

    def test_limit(self) -> None:
        text = "5.37 26.84 vg_fast_registry\n5.37 26.84 vg_slow"
        assert extract_numbers(text, 2) == ["5.37", "26.84"]
        assert extract_numbers(text, 3) == ["5.37", "26.84", "5.37"]

    def test_unbounded(self) -> None:
        assert extract_numbers("1 2.5 3", None) == ["1", "2.5", "3"]
        assert extract_numbers("1 2.5 3", -1) == ["1", "2.5", "3"]

    def test_zero_limit(self) -> None:
        assert extract_numbers("1 2 3", 0) == []

    def test_no_match(self) -> None:
        assert extract_numbers("no digits here") == []
        assert extract_numbers("") == []

    def test_sign_and_exponent_not_part_of_token(self) -> None:
        assert extract_numbers("-4.5 1e3 1,000") == ["4.5", "1", "3", "1", "000"]

    def test_trailing_dot_not_consumed(self) -> None:
        assert extract_numbers("7. done") == ["7"]

    def test_repeatable(self) -> None:
        text = "42.10  8.86   docker-pool"
        assert extract_numbers(text) == extract_numbers(text) == ["42.10", "8.86"]


class TestToFloat:
    def test_valid(self) -> None:
        assert to_float("+0.25", "x") == 0.25

    def test_invalid_raises_parse_error(self) -> None:
        with pytest.raises(ParseError) as exc:
            to_float("n/a", "chrony offset")
        assert exc.value.source == "chrony offset"
        assert "n/a" in exc.value.reason


# ── chrony ───────────────────────────────────────────────────────────────────


class TestChronyOffset:
    def test_tracking_report(self) -> None:
        assert parse_chrony_offset(CHRONY_TRACKING) == pytest.approx(0.000061081)

    def test_negative(self) -> None:
        assert parse_chrony_offset("Last offset     : -0.250000000 seconds") == -0.25

    def test_zero_is_a_reading(self) -> None:
        assert parse_chrony_offset("Last offset     : +0.000000000 seconds") == 0.0

    def test_first_match_wins(self) -> None:
        text = "Last offset : +0.5 seconds\nLast offset : +0.001 seconds\n"
        assert parse_chrony_offset(text) == 0.5

    def test_rms_offset_is_not_the_marker(self) -> None:
        with pytest.raises(ParseError) as exc:
            parse_chrony_offset("RMS offset      : 0.000333012 seconds\n")
        assert "not found" in exc.value.reason

    def test_empty_output(self) -> None:
        with pytest.raises(ParseError, match="not found"):
            parse_chrony_offset("")

    def test_marker_without_value(self) -> None:
        with pytest.raises(ParseError) as exc:
            parse_chrony_offset("Last offset     : unknown\n")
        assert "unexpected format" in exc.value.reason

    def test_unparseable_value(self) -> None:
        with pytest.raises(ParseError) as exc:
            parse_chrony_offset("Last offset     : +abc seconds\n")
        assert "+abc" in exc.value.reason


# ── ntpd ─────────────────────────────────────────────────────────────────────


class TestNtpdOffset:
    def test_offset_field(self) -> None:
        text = "mintc=3, offset=0.400, frequency=-4.546, sys_jitter=1.015,\n"
        assert parse_ntpd_offset(text) == 0.4

    def test_negative(self) -> None:
        text = "tc=10, mintc=3, offset=-0.648, frequency=3.934, sys_jitter=0.253,\n"
        assert parse_ntpd_offset(text) == -0.648

    def test_offset_at_end_of_line(self) -> None:
        assert parse_ntpd_offset("offset=150.2") == 150.2

    def test_first_match_wins(self) -> None:
        text = "offset=1.5, frequency=0,\noffset=99.0,\n"
        assert parse_ntpd_offset(text) == 1.5

    def test_no_offset_line(self) -> None:
        with pytest.raises(ParseError, match="not found"):
            parse_ntpd_offset("associd=0 status=0618 leap_none, sync_ntp,\n")

    def test_marker_without_assignment(self) -> None:
        with pytest.raises(ParseError) as exc:
            parse_ntpd_offset("offset unknown\n")
        assert "unexpected format" in exc.value.reason

    def test_empty_value(self) -> None:
        with pytest.raises(ParseError):
            parse_ntpd_offset("offset=, frequency=1.0,")
