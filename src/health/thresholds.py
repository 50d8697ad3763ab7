"""Threshold policies for clock offsets and LVM capacity readings."""

from __future__ import annotations

from .parsing import ParseError, extract_numbers, to_float

# chronyc reports seconds: 100 milliseconds either way.
CHRONY_MAX_OFFSET = 0.1
# ntpq reports milliseconds.
NTPD_MAX_OFFSET = 100.0


def offset_within(offset: float, limit: float) -> bool:
    """True if ``-limit <= offset <= limit``."""
    return -limit <= offset <= limit


# ── Volume group ─────────────────────────────────────────────────────────────


def vg_free_percent(stdout: str) -> tuple[float, float, float]:
    """Parse ``vgs`` output into ``(free, size, percent_free)``.

    The first two decimal tokens are free and total size::

        5.37 26.84 vg_fast_registry
    """
    nums = extract_numbers(stdout, 2)
    if len(nums) != 2:
        raise ParseError("vgs output", f"expected 2 numbers, found {len(nums)}")

    free = to_float(nums[0], "vgs free size")
    size = to_float(nums[1], "vgs total size")
    if size == 0:
        raise ParseError("vgs output", "volume group size is zero")
    return free, size, 100 * free / size


def vg_free_ok(percent: float, ok_size: int) -> bool:
    """True if ``percent`` free is at or above ``ok_size``, expected in [0, 100]."""
    return percent >= ok_size


# ── Logical volume pool ──────────────────────────────────────────────────────


def lv_pool_usage(stdout: str) -> tuple[float, float]:
    """Parse ``lvs`` output into ``(data_percent, metadata_percent)``.

    Exactly two decimal tokens are expected::

        42.10  8.86   docker-pool

    Output covering more than one pool is rejected.
    """
    nums = extract_numbers(stdout)
    if len(nums) != 2:
        raise ParseError("lvs output", f"expected 2 numbers, found {len(nums)}")
    return to_float(nums[0], "lvs data percent"), to_float(nums[1], "lvs metadata percent")


def lv_over_limit(usage: tuple[float, float], ok_size: int) -> list[float]:
    """Return the readings that are not strictly below ``ok_size``."""
    return [pct for pct in usage if pct >= ok_size]

