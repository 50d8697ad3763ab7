"""Probe engine — runs diagnostics and classifies them as pass or fail.

Supports: chrony, ntpd, LVM volume group free space, LVM thin pool usage,
HTTP(S) reachability, DNS resolution.
Each probe returns a ProbeResult and never raises.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from src.config import settings

from .commands import CommandError, run_command
from .network import check_http, resolve_addresses
from .parsing import ParseError, parse_chrony_offset, parse_ntpd_offset
from .thresholds import (
    CHRONY_MAX_OFFSET,
    NTPD_MAX_OFFSET,
    lv_over_limit,
    lv_pool_usage,
    offset_within,
    vg_free_ok,
    vg_free_percent,
)

logger = logging.getLogger(__name__)

Runner = Callable[[str], str]


# ── Models ───────────────────────────────────────────────────────────────────


class Status(str, Enum):
    PASS = "pass"
    FAIL = "fail"


class Failure(str, Enum):
    """Why a probe failed. Lets callers tell a broken tool from a bad value."""

    COMMAND = "command"  # diagnostic command could not run
    PARSE = "parse"  # output did not have the expected shape
    RANGE = "range"  # reading outside the threshold
    UNREACHABLE = "unreachable"  # HTTP or DNS target not reachable
    ERROR = "error"  # probe itself crashed or is unknown


@dataclass
class ProbeResult:
    """Result of a single probe execution."""

    probe: str
    status: Status
    message: str
    failure: Failure | None = None
    value: float | None = None
    details: dict[str, Any] = field(default_factory=dict)
    latency_ms: float = 0.0
    probe_id: str = ""
    timestamp: str = ""

    def __post_init__(self) -> None:
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    @property
    def ok(self) -> bool:
        return self.status is Status.PASS


def _passed(probe: str, message: str, t0: float, **kw: Any) -> ProbeResult:
    latency = (time.perf_counter() - t0) * 1000
    return ProbeResult(
        probe=probe, status=Status.PASS, message=message,
        latency_ms=round(latency, 1), **kw,
    )


def _failed(probe: str, failure: Failure, message: str, t0: float, **kw: Any) -> ProbeResult:
    latency = (time.perf_counter() - t0) * 1000
    logger.warning("%s probe failed (%s): %s", probe, failure.value, message)
    return ProbeResult(
        probe=probe, status=Status.FAIL, failure=failure, message=message,
        latency_ms=round(latency, 1), **kw,
    )


def _default_runner(command: str) -> str:
    return run_command(command, timeout=settings.command_timeout)


# ── Clock offset probes ──────────────────────────────────────────────────────


def _offset_probe(
    daemon: str,
    command: str,
    parse: Callable[[str], float],
    limit: float,
    runner: Runner | None,
) -> ProbeResult:
    t0 = time.perf_counter()
    try:
        out = (runner or _default_runner)(command)
    except CommandError as e:
        return _failed(daemon, Failure.COMMAND, f"Could not check {daemon} status: {e.cause}", t0)

    try:
        offset = parse(out)
    except ParseError as e:
        return _failed(daemon, Failure.PARSE, f"Could not parse {daemon} output: {e.reason}", t0)

    details = {"limit": limit}
    if not offset_within(offset, limit):
        return _failed(
            daemon, Failure.RANGE,
            f"Time is not correct on the server or {daemon} is not running "
            f"(offset {offset} outside ±{limit})",
            t0, value=offset, details=details,
        )
    return _passed(daemon, f"{daemon} offset {offset} within ±{limit}", t0,
                   value=offset, details=details)


def probe_chrony(runner: Runner | None = None, max_offset: float = CHRONY_MAX_OFFSET) -> ProbeResult:
    """Check that chrony's last offset lies within ``max_offset`` seconds."""
    return _offset_probe("chrony", settings.chrony_command, parse_chrony_offset, max_offset, runner)


def probe_ntpd(runner: Runner | None = None, max_offset: float = NTPD_MAX_OFFSET) -> ProbeResult:
    """Check that ntpd's offset lies within ``max_offset`` (ntpq units, milliseconds)."""
    return _offset_probe("ntpd", settings.ntpd_command, parse_ntpd_offset, max_offset, runner)


# ── LVM capacity probes ──────────────────────────────────────────────────────


def probe_vg_size(vg: str, ok_size: int | None = None, runner: Runner | None = None) -> ProbeResult:
    """Pass if volume group ``vg`` has at least ``ok_size`` percent free."""
    t0 = time.perf_counter()
    if ok_size is None:
        ok_size = settings.vg_min_free_percent
    details: dict[str, Any] = {"volume_group": vg, "threshold": ok_size}

    try:
        out = (runner or _default_runner)(settings.vgs_command.format(vg=vg))
    except CommandError as e:
        return _failed("vg", Failure.COMMAND, f"Could not check size of {vg}: {e.cause}", t0,
                       details=details)

    try:
        free, size, percent = vg_free_percent(out)
    except ParseError as e:
        return _failed("vg", Failure.PARSE, f"Unable to parse vgs output for {vg}: {e.reason}", t0,
                       details=details)

    details.update({"free": free, "size": size})
    if not vg_free_ok(percent, ok_size):
        return _failed(
            "vg", Failure.RANGE,
            f"VG {vg} free size is below threshold. Size: {size}, free: {free}, "
            f"threshold: {ok_size} %",
            t0, value=percent, details=details,
        )
    return _passed("vg", f"VG {vg} has {percent:.2f} % free", t0, value=percent, details=details)


def probe_lv_pool_size(pool: str, ok_size: int | None = None, runner: Runner | None = None) -> ProbeResult:
    """Pass if both data and metadata usage of thin pool ``pool`` are below ``ok_size`` percent."""
    t0 = time.perf_counter()
    if ok_size is None:
        ok_size = settings.lv_max_used_percent
    details: dict[str, Any] = {"pool": pool, "threshold": ok_size}

    try:
        out = (runner or _default_runner)(settings.lvs_command.format(pool=pool))
    except CommandError as e:
        return _failed("lv", Failure.COMMAND, f"Could not check usage of {pool}: {e.cause}", t0,
                       details=details)

    try:
        data, metadata = lv_pool_usage(out)
    except ParseError as e:
        return _failed("lv", Failure.PARSE, f"Unable to parse lvs output for {pool}: {e.reason}", t0,
                       details=details)

    details.update({"data_percent": data, "metadata_percent": metadata})
    over = lv_over_limit((data, metadata), ok_size)
    if over:
        return _failed(
            "lv", Failure.RANGE,
            f"LVM pool {pool} size exceeded threshold {ok_size} %: {', '.join(str(p) for p in over)}",
            t0, value=max(over), details=details,
        )
    return _passed("lv", f"LVM pool {pool} data {data} %, metadata {metadata} %", t0,
                   value=max(data, metadata), details=details)


# ── Reachability probes ──────────────────────────────────────────────────────


def probe_external_system(
    url: str,
    verify_tls: bool | None = None,
    timeout_ms: int | None = None,
) -> ProbeResult:
    """Pass if a GET to ``url`` gets any response."""
    t0 = time.perf_counter()
    if verify_tls is None:
        verify_tls = settings.probe_tls_verify
    try:
        check_http(url, verify_tls=verify_tls, timeout_ms=timeout_ms or settings.http_timeout_ms)
    except Exception as e:  # noqa: BLE001 - probe should not raise
        return _failed("http", Failure.UNREACHABLE, f"Call to {url} failed", t0,
                       details={"url": url, "error": f"{type(e).__name__}: {e}"})
    return _passed("http", f"Call to {url} succeeded", t0, details={"url": url})


def probe_dns(name: str) -> ProbeResult:
    """Pass if ``name`` resolves to at least one address."""
    t0 = time.perf_counter()
    ips = resolve_addresses(name)
    if not ips:
        return _failed("dns", Failure.UNREACHABLE, f"Could not resolve {name}", t0,
                       details={"name": name})
    return _passed("dns", f"{name} resolved to {', '.join(ips[:3])}", t0,
                   details={"name": name, "ips": ips})


# ── Dispatcher ───────────────────────────────────────────────────────────────


@dataclass
class ProbeDef:
    """Definition of a single probe to run."""

    id: str
    kind: str  # chrony | ntpd | vg | lv | http | dns
    target: str = ""  # volume group, pool, URL or DNS name
    threshold: int | None = None  # percent, for vg / lv


PROBE_RUNNERS: dict[str, Callable[[ProbeDef], ProbeResult]] = {
    "chrony": lambda d: probe_chrony(),
    "ntpd": lambda d: probe_ntpd(),
    "vg": lambda d: probe_vg_size(d.target, d.threshold),
    "lv": lambda d: probe_lv_pool_size(d.target, d.threshold),
    "http": lambda d: probe_external_system(d.target),
    "dns": lambda d: probe_dns(d.target),
}


def execute_probe(defn: ProbeDef) -> ProbeResult:
    """Run a probe by kind and tag the result with its ID."""
    runner = PROBE_RUNNERS.get(defn.kind)
    if not runner:
        return ProbeResult(
            probe=defn.kind, status=Status.FAIL, failure=Failure.ERROR,
            message=f"Unknown probe kind: {defn.kind}", probe_id=defn.id,
        )
    try:
        result = runner(defn)
    except Exception as e:  # noqa: BLE001 - probe should not raise
        logger.exception("Probe %s crashed", defn.id)
        result = ProbeResult(
            probe=defn.kind, status=Status.FAIL, failure=Failure.ERROR,
            message=f"Probe error: {type(e).__name__}: {e}",
        )
    result.probe_id = defn.id
    return result
