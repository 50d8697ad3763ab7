"""Run the configured health probes once and print the results."""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.table import Table

from src.config import Settings, settings
from src.health.engine import PROBE_RUNNERS, ProbeDef, ProbeResult, execute_probe

console = Console()
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)


def configured_probes(cfg: Settings, kinds: set[str] | None = None) -> list[ProbeDef]:
    """Build probe definitions from settings, optionally limited to ``kinds``."""
    defs = [ProbeDef(id="chrony", kind="chrony"), ProbeDef(id="ntpd", kind="ntpd")]
    defs += [ProbeDef(id=f"vg-{vg}", kind="vg", target=vg, threshold=cfg.vg_min_free_percent)
             for vg in cfg.volume_groups]
    defs += [ProbeDef(id=f"lv-{pool}", kind="lv", target=pool, threshold=cfg.lv_max_used_percent)
             for pool in cfg.lv_pools]
    defs += [ProbeDef(id=f"http-{url}", kind="http", target=url) for url in cfg.external_urls]
    defs += [ProbeDef(id=f"dns-{name}", kind="dns", target=name) for name in cfg.dns_names]
    if kinds:
        defs = [d for d in defs if d.kind in kinds]
    return defs


def render(results: list[ProbeResult]) -> Table:
    table = Table(title="Health probes")
    table.add_column("Probe")
    table.add_column("Status")
    table.add_column("Message")
    table.add_column("ms", justify="right")
    for r in results:
        style = "green" if r.ok else "red"
        table.add_row(r.probe_id, f"[{style}]{r.status.value}[/{style}]", r.message, f"{r.latency_ms:.1f}")
    return table


def main() -> None:
    parser = argparse.ArgumentParser(description="Run server health probes")
    parser.add_argument(
        "kinds", nargs="*",
        help=f"Probe kinds to run: {', '.join(PROBE_RUNNERS)} (default: all configured)",
    )
    args = parser.parse_args()
    unknown = sorted(set(args.kinds) - set(PROBE_RUNNERS))
    if unknown:
        parser.error(f"unknown probe kind: {', '.join(unknown)}")

    results = [execute_probe(d) for d in configured_probes(settings, set(args.kinds))]
    console.print(render(results))
    sys.exit(0 if all(r.ok for r in results) else 1)


if __name__ == "__main__":
    main()
