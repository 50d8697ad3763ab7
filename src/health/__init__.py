"""Health probes for clock sync, LVM capacity and reachability."""

from .engine import Failure, ProbeDef, ProbeResult, Status, execute_probe
