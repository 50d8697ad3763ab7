from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Time-sync diagnostics
    chrony_command: str = "chronyc tracking"
    ntpd_command: str = "ntpq -c rv 0 offset"

    # LVM diagnostics ({vg} / {pool} are substituted per probe)
    vgs_command: str = "vgs --noheadings --units g --nosuffix -o vg_free,vg_size {vg}"
    lvs_command: str = "lvs --noheadings -o data_percent,metadata_percent {pool}"
    vg_min_free_percent: int = 10  # pass if free >= this
    lv_max_used_percent: int = 80  # pass if data and metadata < this
    volume_groups: list[str] = ["vg_fast_registry", "vg_slow"]
    lv_pools: list[str] = ["docker-vg/docker-pool"]

    command_timeout: int = 30  # seconds per diagnostic command

    # Reachability
    external_urls: list[str] = []
    dns_names: list[str] = [
        "daemon.ose-mon-a.endpoints.cluster.local",
        "daemon.ose-mon-a.svc.cluster.local",
        "daemon.ose-mon-b.svc.cluster.local",
        "daemon.ose-mon-c.svc.cluster.local",
    ]
    http_timeout_ms: int = 10_000
    # Internal endpoints use self-signed certificates; set true to validate.
    probe_tls_verify: bool = False

    # Logging
    log_level: str = "INFO"


settings = Settings()
