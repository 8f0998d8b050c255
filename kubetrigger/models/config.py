"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TriggerConfig:
    """Label and name conventions consulted by the predicates.

    Built once at process start and shared by reference; never mutated.
    """

    do_not_reconcile_label: str = "do_not_reconcile"
    version_label: str = "ceph_version"
    canary_label: str = "mon_canary"
    ephemeral_status_prefix: str = "rook-ceph-osd-"
    ephemeral_status_suffix: str = "-status"
    override_config_name: str = "rook-config-override"
    ignored_secret_names: frozenset[str] = frozenset({"rook-ceph-config"})


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class KubeTriggerConfig:
    """Top-level kubetrigger configuration."""

    trigger: TriggerConfig = field(default_factory=TriggerConfig)
    log: LogConfig = field(default_factory=LogConfig)
