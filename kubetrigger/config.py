"""Configuration loading from environment variables."""

from __future__ import annotations

import os
import re

from kubetrigger.models.config import KubeTriggerConfig, LogConfig, TriggerConfig

# Optional DNS-subdomain prefix, then a name segment of at most 63 chars.
_RE_LABEL_KEY = re.compile(
    r"^(?:[a-z0-9](?:[-a-z0-9]{0,61}[a-z0-9])?(?:\.[a-z0-9](?:[-a-z0-9]{0,61}[a-z0-9])?)*/)?"
    r"[A-Za-z0-9](?:[-A-Za-z0-9_.]{0,61}[A-Za-z0-9])?$"
)


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBETRIGGER_{key}", default)


def _env_list(key: str, default: frozenset[str]) -> frozenset[str]:
    raw = os.environ.get(f"KUBETRIGGER_{key}")
    if raw is None:
        return default
    return frozenset(item.strip() for item in raw.split(",") if item.strip())


def _validate_label_key(value: str) -> str:
    if not _RE_LABEL_KEY.match(value):
        raise ValueError(f"Invalid label key: {value}")
    return value


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def load_config() -> KubeTriggerConfig:
    """Load configuration from KUBETRIGGER_* environment variables."""
    defaults = TriggerConfig()
    return KubeTriggerConfig(
        trigger=TriggerConfig(
            do_not_reconcile_label=_validate_label_key(
                _env("DO_NOT_RECONCILE_LABEL", defaults.do_not_reconcile_label)
            ),
            version_label=_validate_label_key(_env("VERSION_LABEL", defaults.version_label)),
            canary_label=_validate_label_key(_env("CANARY_LABEL", defaults.canary_label)),
            ephemeral_status_prefix=_env("EPHEMERAL_STATUS_PREFIX", defaults.ephemeral_status_prefix),
            ephemeral_status_suffix=_env("EPHEMERAL_STATUS_SUFFIX", defaults.ephemeral_status_suffix),
            override_config_name=_env("OVERRIDE_CONFIG_NAME", defaults.override_config_name),
            ignored_secret_names=_env_list("IGNORED_SECRETS", defaults.ignored_secret_names),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )
