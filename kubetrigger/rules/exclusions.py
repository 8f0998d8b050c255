"""Built-in exclusion rules, in priority order."""

from __future__ import annotations

from kubetrigger.models.config import TriggerConfig
from kubetrigger.models.objects import EventType, WatchedObject
from kubetrigger.rules.base import ExclusionRule, RuleSet

CONFIG_MAP = "ConfigMap"
SECRET = "Secret"
DEPLOYMENT = "Deployment"

_UPDATE = frozenset({EventType.UPDATE})
_DELETE = frozenset({EventType.DELETE})


def has_do_not_reconcile_label(obj: WatchedObject, config: TriggerConfig) -> bool:
    return obj.labels.get(config.do_not_reconcile_label) == "true"


def is_ephemeral_status(obj: WatchedObject, config: TriggerConfig) -> bool:
    # Per-OSD status ConfigMaps are written and removed during OSD provisioning.
    name = obj.name
    return name.startswith(config.ephemeral_status_prefix) and name.endswith(config.ephemeral_status_suffix)


def is_canary(obj: WatchedObject, config: TriggerConfig) -> bool:
    return obj.labels.get(config.canary_label) == "true"


def is_not_config_override(obj: WatchedObject, config: TriggerConfig) -> bool:
    return obj.name != config.override_config_name


def is_ignorable_secret(obj: WatchedObject, config: TriggerConfig) -> bool:
    return obj.name in config.ignored_secret_names


def always(obj: WatchedObject, config: TriggerConfig) -> bool:
    return True


DO_NOT_RECONCILE = ExclusionRule("do-not-reconcile", _UPDATE, has_do_not_reconcile_label)
EPHEMERAL_STATUS = ExclusionRule("ephemeral-status", _DELETE, is_ephemeral_status, kinds=frozenset({CONFIG_MAP}))
CANARY_WORKER = ExclusionRule("canary-worker", _DELETE, is_canary, kinds=frozenset({DEPLOYMENT}))
CONFIG_OVERRIDE_ONLY = ExclusionRule(
    "config-override-only", _UPDATE, is_not_config_override, kinds=frozenset({CONFIG_MAP})
)
IGNORABLE_SECRET = ExclusionRule("ignorable-secret", _UPDATE, is_ignorable_secret, kinds=frozenset({SECRET}))
WORKER_DEPLOYMENT = ExclusionRule("worker-deployment", _UPDATE, always, kinds=frozenset({DEPLOYMENT}))

DEFAULT_RULES = (
    DO_NOT_RECONCILE,
    EPHEMERAL_STATUS,
    CANARY_WORKER,
    CONFIG_OVERRIDE_ONLY,
    IGNORABLE_SECRET,
    WORKER_DEPLOYMENT,
)


def default_rule_set(config: TriggerConfig | None = None) -> RuleSet:
    return RuleSet(DEFAULT_RULES, config or TriggerConfig())
