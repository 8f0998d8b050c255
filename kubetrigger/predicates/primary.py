"""Predicate for the primary (custom) resources themselves.

Creation and deletion of a primary resource are always actionable. Updates
only trigger when the spec changed, deletion was requested, or an upgrade
label transition was observed; status-only writes never do, which is what
keeps the operator out of a reconcile storm.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from kubetrigger.diff.engine import DiffEngine
from kubetrigger.models.config import TriggerConfig
from kubetrigger.models.objects import EventType, WatchedObject
from kubetrigger.observability.logging import get_logger
from kubetrigger.owners.scheme import CEPH_KINDS, Scheme, default_scheme
from kubetrigger.predicates.base import Predicate
from kubetrigger.rules.base import RuleSet
from kubetrigger.rules.exclusions import default_rule_set

_logger = get_logger("predicates.primary")

_UPGRADE_TRACKING_KINDS = frozenset({"CephObjectStore", "CephFilesystem", "CephNFS", "CephRBDMirror"})


@dataclass(frozen=True)
class PrimaryKindAdapter:
    """Accessors the primary algorithm needs for one kind.

    Kinds whose desired state does not live under ``spec`` subclass this
    and override ``spec``.
    """

    kind: str
    tracks_upgrades: bool = False

    def spec(self, obj: WatchedObject) -> object | None:
        return obj.spec

    def labels(self, obj: WatchedObject) -> Mapping[str, str]:
        return obj.labels

    def generation(self, obj: WatchedObject) -> int | None:
        return obj.generation

    def deletion_timestamp(self, obj: WatchedObject) -> object | None:
        return obj.deletion_timestamp


class AdapterRegistry:
    """Immutable kind -> adapter mapping."""

    def __init__(self, adapters: Iterable[PrimaryKindAdapter] = ()) -> None:
        self._adapters = MappingProxyType({adapter.kind: adapter for adapter in adapters})

    def get(self, kind: str) -> PrimaryKindAdapter | None:
        return self._adapters.get(kind)

    def with_adapters(self, *adapters: PrimaryKindAdapter) -> AdapterRegistry:
        return AdapterRegistry((*self._adapters.values(), *adapters))

    def __contains__(self, kind: object) -> bool:
        return kind in self._adapters

    def __iter__(self) -> Iterator[PrimaryKindAdapter]:
        return iter(self._adapters.values())

    def __len__(self) -> int:
        return len(self._adapters)


def default_adapters() -> AdapterRegistry:
    return AdapterRegistry(
        PrimaryKindAdapter(kind, tracks_upgrades=kind in _UPGRADE_TRACKING_KINDS) for kind in CEPH_KINDS
    )


def is_upgrade(old_labels: Mapping[str, str], new_labels: Mapping[str, str], version_label: str) -> bool:
    """Return True when the version label appeared or changed value."""
    if version_label not in new_labels:
        return False
    if version_label not in old_labels:
        return True
    return old_labels[version_label] != new_labels[version_label]


class PrimaryPredicate(Predicate):
    """Decides whether events on primary resources trigger a reconcile."""

    name = "primary"
    fail_verdict = True

    def __init__(
        self,
        config: TriggerConfig | None = None,
        adapters: AdapterRegistry | None = None,
        rules: RuleSet | None = None,
        diff: DiffEngine | None = None,
        scheme: Scheme | None = None,
    ) -> None:
        super().__init__(scheme or default_scheme())
        self._config = config or TriggerConfig()
        self._adapters = adapters or default_adapters()
        self._rules = rules or default_rule_set(self._config)
        self._diff = diff or DiffEngine()

    def _create(self, obj: WatchedObject) -> bool:
        _logger.debug("primary_create", kind=obj.kind, name=obj.name)
        return True

    def _delete(self, obj: WatchedObject) -> bool:
        _logger.debug("primary_delete", kind=obj.kind, name=obj.name)
        return True

    def _update(self, old: WatchedObject, new: WatchedObject) -> bool:
        name = new.name
        adapter = self._adapters.get(new.kind)
        if adapter is None:
            _logger.debug("primary_update_untracked_kind", kind=new.kind, name=name)
            return False

        rule = self._rules.evaluate(EventType.UPDATE, new)
        if rule is not None:
            _logger.debug("primary_update_excluded", kind=new.kind, name=name, rule=rule.name)
            return rule.verdict

        result = self._diff.spec_changed(adapter.spec(old), adapter.spec(new))
        if result.error is not None:
            _logger.warning("primary_spec_diff_failed", kind=new.kind, name=name, error=str(result.error))
            return True
        if result.changed:
            _logger.info("primary_spec_changed", kind=new.kind, name=name, diff=result.text)
            return True

        if adapter.deletion_timestamp(old) != adapter.deletion_timestamp(new):
            _logger.debug("primary_deletion_requested", kind=new.kind, name=name)
            return True

        # Logged only: a generation bump with an identical spec is not suppressed here.
        if adapter.generation(old) != adapter.generation(new):
            _logger.debug("primary_update_unchanged_spec", kind=new.kind, name=name)

        if adapter.tracks_upgrades and is_upgrade(
            adapter.labels(old), adapter.labels(new), self._config.version_label
        ):
            _logger.info(
                "primary_upgrade_detected",
                kind=new.kind,
                name=name,
                version=adapter.labels(new).get(self._config.version_label),
            )
            return True

        return False
