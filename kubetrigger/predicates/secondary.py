"""Predicate for objects owned by a primary resource.

Secondary objects (Secrets, ConfigMaps, Deployments) are created by the
reconciler itself, so their creation never triggers. Deletion triggers so
the reconciler can recreate them; updates trigger only for owned objects
whose content really changed and that no exclusion rule filters out.
"""

from __future__ import annotations

from kubetrigger.diff.engine import DiffEngine
from kubetrigger.models.config import TriggerConfig
from kubetrigger.models.objects import EventType, WatchedObject
from kubetrigger.observability.logging import get_logger
from kubetrigger.owners.matcher import MatchResult, OwnerReferenceMatcher
from kubetrigger.owners.scheme import Scheme, default_scheme
from kubetrigger.predicates.base import Predicate
from kubetrigger.rules.base import RuleSet
from kubetrigger.rules.exclusions import default_rule_set

_logger = get_logger("predicates.secondary")


class SecondaryPredicate(Predicate):
    """Decides whether events on objects owned by ``owner_kind`` trigger a reconcile."""

    name = "secondary"
    fail_verdict = False

    def __init__(
        self,
        owner_kind: str,
        scheme: Scheme | None = None,
        config: TriggerConfig | None = None,
        rules: RuleSet | None = None,
        diff: DiffEngine | None = None,
    ) -> None:
        super().__init__(scheme or default_scheme())
        self._matcher = OwnerReferenceMatcher(owner_kind, self._scheme)
        self._rules = rules or default_rule_set(config or TriggerConfig())
        self._diff = diff or DiffEngine()

    @property
    def owner_kind(self) -> str:
        return self._matcher.owner_kind

    def _create(self, obj: WatchedObject) -> bool:
        return False

    def _delete(self, obj: WatchedObject) -> bool:
        match = self._match(obj, EventType.DELETE)
        name = match.identity.name
        if not match.matched:
            _logger.debug("secondary_no_match_on_delete", kind=obj.kind, name=name)
            return False

        rule = self._rules.evaluate(EventType.DELETE, obj)
        if rule is not None:
            _logger.debug("secondary_delete_excluded", kind=obj.kind, name=name, rule=rule.name)
            return rule.verdict

        owner = match.owner.name if match.owner is not None else ""
        _logger.info("secondary_match_on_delete", kind=obj.kind, name=name, owner=owner)
        return True

    def _update(self, old: WatchedObject, new: WatchedObject) -> bool:
        match = self._match(new, EventType.UPDATE)
        name = match.identity.name
        if not match.matched:
            return False

        rule = self._rules.evaluate(EventType.UPDATE, new)
        if rule is not None:
            _logger.debug("secondary_update_excluded", kind=new.kind, name=name, rule=rule.name)
            return rule.verdict

        _logger.debug("secondary_match_on_update", kind=new.kind, name=name)
        result = self._diff.changed(old, new)
        if result.error is not None:
            _logger.error("secondary_diff_failed", kind=new.kind, name=name, error=str(result.error))
            return True
        if result.changed:
            _logger.info("secondary_object_changed", kind=new.kind, name=name, patch=result.text)
        return result.changed

    def _match(self, obj: WatchedObject, event_type: EventType) -> MatchResult:
        match = self._matcher.match(obj)
        if match.error is not None:
            _logger.error(
                "owner_match_failed",
                owner_kind=self._matcher.owner_kind,
                event_type=str(event_type),
                kind=obj.kind,
                error=str(match.error),
            )
        return match
