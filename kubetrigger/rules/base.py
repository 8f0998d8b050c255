"""Exclusion rule data model and ordered rule set.

An exclusion rule answers one question about one object: is this event
known to be irrelevant? Rules are data entries (name, events, kinds,
matcher, verdict) evaluated in priority order; the first matching rule
decides, and no diff is computed for the event.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from kubetrigger.models.config import TriggerConfig
from kubetrigger.models.objects import EventType, WatchedObject
from kubetrigger.observability.logging import get_logger

_logger = get_logger("rules.base")

RuleMatcher = Callable[[WatchedObject, TriggerConfig], bool]


@dataclass(frozen=True)
class ExclusionRule:
    """A named filter scoped to event types and, optionally, kinds.

    ``kinds`` of None means the rule applies to every kind. ``verdict`` is
    the reconcile decision returned when the rule matches.
    """

    name: str
    events: frozenset[EventType]
    matcher: RuleMatcher
    kinds: frozenset[str] | None = None
    verdict: bool = False

    def applies_to(self, event_type: EventType, obj: WatchedObject) -> bool:
        if event_type not in self.events:
            return False
        return self.kinds is None or obj.kind in self.kinds


class RuleSet:
    """Immutable, ordered collection of exclusion rules."""

    def __init__(self, rules: Iterable[ExclusionRule], config: TriggerConfig) -> None:
        self._rules = tuple(rules)
        self._config = config
        names = [rule.name for rule in self._rules]
        if len(names) != len(set(names)):
            raise ValueError(f"duplicate exclusion rule names: {names}")

    @property
    def config(self) -> TriggerConfig:
        return self._config

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(rule.name for rule in self._rules)

    def evaluate(self, event_type: EventType, obj: WatchedObject) -> ExclusionRule | None:
        """Return the first rule that excludes *obj* for *event_type*, if any."""
        for rule in self._rules:
            if rule.applies_to(event_type, obj) and rule.matcher(obj, self._config):
                _logger.debug(
                    "exclusion_matched",
                    rule=rule.name,
                    event_type=str(event_type),
                    kind=obj.kind,
                    name=obj.name,
                )
                return rule
        return None

    def with_rules(self, *rules: ExclusionRule, before: str | None = None) -> RuleSet:
        """Return a new rule set with *rules* added.

        Rules are appended (lowest priority) unless *before* names an existing
        rule, in which case they are inserted just ahead of it.
        """
        current = list(self._rules)
        if before is None:
            return RuleSet((*current, *rules), self._config)

        names = self.names
        if before not in names:
            raise ValueError(f"unknown exclusion rule: {before}")
        index = names.index(before)
        return RuleSet((*current[:index], *rules, *current[index:]), self._config)

    def __iter__(self) -> Iterator[ExclusionRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)
