"""Build-once wiring of the trigger engine.

The operator constructs one ``PredicateFactory`` at startup and hands the
predicates it produces to its watches. Everything the factory holds is
immutable after construction, so the predicates can be invoked
concurrently from any number of watch callbacks.

Construction order: config -> scheme -> adapters -> rules -> diff engine
                    -> primary predicate -> secondary predicates
"""

from __future__ import annotations

from types import MappingProxyType

from kubetrigger.config import load_config
from kubetrigger.diff.engine import DiffEngine
from kubetrigger.models.config import KubeTriggerConfig
from kubetrigger.observability.logging import get_logger, setup_logging
from kubetrigger.owners.scheme import CEPH_KINDS, Scheme, default_scheme
from kubetrigger.predicates.primary import AdapterRegistry, PrimaryPredicate, default_adapters
from kubetrigger.predicates.secondary import SecondaryPredicate
from kubetrigger.rules.base import RuleSet
from kubetrigger.rules.exclusions import default_rule_set

_logger = get_logger("factory")


class PredicateFactory:
    """Owns the shared, read-only components and the predicates built from them."""

    def __init__(
        self,
        config: KubeTriggerConfig | None = None,
        scheme: Scheme | None = None,
        adapters: AdapterRegistry | None = None,
        rules: RuleSet | None = None,
        owner_kinds: tuple[str, ...] = CEPH_KINDS,
    ) -> None:
        self.config = config or KubeTriggerConfig()
        self.scheme = scheme or default_scheme()
        self.adapters = adapters or default_adapters()
        self.rules = rules or default_rule_set(self.config.trigger)
        self.diff = DiffEngine()

        self._primary = PrimaryPredicate(
            config=self.config.trigger,
            adapters=self.adapters,
            rules=self.rules,
            diff=self.diff,
            scheme=self.scheme,
        )
        self._secondary = MappingProxyType(
            {
                kind: SecondaryPredicate(
                    kind,
                    scheme=self.scheme,
                    config=self.config.trigger,
                    rules=self.rules,
                    diff=self.diff,
                )
                for kind in owner_kinds
            }
        )
        _logger.info(
            "predicates_built",
            primary_kinds=sorted(adapter.kind for adapter in self.adapters),
            owner_kinds=sorted(self._secondary),
            rules=list(self.rules.names),
        )

    @classmethod
    def from_env(cls) -> PredicateFactory:
        """Build a factory from KUBETRIGGER_* environment variables.

        Also applies the configured log level, so this is the one call an
        operator process makes at startup.
        """
        config = load_config()
        setup_logging(config.log.level)
        return cls(config=config)

    def primary(self) -> PrimaryPredicate:
        return self._primary

    def secondary(self, owner_kind: str) -> SecondaryPredicate:
        """Return the predicate for objects owned by *owner_kind*.

        Raises:
            KeyError: *owner_kind* was not listed when the factory was built.
        """
        try:
            return self._secondary[owner_kind]
        except KeyError:
            raise KeyError(f"no secondary predicate built for owner kind '{owner_kind}'") from None
