"""Reconcile-trigger predicates.

Submodules:
    base      -- Predicate: the four substrate callbacks and event dispatch.
    primary   -- PrimaryPredicate and the per-kind adapter registry.
    secondary -- SecondaryPredicate for objects owned by a primary resource.
"""

from kubetrigger.predicates.base import Predicate
from kubetrigger.predicates.primary import (
    AdapterRegistry,
    PrimaryKindAdapter,
    PrimaryPredicate,
    default_adapters,
    is_upgrade,
)
from kubetrigger.predicates.secondary import SecondaryPredicate

__all__ = [
    "AdapterRegistry",
    "Predicate",
    "PrimaryKindAdapter",
    "PrimaryPredicate",
    "SecondaryPredicate",
    "default_adapters",
    "is_upgrade",
]
