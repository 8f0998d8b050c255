"""Exclusion rules evaluated before any diff is computed.

Submodules:
    base       -- ExclusionRule and the ordered, immutable RuleSet.
    exclusions -- Built-in rules and ``default_rule_set``.
"""

from kubetrigger.rules.base import ExclusionRule, RuleMatcher, RuleSet
from kubetrigger.rules.exclusions import DEFAULT_RULES, default_rule_set

__all__ = [
    "DEFAULT_RULES",
    "ExclusionRule",
    "RuleMatcher",
    "RuleSet",
    "default_rule_set",
]
