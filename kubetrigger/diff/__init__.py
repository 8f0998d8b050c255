"""Normalized diffing of watched objects.

Submodules:
    quantity -- Kubernetes quantity parsing and value comparison.
    engine   -- DiffEngine: merge-patch diff with volatile fields stripped.
"""

from kubetrigger.diff.engine import DiffEngine, DiffResult, compute_patch
from kubetrigger.diff.quantity import QuantityError, parse_quantity, quantities_equal

__all__ = [
    "DiffEngine",
    "DiffResult",
    "QuantityError",
    "compute_patch",
    "parse_quantity",
    "quantities_equal",
]
