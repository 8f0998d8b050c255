"""Exception taxonomy for the trigger engine.

None of these ever escape a predicate callback: each callback catches
``TriggerError`` at its boundary, logs it, and returns its fail verdict.
"""

from __future__ import annotations


class TriggerError(Exception):
    """Base class for all kubetrigger errors."""


class DiffError(TriggerError):
    """Raised when two snapshots cannot be structurally compared."""


class OwnerResolutionError(TriggerError):
    """Raised when an owner kind cannot be resolved through the scheme."""

    def __init__(self, kind: str, reason: str) -> None:
        super().__init__(f"cannot resolve owner kind '{kind}': {reason}")
        self.kind = kind
        self.reason = reason


class AccessorError(TriggerError):
    """Raised when a field of a watched object cannot be read."""
