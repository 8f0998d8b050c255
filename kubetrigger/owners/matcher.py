"""Owner reference matching for secondary objects.

A secondary object (Secret, ConfigMap, Deployment...) is only considered
when one of its ownerReferences names the tracked primary kind. There is no
name-based fallback: an object without an explicit owner reference is
unrelated, however its name looks.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from kubetrigger.errors import AccessorError, OwnerResolutionError
from kubetrigger.models.objects import ObjectIdentity, OwnerReference, WatchedObject
from kubetrigger.observability.logging import get_logger
from kubetrigger.owners.scheme import KindInfo, Scheme

_logger = get_logger("owners.matcher")


@dataclass(frozen=True)
class MatchResult:
    """Result of matching one candidate against the tracked owner kind."""

    matched: bool
    identity: ObjectIdentity = field(default_factory=ObjectIdentity)
    owner: OwnerReference | None = None
    error: Exception | None = None


class OwnerReferenceMatcher:
    """Matches objects owned by one primary kind.

    Construction never raises: when the owner kind cannot be resolved
    through the scheme the failure is logged and the matcher matches
    nothing, so a bad registration cannot break watch setup.
    """

    def __init__(self, owner_kind: str, scheme: Scheme) -> None:
        self._owner_kind = owner_kind
        self._scheme = scheme
        self._owner: KindInfo | None = None
        self._init_error: OwnerResolutionError | None = None
        try:
            self._owner = scheme.lookup(owner_kind)
        except OwnerResolutionError as exc:
            _logger.error("owner_matcher_init_failed", owner_kind=owner_kind, error=str(exc))
            self._init_error = exc

    @property
    def owner_kind(self) -> str:
        return self._owner_kind

    @property
    def resolved(self) -> bool:
        """False when construction failed and the matcher never matches."""
        return self._owner is not None

    def match(self, candidate: object) -> MatchResult:
        """Return the first owner reference of *candidate* naming the tracked kind."""
        try:
            obj = WatchedObject.from_any(candidate, self._scheme)
            identity = obj.identity()
            refs = obj.owner_references
        except AccessorError as exc:
            return MatchResult(matched=False, error=exc)

        if self._owner is None:
            return MatchResult(matched=False, identity=identity, error=self._init_error)

        for ref in refs:
            if ref.kind != self._owner.kind:
                continue
            # Same kind name in another API group is a different resource.
            if ref.api_version and self._owner.api_version and ref.group != self._owner.group:
                continue
            return MatchResult(matched=True, identity=identity, owner=ref)

        return MatchResult(matched=False, identity=identity)
