"""Owner resolution for secondary objects.

Submodules:
    scheme  -- Scheme: immutable kind registry (kind -> apiVersion, model).
    matcher -- OwnerReferenceMatcher: explicit ownerReference matching.
"""

from kubetrigger.owners.matcher import MatchResult, OwnerReferenceMatcher
from kubetrigger.owners.scheme import CEPH_API_VERSION, CEPH_KINDS, KindInfo, Scheme, default_scheme

__all__ = [
    "CEPH_API_VERSION",
    "CEPH_KINDS",
    "KindInfo",
    "MatchResult",
    "OwnerReferenceMatcher",
    "Scheme",
    "default_scheme",
]
