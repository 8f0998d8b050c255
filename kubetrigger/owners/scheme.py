"""Kind registry mapping kind names to API versions and model classes.

Built once at startup and read-only afterwards; predicates running
concurrently only ever read it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from types import MappingProxyType

from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]

from kubetrigger.errors import OwnerResolutionError
from kubetrigger.models.objects import api_group

CEPH_API_VERSION = "ceph.rook.io/v1"

CEPH_KINDS = (
    "CephCluster",
    "CephBlockPool",
    "CephFilesystem",
    "CephNFS",
    "CephRBDMirror",
    "CephObjectStore",
    "CephObjectStoreUser",
    "CephObjectRealm",
    "CephObjectZoneGroup",
    "CephObjectZone",
)


@dataclass(frozen=True)
class KindInfo:
    """Registration of one kind.

    ``model`` is the kubernetes_asyncio model class for built-in kinds and
    None for custom resources, which are handled as plain manifests.
    """

    kind: str
    api_version: str
    model: type | None = None

    @property
    def group(self) -> str:
        return api_group(self.api_version)


_CORE_KINDS = (
    KindInfo("ConfigMap", "v1", k8s_client.V1ConfigMap),
    KindInfo("Secret", "v1", k8s_client.V1Secret),
    KindInfo("Service", "v1", k8s_client.V1Service),
    KindInfo("Pod", "v1", k8s_client.V1Pod),
    KindInfo("PersistentVolumeClaim", "v1", k8s_client.V1PersistentVolumeClaim),
    KindInfo("Deployment", "apps/v1", k8s_client.V1Deployment),
    KindInfo("DaemonSet", "apps/v1", k8s_client.V1DaemonSet),
    KindInfo("StatefulSet", "apps/v1", k8s_client.V1StatefulSet),
    KindInfo("Job", "batch/v1", k8s_client.V1Job),
)


class Scheme:
    """Immutable kind registry."""

    def __init__(self, kinds: Iterable[KindInfo] = ()) -> None:
        by_kind: dict[str, KindInfo] = {}
        for info in kinds:
            existing = by_kind.get(info.kind)
            if existing is not None and existing != info:
                raise ValueError(f"kind '{info.kind}' registered twice with different versions")
            by_kind[info.kind] = info
        self._by_kind = MappingProxyType(by_kind)
        self._by_model = MappingProxyType({info.model: info for info in by_kind.values() if info.model is not None})

    def lookup(self, kind: str) -> KindInfo:
        """Return the registration of *kind*.

        Raises:
            OwnerResolutionError: kind is empty or not registered.
        """
        if not kind:
            raise OwnerResolutionError(kind, "empty kind")
        info = self._by_kind.get(kind)
        if info is None:
            raise OwnerResolutionError(kind, "kind is not registered in the scheme")
        return info

    def kind_for_model(self, model: type) -> KindInfo | None:
        return self._by_model.get(model)

    def with_kinds(self, *kinds: KindInfo) -> Scheme:
        """Return a new scheme with *kinds* registered on top of this one."""
        return Scheme((*self._by_kind.values(), *kinds))

    def __contains__(self, kind: object) -> bool:
        return kind in self._by_kind

    def __iter__(self) -> Iterator[KindInfo]:
        return iter(self._by_kind.values())

    def __len__(self) -> int:
        return len(self._by_kind)


def default_scheme() -> Scheme:
    """Core Kubernetes kinds plus the Rook Ceph custom resources."""
    return Scheme((*_CORE_KINDS, *(KindInfo(kind, CEPH_API_VERSION) for kind in CEPH_KINDS)))
