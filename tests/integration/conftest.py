"""Shared fixtures for kubetrigger integration tests.

Provides a fully wired PredicateFactory and a small informer-style store so
tests can replay realistic watch streams (ADDED / MODIFIED / DELETED) through
the predicates without touching a real cluster.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable
from typing import Any

import pytest

from kubetrigger.factory import PredicateFactory
from kubetrigger.models.objects import TriggerEvent
from kubetrigger.owners.scheme import CEPH_API_VERSION
from kubetrigger.predicates.base import Predicate

# ---------------------------------------------------------------------------
# Manifest factory helpers
# ---------------------------------------------------------------------------


def owner_ref(kind: str = "CephCluster", name: str = "rook-ceph") -> dict[str, Any]:
    return {"apiVersion": CEPH_API_VERSION, "kind": kind, "name": name, "uid": f"uid-{name}", "controller": True}


def make_cluster(
    resource_version: str = "1",
    generation: int = 1,
    mon_count: int = 3,
    phase: str = "Progressing",
    labels: dict[str, str] | None = None,
) -> dict[str, Any]:
    return {
        "apiVersion": CEPH_API_VERSION,
        "kind": "CephCluster",
        "metadata": {
            "name": "rook-ceph",
            "namespace": "rook-ceph",
            "uid": "uid-rook-ceph",
            "generation": generation,
            "resourceVersion": resource_version,
            "labels": labels or {},
        },
        "spec": {
            "cephVersion": {"image": "quay.io/ceph/ceph:v18.2.0"},
            "dataDirHostPath": "/var/lib/rook",
            "mon": {"count": mon_count},
            "resources": {"mgr": {"limits": {"memory": "1Gi"}}},
        },
        "status": {"phase": phase},
    }


def make_owned(
    kind: str,
    name: str,
    resource_version: str = "1",
    data: dict[str, Any] | None = None,
    labels: dict[str, str] | None = None,
) -> dict[str, Any]:
    obj: dict[str, Any] = {
        "apiVersion": "apps/v1" if kind == "Deployment" else "v1",
        "kind": kind,
        "metadata": {
            "name": name,
            "namespace": "rook-ceph",
            "uid": f"uid-{name}",
            "resourceVersion": resource_version,
            "labels": labels or {},
            "ownerReferences": [owner_ref()],
        },
    }
    if kind == "Deployment":
        obj["spec"] = data or {"replicas": 1}
    else:
        obj["data"] = data or {}
    return obj


# ---------------------------------------------------------------------------
# Informer-style replay
# ---------------------------------------------------------------------------


class WatchReplay:
    """Replays watch events through a predicate the way an informer would.

    The store keeps the last seen snapshot per uid so MODIFIED events are
    delivered with their previous version, mirroring controller-runtime.
    """

    def __init__(self, predicate: Predicate) -> None:
        self.predicate = predicate
        self._store: dict[str, dict[str, Any]] = {}

    def deliver(self, watch_type: str, obj: dict[str, Any]) -> bool:
        uid = obj["metadata"]["uid"]
        old = self._store.get(uid)
        event = TriggerEvent.from_watch({"type": watch_type, "raw_object": obj}, old=old)
        decision = self.predicate.evaluate(event)
        if watch_type == "DELETED":
            self._store.pop(uid, None)
        else:
            self._store[uid] = copy.deepcopy(obj)
        return decision

    def replay(self, events: Iterable[tuple[str, dict[str, Any]]]) -> list[bool]:
        return [self.deliver(watch_type, obj) for watch_type, obj in events]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def factory() -> PredicateFactory:
    return PredicateFactory()


@pytest.fixture
def primary_replay(factory: PredicateFactory) -> WatchReplay:
    return WatchReplay(factory.primary())


@pytest.fixture
def secondary_replay(factory: PredicateFactory) -> WatchReplay:
    return WatchReplay(factory.secondary("CephCluster"))
