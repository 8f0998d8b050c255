"""End-to-end replay of watch streams through the trigger predicates.

Each test feeds a realistic sequence of ADDED / MODIFIED / DELETED events
and checks which of them would enqueue a reconcile.
"""

from __future__ import annotations

from kubetrigger.factory import PredicateFactory
from kubetrigger.models.objects import EventType, TriggerEvent

from .conftest import WatchReplay, make_cluster, make_owned


class TestPrimaryWatchStream:
    def test_status_heartbeats_do_not_storm(self, primary_replay: WatchReplay) -> None:
        decisions = primary_replay.replay(
            [
                ("ADDED", make_cluster(resource_version="1")),
                ("MODIFIED", make_cluster(resource_version="2", phase="Progressing")),
                ("MODIFIED", make_cluster(resource_version="3", phase="Ready")),
                ("MODIFIED", make_cluster(resource_version="4", phase="Ready")),
            ]
        )
        assert decisions == [True, False, False, False]

    def test_spec_edit_then_deletion(self, primary_replay: WatchReplay) -> None:
        deleting = make_cluster(resource_version="4", generation=2, mon_count=5)
        deleting["metadata"]["deletionTimestamp"] = "2026-02-18T12:00:00Z"
        decisions = primary_replay.replay(
            [
                ("ADDED", make_cluster(resource_version="1")),
                ("MODIFIED", make_cluster(resource_version="2", generation=2, mon_count=5)),
                ("MODIFIED", make_cluster(resource_version="3", generation=2, mon_count=5, phase="Ready")),
                ("MODIFIED", deleting),
                ("DELETED", deleting),
            ]
        )
        assert decisions == [True, True, False, True, True]

    def test_paused_cluster_ignores_edits(self, primary_replay: WatchReplay) -> None:
        paused = {"do_not_reconcile": "true"}
        decisions = primary_replay.replay(
            [
                ("ADDED", make_cluster(resource_version="1")),
                ("MODIFIED", make_cluster(resource_version="2", labels=paused)),
                ("MODIFIED", make_cluster(resource_version="3", mon_count=5, labels=paused)),
                ("MODIFIED", make_cluster(resource_version="4", mon_count=1)),
            ]
        )
        assert decisions == [True, False, False, True]

    def test_bookmark_is_generic(self, primary_replay: WatchReplay) -> None:
        event = TriggerEvent.from_watch({"type": "BOOKMARK", "raw_object": make_cluster()})
        assert event.type is EventType.GENERIC
        assert primary_replay.predicate.evaluate(event) is False


class TestSecondaryWatchStream:
    def test_owned_secret_lifecycle(self, secondary_replay: WatchReplay) -> None:
        decisions = secondary_replay.replay(
            [
                ("ADDED", make_owned("Secret", "rook-ceph-mon", data={"key": "YQ=="})),
                ("MODIFIED", make_owned("Secret", "rook-ceph-mon", resource_version="2", data={"key": "YQ=="})),
                ("MODIFIED", make_owned("Secret", "rook-ceph-mon", resource_version="3", data={"key": "Yg=="})),
                ("DELETED", make_owned("Secret", "rook-ceph-mon", resource_version="3", data={"key": "Yg=="})),
            ]
        )
        assert decisions == [False, False, True, True]

    def test_ignorable_secret(self, secondary_replay: WatchReplay) -> None:
        decisions = secondary_replay.replay(
            [
                ("ADDED", make_owned("Secret", "rook-ceph-config", data={"mon_host": "YQ=="})),
                ("MODIFIED", make_owned("Secret", "rook-ceph-config", resource_version="2", data={"mon_host": "Yg=="})),
            ]
        )
        assert decisions == [False, False]

    def test_config_maps(self, secondary_replay: WatchReplay) -> None:
        decisions = secondary_replay.replay(
            [
                ("ADDED", make_owned("ConfigMap", "rook-config-override", data={"config": ""})),
                ("MODIFIED", make_owned("ConfigMap", "rook-config-override", resource_version="2", data={"config": "[osd]"})),
                ("ADDED", make_owned("ConfigMap", "rook-ceph-mon-endpoints", data={"data": "a=10.0.0.1:6789"})),
                (
                    "MODIFIED",
                    make_owned("ConfigMap", "rook-ceph-mon-endpoints", resource_version="2", data={"data": "b=10.0.0.2:6789"}),
                ),
                ("ADDED", make_owned("ConfigMap", "rook-ceph-osd-node1-status", data={"status": "provisioning"})),
                ("DELETED", make_owned("ConfigMap", "rook-ceph-osd-node1-status", data={"status": "completed"})),
                ("DELETED", make_owned("ConfigMap", "rook-ceph-mon-endpoints", resource_version="2")),
            ]
        )
        assert decisions == [False, True, False, False, False, False, True]

    def test_worker_deployments(self, secondary_replay: WatchReplay) -> None:
        canary_labels = {"mon_canary": "true"}
        decisions = secondary_replay.replay(
            [
                ("ADDED", make_owned("Deployment", "rook-ceph-mon-d-canary", labels=canary_labels)),
                ("DELETED", make_owned("Deployment", "rook-ceph-mon-d-canary", labels=canary_labels)),
                ("ADDED", make_owned("Deployment", "rook-ceph-mgr-a")),
                ("MODIFIED", make_owned("Deployment", "rook-ceph-mgr-a", resource_version="2", data={"replicas": 2})),
                ("DELETED", make_owned("Deployment", "rook-ceph-mgr-a", resource_version="2")),
            ]
        )
        assert decisions == [False, False, False, False, True]

    def test_objects_of_other_owners(self, factory: PredicateFactory) -> None:
        replay = WatchReplay(factory.secondary("CephFilesystem"))
        decisions = replay.replay(
            [
                ("ADDED", make_owned("Secret", "rook-ceph-mon", data={"key": "YQ=="})),
                ("MODIFIED", make_owned("Secret", "rook-ceph-mon", resource_version="2", data={"key": "Yg=="})),
                ("DELETED", make_owned("Secret", "rook-ceph-mon", resource_version="2")),
            ]
        )
        assert decisions == [False, False, False]
