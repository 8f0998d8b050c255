"""Core data structures for kubetrigger."""

from kubetrigger.models.config import KubeTriggerConfig, LogConfig, TriggerConfig
from kubetrigger.models.objects import (
    EventType,
    ObjectIdentity,
    OwnerReference,
    TriggerEvent,
    WatchedObject,
    api_group,
)

__all__ = [
    "EventType",
    "KubeTriggerConfig",
    "LogConfig",
    "ObjectIdentity",
    "OwnerReference",
    "TriggerConfig",
    "TriggerEvent",
    "WatchedObject",
    "api_group",
]
