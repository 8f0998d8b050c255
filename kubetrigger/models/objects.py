"""Read-only views over watched Kubernetes objects and trigger events."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from kubetrigger.errors import AccessorError

if TYPE_CHECKING:
    from kubetrigger.owners.scheme import Scheme


class EventType(StrEnum):
    """Kind of change delivered by the watch substrate."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    GENERIC = "generic"


# kubernetes_asyncio watch event types; anything else (BOOKMARK, ERROR) is generic.
_WATCH_EVENT_TYPES = {
    "ADDED": EventType.CREATE,
    "MODIFIED": EventType.UPDATE,
    "DELETED": EventType.DELETE,
}


def api_group(api_version: str) -> str:
    """Return the API group of an apiVersion ("" for the core group)."""
    if "/" not in api_version:
        return ""
    return api_version.split("/", 1)[0]


@dataclass(frozen=True)
class OwnerReference:
    """Back-reference from a secondary object to the primary that created it."""

    kind: str
    name: str
    uid: str = ""
    api_version: str = ""
    controller: bool = False

    @property
    def group(self) -> str:
        return api_group(self.api_version)

    @classmethod
    def from_manifest(cls, raw: object) -> OwnerReference:
        if not isinstance(raw, Mapping):
            raise AccessorError(f"owner reference is not a mapping: {raw!r}")
        return cls(
            kind=str(raw.get("kind") or ""),
            name=str(raw.get("name") or ""),
            uid=str(raw.get("uid") or ""),
            api_version=str(raw.get("apiVersion") or ""),
            controller=bool(raw.get("controller")),
        )


@dataclass(frozen=True)
class ObjectIdentity:
    """Identity and labels of a watched object, used for logging and rules."""

    kind: str = ""
    namespace: str = ""
    name: str = ""
    uid: str = ""
    labels: dict[str, str] = field(default_factory=dict)


class WatchedObject:
    """Read-only accessor view over a Kubernetes manifest.

    The manifest is the snapshot delivered by the watch substrate. The view
    never mutates it; callers that need a private copy use ``deep_copy()``.
    """

    __slots__ = ("_manifest",)

    def __init__(self, manifest: Mapping[str, Any]) -> None:
        if not isinstance(manifest, Mapping):
            raise AccessorError(f"manifest is not a mapping: {type(manifest).__name__}")
        self._manifest = manifest

    @classmethod
    def from_any(cls, obj: object, scheme: Scheme | None = None) -> WatchedObject:
        """Build a view from a manifest dict or a kubernetes_asyncio model.

        Models built in code usually carry no ``kind``; the scheme fills it in
        from the model class when one is given.
        """
        if isinstance(obj, WatchedObject):
            return obj
        if isinstance(obj, Mapping):
            return cls(obj)

        to_dict = getattr(obj, "to_dict", None)
        if to_dict is None:
            raise AccessorError(f"unsupported object type: {type(obj).__name__}")
        manifest = to_dict(serialize=True)
        if scheme is not None and not manifest.get("kind"):
            info = scheme.kind_for_model(type(obj))
            if info is not None:
                manifest["kind"] = info.kind
                manifest["apiVersion"] = manifest.get("apiVersion") or info.api_version
        return cls(manifest)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def manifest(self) -> Mapping[str, Any]:
        return self._manifest

    @property
    def kind(self) -> str:
        return str(self._manifest.get("kind") or "")

    @property
    def api_version(self) -> str:
        return str(self._manifest.get("apiVersion") or "")

    @property
    def metadata(self) -> Mapping[str, Any]:
        meta = self._manifest.get("metadata")
        if meta is None:
            return {}
        if not isinstance(meta, Mapping):
            raise AccessorError(f"metadata is not a mapping: {type(meta).__name__}")
        return meta

    @property
    def name(self) -> str:
        return str(self.metadata.get("name") or "")

    @property
    def namespace(self) -> str:
        return str(self.metadata.get("namespace") or "")

    @property
    def uid(self) -> str:
        return str(self.metadata.get("uid") or "")

    @property
    def labels(self) -> dict[str, str]:
        labels = self.metadata.get("labels") or {}
        if not isinstance(labels, Mapping):
            raise AccessorError(f"labels of '{self.name}' are not a mapping")
        return dict(labels)

    @property
    def generation(self) -> int | None:
        return self.metadata.get("generation")

    @property
    def deletion_timestamp(self) -> object | None:
        return self.metadata.get("deletionTimestamp")

    @property
    def resource_version(self) -> str | None:
        return self.metadata.get("resourceVersion")

    @property
    def owner_references(self) -> tuple[OwnerReference, ...]:
        refs = self.metadata.get("ownerReferences") or ()
        if not isinstance(refs, list | tuple):
            raise AccessorError(f"ownerReferences of '{self.name}' is not a list")
        return tuple(OwnerReference.from_manifest(ref) for ref in refs)

    @property
    def spec(self) -> object | None:
        return self._manifest.get("spec")

    @property
    def status(self) -> object | None:
        return self._manifest.get("status")

    def identity(self) -> ObjectIdentity:
        return ObjectIdentity(
            kind=self.kind,
            namespace=self.namespace,
            name=self.name,
            uid=self.uid,
            labels=self.labels,
        )

    def deep_copy(self) -> WatchedObject:
        return WatchedObject(copy.deepcopy(dict(self._manifest)))

    def __repr__(self) -> str:
        meta = self._manifest.get("metadata")
        name = meta.get("name") if isinstance(meta, Mapping) else None
        return f"WatchedObject(kind={self.kind!r}, name={name!r})"


@dataclass(frozen=True)
class TriggerEvent:
    """One event as seen by a predicate.

    ``old`` is only meaningful for updates. Objects may be manifest dicts,
    kubernetes_asyncio models, or ``WatchedObject`` views.
    """

    type: EventType
    obj: Any
    old: Any = None

    @classmethod
    def from_watch(cls, event: Mapping[str, Any], old: Any = None) -> TriggerEvent:
        """Convert a kubernetes_asyncio watch event into a trigger event.

        ``raw_object`` is preferred over the deserialized ``object`` since it
        always carries ``kind`` and ``apiVersion``.
        """
        event_type = _WATCH_EVENT_TYPES.get(str(event.get("type", "")).upper(), EventType.GENERIC)
        obj = event.get("raw_object")
        if obj is None:
            obj = event.get("object")
        return cls(type=event_type, obj=obj, old=old if event_type is EventType.UPDATE else None)
