"""Normalized diff between two snapshots of a watched object.

Both snapshots are deep-copied, the resourceVersion of the old one is copied
onto the new one, and a merge patch (RFC 7386 shape) is computed between
them. The ``status`` and ``metadata`` subtrees are dropped from the patch:
status is observed state and metadata is rewritten by the API server
(managedFields, resourceVersion) on every write.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from kubetrigger.diff.quantity import is_quantity_field, quantities_equal
from kubetrigger.errors import AccessorError, DiffError
from kubetrigger.models.objects import WatchedObject
from kubetrigger.observability.logging import get_logger

_logger = get_logger("diff.engine")

VOLATILE_FIELDS = ("status", "metadata")


@dataclass(frozen=True)
class DiffResult:
    """Outcome of a diff computation.

    ``changed`` is True when the patch is non-empty, and also when the diff
    could not be computed at all (``error`` is set): a missed change is worse
    than an extra reconcile.
    """

    changed: bool
    patch: dict[str, Any] = field(default_factory=dict)
    error: Exception | None = None

    @property
    def text(self) -> str:
        """JSON rendering of the patch, for log lines."""
        return json.dumps(self.patch, sort_keys=True, default=str)


def _values_equal(old: Any, new: Any, key: Any, parent_key: Any) -> bool:
    if isinstance(old, Mapping) and isinstance(new, Mapping):
        return not compute_patch(old, new, parent_key=key)
    if isinstance(old, list | tuple) and isinstance(new, list | tuple):
        return len(old) == len(new) and all(
            _values_equal(o, n, key, parent_key) for o, n in zip(old, new, strict=True)
        )
    if isinstance(key, str) and is_quantity_field(key, parent_key):
        return quantities_equal(old, new)
    if isinstance(old, bool) or isinstance(new, bool):
        return old is new
    return old == new


def compute_patch(old: Mapping[str, Any], new: Mapping[str, Any], parent_key: Any = None) -> dict[str, Any]:
    """Return the merge patch that turns *old* into *new*.

    Removed keys map to ``None``, nested mappings recurse, lists and scalars
    that differ carry the new value. Quantity leaves compare by value.
    """
    patch: dict[str, Any] = {}
    for key in old:
        if key not in new:
            patch[key] = None

    for key, new_value in new.items():
        if key not in old:
            patch[key] = new_value
            continue
        old_value = old[key]
        if isinstance(old_value, Mapping) and isinstance(new_value, Mapping):
            nested = compute_patch(old_value, new_value, parent_key=key)
            if nested:
                patch[key] = nested
        elif not _values_equal(old_value, new_value, key, parent_key):
            patch[key] = new_value
    return patch


def _snapshot(obj: object) -> dict[str, Any]:
    try:
        manifest = WatchedObject.from_any(obj).manifest
        return copy.deepcopy(dict(manifest))
    except (AccessorError, TypeError, RecursionError, copy.Error) as exc:
        raise DiffError(f"cannot snapshot object: {exc}") from exc


def _align_resource_version(old: dict[str, Any], new: dict[str, Any]) -> None:
    """Copy old's resourceVersion onto new so version churn never diffs."""
    try:
        version = WatchedObject(old).resource_version
    except AccessorError as exc:
        _logger.warning("resource_version_unreadable", error=str(exc))
        return
    if version is None:
        return

    new_meta = new.get("metadata")
    if not isinstance(new_meta, dict):
        _logger.warning("resource_version_not_aligned", reason="new object has no metadata mapping")
        return
    new_meta["resourceVersion"] = version


class DiffEngine:
    """Decides whether two snapshots differ in anything that matters."""

    def __init__(self, volatile_fields: tuple[str, ...] = VOLATILE_FIELDS) -> None:
        self._volatile_fields = volatile_fields

    def changed(self, old: object, new: object) -> DiffResult:
        """Diff two full objects with volatile top-level fields stripped."""
        try:
            old_copy = _snapshot(old)
            new_copy = _snapshot(new)
            _align_resource_version(old_copy, new_copy)
            patch = self._patch(old_copy, new_copy)
        except DiffError as exc:
            _logger.warning("diff_failed", error=str(exc))
            return DiffResult(changed=True, error=exc)

        for name in self._volatile_fields:
            patch.pop(name, None)
        return DiffResult(changed=bool(patch), patch=patch)

    def spec_changed(self, old_spec: object, new_spec: object) -> DiffResult:
        """Diff two spec snapshots; a missing spec on one side is a change."""
        try:
            old_copy = copy.deepcopy(old_spec)
            new_copy = copy.deepcopy(new_spec)
            patch = self._patch({"spec": old_copy}, {"spec": new_copy})
        except (TypeError, RecursionError, copy.Error) as exc:
            error = DiffError(f"cannot copy spec: {exc}")
            _logger.warning("spec_diff_failed", error=str(error))
            return DiffResult(changed=True, error=error)
        except DiffError as exc:
            _logger.warning("spec_diff_failed", error=str(exc))
            return DiffResult(changed=True, error=exc)
        return DiffResult(changed=bool(patch), patch=patch)

    @staticmethod
    def _patch(old: Mapping[str, Any], new: Mapping[str, Any]) -> dict[str, Any]:
        try:
            return compute_patch(old, new)
        except (TypeError, ArithmeticError, RecursionError) as exc:
            raise DiffError(f"failed to calculate object diff: {exc}") from exc
