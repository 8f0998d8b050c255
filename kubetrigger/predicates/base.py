"""Predicate protocol shared by primary and secondary resources.

A predicate exposes the four callbacks the watch substrate invokes
(``on_create``, ``on_update``, ``on_delete``, ``on_generic``) and answers
one question per event: should a reconcile be enqueued?

Returning True triggers a reconciliation; returning False does not.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from kubetrigger.errors import TriggerError
from kubetrigger.models.objects import EventType, TriggerEvent, WatchedObject
from kubetrigger.observability.logging import get_logger
from kubetrigger.owners.scheme import Scheme

_logger = get_logger("predicates.base")


class Predicate(ABC):
    """Base class for reconcile-trigger predicates.

    Subclasses implement ``_create``, ``_update`` and ``_delete`` over
    ``WatchedObject`` views. Any ``TriggerError`` raised while deciding is
    logged and turned into ``fail_verdict``, so a callback always returns a
    boolean.
    """

    name: str = "predicate"
    fail_verdict: bool = False

    def __init__(self, scheme: Scheme) -> None:
        self._scheme = scheme

    # ------------------------------------------------------------------
    # Substrate callbacks
    # ------------------------------------------------------------------

    def on_create(self, obj: object) -> bool:
        return self._guard(EventType.CREATE, self._create, obj)

    def on_update(self, old: object, new: object) -> bool:
        return self._guard(EventType.UPDATE, self._update, old, new)

    def on_delete(self, obj: object) -> bool:
        return self._guard(EventType.DELETE, self._delete, obj)

    def on_generic(self, obj: object) -> bool:
        # Generic events carry no identity change.
        return False

    def evaluate(self, event: TriggerEvent) -> bool:
        """Dispatch *event* to the matching callback."""
        if event.type is EventType.CREATE:
            return self.on_create(event.obj)
        if event.type is EventType.DELETE:
            return self.on_delete(event.obj)
        if event.type is EventType.UPDATE:
            if event.old is None:
                _logger.warning("update_without_old_object", predicate=self.name, verdict=self.fail_verdict)
                return self.fail_verdict
            return self.on_update(event.old, event.obj)
        return self.on_generic(event.obj)

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    @abstractmethod
    def _create(self, obj: WatchedObject) -> bool: ...

    @abstractmethod
    def _update(self, old: WatchedObject, new: WatchedObject) -> bool: ...

    @abstractmethod
    def _delete(self, obj: WatchedObject) -> bool: ...

    def _guard(self, event_type: EventType, handler: Callable[..., bool], *objects: object) -> bool:
        try:
            views = [WatchedObject.from_any(obj, self._scheme) for obj in objects]
            return handler(*views)
        except TriggerError as exc:
            _logger.error(
                "predicate_failed",
                predicate=self.name,
                event_type=str(event_type),
                verdict=self.fail_verdict,
                error=str(exc),
            )
            return self.fail_verdict
