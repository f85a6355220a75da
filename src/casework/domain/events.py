"""Entity lifecycle notifications.

The navigation list (and the selection engine) learn about hierarchy
changes by subscribing to an :class:`EventBus` rather than by being called
directly by the store.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from .value_objects import EntityKind

logger = logging.getLogger(__name__)


class EntityEventType(str, Enum):
    """What happened to an entity."""

    CREATED = "created"
    REMOVED = "removed"
    RENAMED = "renamed"
    MOVED = "moved"


@dataclass(frozen=True)
class EntityEvent:
    """A single lifecycle notification.

    Attributes:
        event_type: Created, removed, renamed or moved.
        kind: Which entity kind the event is about.
        entity_id: Identifier of the entity.
        name: Entity name after the change.
        parent_id: Owning entity id after the change (None at scene root).
        previous_parent_id: Owner before a move, otherwise None.
    """

    event_type: EntityEventType
    kind: EntityKind
    entity_id: str
    name: str
    parent_id: str | None = None
    previous_parent_id: str | None = None


EntityListener = Callable[[EntityEvent], None]


class EventBus:
    """Synchronous publish/subscribe for entity events.

    Listeners run in subscription order, after the store has committed the
    change they are told about.
    """

    def __init__(self) -> None:
        self._listeners: list[EntityListener] = []

    def subscribe(self, listener: EntityListener) -> Callable[[], None]:
        """Register a listener and return a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: EntityEvent) -> None:
        logger.debug(
            "%s %s %s (%s)",
            event.kind.value,
            event.event_type.value,
            event.entity_id,
            event.name,
        )
        for listener in list(self._listeners):
            listener(event)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
