"""In-process publish/subscribe bus for process manager events."""

import logging
from typing import Callable, Protocol

from procrelay.models.event import BusEvent, EventKind

logger = logging.getLogger(__name__)

EventHandler = Callable[[BusEvent], object]


class EventBus(Protocol):
    """What the router needs from an event bus."""

    def on(self, kind: EventKind, handler: EventHandler) -> None:
        ...


class LocalEventBus:
    """Dispatches published events to the handlers subscribed to their kind.

    Handlers run synchronously in subscription order. A failing handler is
    logged and does not prevent delivery to the remaining ones.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventKind, list[EventHandler]] = {}

    def on(self, kind: EventKind, handler: EventHandler) -> None:
        self._handlers.setdefault(kind, []).append(handler)
        logger.debug(f"Subscribed {getattr(handler, '__name__', handler)} to {kind.value}")

    def subscribed(self, kind: EventKind) -> bool:
        return bool(self._handlers.get(kind))

    @property
    def kinds(self) -> list[EventKind]:
        return [kind for kind, handlers in self._handlers.items() if handlers]

    def publish(self, event: BusEvent) -> int:
        """Publish an event, returning how many handlers received it."""
        handlers = self._handlers.get(event.kind, [])
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.exception(f"Handler for {event.kind.value} failed: {e}")
        return len(handlers)
