"""Event routing from the process manager bus into the serial queue."""

import json
import logging
from dataclasses import dataclass
from typing import Callable

from procrelay.bus import EventBus
from procrelay.models.config import ModuleConfig
from procrelay.models.event import BusEvent, EventKind, NotificationRequest
from procrelay.queue import SerialQueue

logger = logging.getLogger(__name__)


def log_text(event: BusEvent) -> str:
    return "" if event.data is None else str(event.data)


def kill_text(event: BusEvent) -> str:
    return event.msg or ""


def exception_text(event: BusEvent) -> str:
    data = event.data
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return json.dumps(data, default=str)


def process_event_text(event: BusEvent) -> str:
    return f"{event.event} event occurred"


@dataclass(frozen=True)
class Rule:
    """Eligibility rule of one event kind."""

    flag: str | None
    exclude_self: bool
    check_queue_limit: bool
    text: Callable[[BusEvent], str]


RULES: dict[EventKind, Rule] = {
    EventKind.LOG_OUT: Rule(flag="log", exclude_self=True, check_queue_limit=True, text=log_text),
    EventKind.LOG_ERR: Rule(flag="error", exclude_self=True, check_queue_limit=True, text=log_text),
    EventKind.KILL: Rule(flag="kill", exclude_self=False, check_queue_limit=False, text=kill_text),
    EventKind.EXCEPTION: Rule(
        flag="exception", exclude_self=True, check_queue_limit=False, text=exception_text
    ),
    EventKind.PROCESS_EVENT: Rule(
        flag=None, exclude_self=True, check_queue_limit=False, text=process_event_text
    ),
}


class EventRouter:
    """Filters bus events and enqueues the ones that qualify."""

    def __init__(self, config: ModuleConfig, queue: SerialQueue):
        self._config = config
        self._queue = queue
        self._handlers: dict[EventKind, Callable[[BusEvent], bool]] = {
            EventKind.LOG_OUT: self.on_log_out,
            EventKind.LOG_ERR: self.on_log_err,
            EventKind.KILL: self.on_kill,
            EventKind.EXCEPTION: self.on_exception,
            EventKind.PROCESS_EVENT: self.on_process_event,
        }

    def subscriptions(self) -> list[EventKind]:
        """Kinds the router listens to under the current configuration."""
        return [
            kind for kind, rule in RULES.items()
            if rule.flag is None or self._config.get(rule.flag)
        ]

    def attach(self, bus: EventBus) -> None:
        kinds = self.subscriptions()
        for kind in kinds:
            bus.on(kind, self._handlers[kind])
        logger.info(f"Router subscribed to {len(kinds)} event kind(s): {[k.value for k in kinds]}")

    def on_log_out(self, event: BusEvent) -> bool:
        return self._dispatch(event, RULES[EventKind.LOG_OUT])

    def on_log_err(self, event: BusEvent) -> bool:
        return self._dispatch(event, RULES[EventKind.LOG_ERR])

    def on_kill(self, event: BusEvent) -> bool:
        return self._dispatch(event, RULES[EventKind.KILL])

    def on_exception(self, event: BusEvent) -> bool:
        return self._dispatch(event, RULES[EventKind.EXCEPTION])

    def on_process_event(self, event: BusEvent) -> bool:
        if not event.event or not self._config.event_enabled(event.event):
            logger.debug(f"Event {event.event!r} from {event.source_name} not enabled, dropped")
            return False
        if self._config.auto_event_only and event.manually:
            logger.debug(f"Manual event {event.event!r} from {event.source_name} dropped")
            return False
        return self._dispatch(event, RULES[EventKind.PROCESS_EVENT])

    def _dispatch(self, event: BusEvent, rule: Rule) -> bool:
        source_name = event.source_name

        if rule.exclude_self and source_name == self._config.module_name:
            logger.debug(f"Dropped {event.kind.value} from own process {source_name}")
            return False

        if rule.check_queue_limit and self._queue.pending_count() > self._config.queue_limit:
            logger.debug(f"Queue over limit, dropped {event.kind.value} from {source_name}")
            return False

        self._queue.push(NotificationRequest(source_name=source_name, raw_text=rule.text(event)))
        return True
