from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Callable, Protocol

from goalplanner.domain.events import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class EventPublisher(Protocol):
    def publish(self, event_name: str, event: DomainEvent) -> None:
        ...


@dataclass
class InMemoryEventBus:
    """
    Bus synchrone, en process.
    Un handler qui plante est loggé et n'empêche pas les suivants.
    """
    _handlers: dict[str, list[EventHandler]] = field(default_factory=dict)

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        handlers = self._handlers.setdefault(event_name, [])
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, event_name: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_name)
        if not handlers:
            return
        if handler in handlers:
            handlers.remove(handler)
        if not handlers:
            del self._handlers[event_name]

    def publish(self, event_name: str, event: DomainEvent) -> None:
        for handler in list(self._handlers.get(event_name, ())):
            try:
                handler(event)
            except Exception:
                logger.exception("Error in event handler for %s", event_name)

    def clear(self, event_name: str | None = None) -> None:
        if event_name is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_name, None)

    def handler_count(self, event_name: str) -> int:
        return len(self._handlers.get(event_name, ()))

    def has_handlers(self, event_name: str) -> bool:
        return self.handler_count(event_name) > 0

    def event_names(self) -> list[str]:
        return list(self._handlers)
