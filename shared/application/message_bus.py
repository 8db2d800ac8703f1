"""
Message Bus

Delivers committed domain events to the handlers subscribed to their type.
Handlers are side effects (audit logging); a failing handler is logged and
never affects the command that produced the event.
"""

from collections import defaultdict
from typing import Callable, DefaultDict, Iterable, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    def __init__(self):
        self._subscribers: DefaultDict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        """Subscribe ``handler`` to ``event_type``; subscribing twice has no effect"""
        if handler not in self._subscribers[event_type]:
            self._subscribers[event_type].append(handler)

    def publish_events(self, events: Iterable[DomainEvent]):
        for event in events:
            name = type(event).__name__
            handlers = self._subscribers.get(type(event))
            if not handlers:
                logger.warning(f"No handlers registered for event {name}")
                continue

            for handler in handlers:
                try:
                    handler(event)
                except Exception as e:
                    logger.error(
                        f"Handler {getattr(handler, '__name__', handler)!r} failed on {name} "
                        f"{event.event_id}: {e}",
                        exc_info=True,
                    )


message_bus = MessageBus()
