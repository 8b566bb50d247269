"""
In-process event bus

Services publish events for side concerns that must not decide the outcome of
a request: audit logging and removal of stored files after a document row is
gone. A failing handler is logged and never propagates to the publisher.
"""
from typing import List, Callable, Dict, Type
from abc import ABC
import logging

logger = logging.getLogger(__name__)


class Event(ABC):
    """Base event class - all events inherit from this"""
    pass


class EventBus:
    """Synchronous publish/subscribe keyed by event class"""

    def __init__(self):
        self._subscribers: Dict[Type[Event], List[Callable[[Event], None]]] = {}

    def subscribe(self, event_type: Type[Event], handler: Callable[[Event], None]):
        """
        Subscribe to an event type

        Args:
            event_type: The event class to subscribe to
            handler: Callable that handles the event
        """
        handlers = self._subscribers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)
            logger.debug(f"Subscribed handler {handler.__name__} to {event_type.__name__}")

    def clear(self):
        """Drop every subscription"""
        self._subscribers.clear()

    def publish(self, event: Event):
        """
        Deliver an event to its subscribers in subscription order

        Args:
            event: Event instance to publish
        """
        event_type = type(event)
        handlers = self._subscribers.get(event_type)
        if not handlers:
            logger.debug(f"No subscribers for event {event_type.__name__}")
            return
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"Error handling event {event_type.__name__} in {handler.__name__}: {e}",
                    exc_info=True
                )


# Global event bus instance
event_bus = EventBus()
