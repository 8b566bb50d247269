from .bus import Event, EventBus, event_bus
from .events import (
    DocumentUploadedEvent,
    DocumentDeletedEvent,
    ChatCompletedEvent,
)

__all__ = [
    "Event",
    "EventBus",
    "event_bus",
    "DocumentUploadedEvent",
    "DocumentDeletedEvent",
    "ChatCompletedEvent",
]
