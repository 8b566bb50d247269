"""
Event handler classes and registration

Each event type has a dedicated handler method; ``register_event_handlers``
wires them onto the global bus at application startup.
"""
from .document_handler import DocumentEventHandler
from .chat_handler import ChatEventHandler
from ..bus import event_bus
from ..events import (
    DocumentUploadedEvent,
    DocumentDeletedEvent,
    ChatCompletedEvent,
)
import logging

logger = logging.getLogger(__name__)


def register_event_handlers(storage):
    """
    Register all event handlers with the event bus

    Args:
        storage: File storage used to remove files of deleted documents
    """
    document_handler = DocumentEventHandler(storage)
    chat_handler = ChatEventHandler()

    event_bus.subscribe(DocumentUploadedEvent, document_handler.handle_uploaded)
    event_bus.subscribe(DocumentDeletedEvent, document_handler.handle_deleted)
    event_bus.subscribe(ChatCompletedEvent, chat_handler.handle_completed)
    logger.info("Event handlers registered successfully")


__all__ = [
    "DocumentEventHandler",
    "ChatEventHandler",
    "register_event_handlers",
]
