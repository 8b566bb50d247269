"""
Document event handler

Logs uploads and deletions, and removes the stored file once the document
row is gone.
"""
from ..events import DocumentUploadedEvent, DocumentDeletedEvent
import logging

logger = logging.getLogger(__name__)


class DocumentEventHandler:
    """Handler for document-related events"""

    def __init__(self, storage):
        self.storage = storage

    def handle_uploaded(self, event: DocumentUploadedEvent):
        logger.info(
            f"Document uploaded: '{event.title}' (id: {event.document_id}, {event.file_type}, "
            f"{event.file_size} bytes) by user {event.user_id} at {event.timestamp}"
        )

    def handle_deleted(self, event: DocumentDeletedEvent):
        logger.info(
            f"Document deleted: '{event.title}' (id: {event.document_id}) "
            f"by user {event.user_id} at {event.timestamp}"
        )
        self._remove_stored_file(event)

    def _remove_stored_file(self, event: DocumentDeletedEvent):
        if self.storage.delete(event.file_path):
            logger.info(f"Removed stored file {event.file_path} for document {event.document_id}")
