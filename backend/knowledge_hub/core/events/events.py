"""
Event definitions

Events carry plain values (never ORM instances) because handlers run after
the publishing service has committed or closed its unit of work.
"""
from .bus import Event
from typing import Optional, Dict, Any
from datetime import datetime, timezone


class DocumentUploadedEvent(Event):
    """Event fired after an uploaded document is stored"""

    def __init__(self, document_id: int, user_id: int, title: str, file_type: str, file_size: int):
        self.document_id = document_id
        self.user_id = user_id
        self.title = title
        self.file_type = file_type
        self.file_size = file_size
        self.timestamp = datetime.now(timezone.utc)

    def __repr__(self):
        return f"DocumentUploadedEvent(document_id={self.document_id}, user_id={self.user_id}, title='{self.title}')"


class DocumentDeletedEvent(Event):
    """Event fired after a document row is deleted; its stored file is still on disk"""

    def __init__(self, document_id: int, user_id: int, title: str, file_path: str):
        self.document_id = document_id
        self.user_id = user_id
        self.title = title
        self.file_path = file_path
        self.timestamp = datetime.now(timezone.utc)

    def __repr__(self):
        return f"DocumentDeletedEvent(document_id={self.document_id}, user_id={self.user_id}, file_path='{self.file_path}')"


class ChatCompletedEvent(Event):
    """Event fired when the orchestrator finishes a chat turn"""

    def __init__(
        self,
        user_id: int,
        session_id: int,
        documents_used: int,
        retries: int,
        session_created: bool,
        usage: Optional[Dict[str, Any]] = None
    ):
        self.user_id = user_id
        self.session_id = session_id
        self.documents_used = documents_used
        self.retries = retries
        self.session_created = session_created
        self.usage = usage or {}
        self.timestamp = datetime.now(timezone.utc)

    def __repr__(self):
        return (
            f"ChatCompletedEvent(user_id={self.user_id}, session_id={self.session_id}, "
            f"documents_used={self.documents_used}, retries={self.retries})"
        )
