from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from ..repositories import ChatRepository
from ..models import ChatSession, ChatMessage, MessageRole, DEFAULT_SESSION_TITLE
from ..schemas import ChatSessionSummary, ChatSessionUpdate, ChatMessageCreate
from ..exceptions import NotFoundError, ValidationError
from ..core.telemetry import get_tracer
from opentelemetry import trace
import logging

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


class ChatService:
    """Service for chat sessions and their message log"""

    def __init__(self, db: Session):
        self.chat_repo = ChatRepository(db)
        self.db = db

    def list_sessions(self, user_id: int) -> List[ChatSessionSummary]:
        """Sessions for a user with message counts, most recently updated first"""
        logger.debug(f"Listing chat sessions for user: {user_id}")
        rows = self.chat_repo.list_with_stats(user_id)
        return [
            ChatSessionSummary(
                id=session.id,
                title=session.title,
                is_active=session.is_active,
                created_at=session.created_at,
                updated_at=session.updated_at,
                message_count=message_count,
                last_message_at=last_message_at
            )
            for session, message_count, last_message_at in rows
        ]

    def create_session(self, user_id: int, title: Optional[str] = None) -> ChatSession:
        """Create a chat session; a blank title falls back to "New Chat" """
        logger.info(f"Creating chat session for user {user_id}")
        with tracer.start_as_current_span("chat.create_session") as span:
            span.set_attribute("chat.user_id", user_id)
            try:
                session = self.chat_repo.create(
                    user_id=user_id,
                    title=(title or "").strip() or DEFAULT_SESSION_TITLE
                )
                self.chat_repo.commit()
                self.db.refresh(session)
                logger.info(f"Chat session created successfully: {session.id}")
                span.set_attribute("chat.session_id", session.id)
                return session
            except Exception as e:
                logger.error(f"Error creating chat session: {e}")
                span.record_exception(e)
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                self.chat_repo.rollback()
                raise

    def get_session(self, user_id: int, session_id: int) -> ChatSession:
        """Get a session owned by the user"""
        logger.debug(f"Getting chat session {session_id} for user {user_id}")
        session = self.chat_repo.get_by_user_and_id(user_id, session_id)
        if not session:
            raise NotFoundError("Session", str(session_id))
        return session

    def update_session(self, user_id: int, session_id: int, session_data: ChatSessionUpdate) -> ChatSession:
        """Rename or (de)activate a session"""
        logger.info(f"Updating chat session {session_id} for user {user_id}")
        session = self.get_session(user_id, session_id)

        title = session_data.title
        if title is not None:
            title = title.strip()
            if not title:
                raise ValidationError("Title cannot be empty")

        try:
            self.chat_repo.update_instance(session, title=title, is_active=session_data.is_active)
            self.chat_repo.touch(session.id)
            self.chat_repo.commit()
            self.db.refresh(session)
            return session
        except Exception as e:
            logger.error(f"Error updating chat session: {e}")
            self.chat_repo.rollback()
            raise

    def delete_session(self, user_id: int, session_id: int) -> None:
        """Delete a session and its messages"""
        logger.info(f"Deleting chat session {session_id} for user {user_id}")
        session = self.get_session(user_id, session_id)
        try:
            self.chat_repo.delete_instance(session)
            self.chat_repo.commit()
        except Exception as e:
            logger.error(f"Error deleting chat session: {e}")
            self.chat_repo.rollback()
            raise

    def get_session_messages(self, user_id: int, session_id: int) -> List[ChatMessage]:
        """Messages of an owned session in conversation order"""
        self.get_session(user_id, session_id)
        return self.list_messages(session_id)

    def list_messages(self, session_id: int) -> List[ChatMessage]:
        return self.chat_repo.get_messages_by_session_id(session_id)

    def append_message(
        self,
        session_id: int,
        role: MessageRole,
        content: str,
        documents_used: int = 0,
        metadata: Optional[Dict[str, Any]] = None
    ) -> ChatMessage:
        """Persist one message and commit it on its own"""
        with tracer.start_as_current_span("chat.append_message") as span:
            span.set_attribute("chat.session_id", session_id)
            span.set_attribute("message.role", role.value)
            span.set_attribute("message.content_length", len(content))
            try:
                message = self.chat_repo.create_message(
                    session_id=session_id,
                    role=role,
                    content=content,
                    documents_used=documents_used,
                    metadata=metadata
                )
                self.chat_repo.commit()
                self.db.refresh(message)
                span.set_attribute("message.id", message.id)
                return message
            except Exception as e:
                logger.error(f"Error adding message to session {session_id}: {e}")
                span.record_exception(e)
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                self.chat_repo.rollback()
                raise

    def add_message(self, user_id: int, session_id: int, message_data: ChatMessageCreate) -> ChatMessage:
        """Append a message to an owned session and bump the session"""
        self.get_session(user_id, session_id)
        message = self.append_message(
            session_id,
            message_data.role,
            message_data.content,
            documents_used=message_data.documents_used,
            metadata=message_data.metadata
        )
        self.touch_session(session_id)
        return message

    def touch_session(self, session_id: int) -> None:
        """Mark a session as recently updated"""
        try:
            self.chat_repo.touch(session_id)
            self.chat_repo.commit()
        except Exception as e:
            logger.error(f"Error touching chat session {session_id}: {e}")
            self.chat_repo.rollback()
            raise
