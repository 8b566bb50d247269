from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime
from sqlalchemy import func
from sqlalchemy.orm import Session
from ..models.chat import ChatSession, ChatMessage, MessageRole
from .base import BaseRepository


class ChatRepository(BaseRepository[ChatSession]):
    """Repository for chat sessions and their messages"""

    def __init__(self, db: Session):
        super().__init__(ChatSession, db)

    def get_by_user_and_id(self, user_id: int, session_id: int) -> Optional[ChatSession]:
        """Get a session by user ID and session ID"""
        return self.db.query(ChatSession).filter(
            ChatSession.id == session_id,
            ChatSession.user_id == user_id
        ).first()

    def list_with_stats(self, user_id: int) -> List[Tuple[ChatSession, int, Optional[datetime]]]:
        """Sessions for a user with (message_count, last_message_at), most recently updated first"""
        return (
            self.db.query(
                ChatSession,
                func.count(ChatMessage.id).label("message_count"),
                func.max(ChatMessage.created_at).label("last_message_at")
            )
            .outerjoin(ChatMessage, ChatMessage.session_id == ChatSession.id)
            .filter(ChatSession.user_id == user_id)
            .group_by(ChatSession.id)
            .order_by(ChatSession.updated_at.desc(), ChatSession.id.desc())
            .all()
        )

    def get_messages_by_session_id(self, session_id: int) -> List[ChatMessage]:
        """Messages of a session in conversation order"""
        return (
            self.db.query(ChatMessage)
            .filter(ChatMessage.session_id == session_id)
            .order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc())
            .all()
        )

    def create_message(
        self,
        session_id: int,
        role: MessageRole,
        content: str,
        documents_used: int = 0,
        metadata: Optional[Dict[str, Any]] = None
    ) -> ChatMessage:
        """Add a message to a session"""
        message = ChatMessage(
            session_id=session_id,
            role=role,
            content=content,
            documents_used=documents_used,
            message_metadata=metadata or {}
        )
        self.db.add(message)
        self.db.flush()
        return message

    def touch(self, session_id: int) -> None:
        """Bump updated_at to the database clock"""
        self.db.query(ChatSession).filter(ChatSession.id == session_id).update(
            {ChatSession.updated_at: func.now()},
            synchronize_session=False
        )
        self.db.flush()
