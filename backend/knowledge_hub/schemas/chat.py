from pydantic import BaseModel, Field, model_validator
from typing import Optional, Dict, Any, List
from datetime import datetime
from ..models.chat import MessageRole


class ChatSessionCreate(BaseModel):
    title: Optional[str] = None


class ChatSessionUpdate(BaseModel):
    title: Optional[str] = None
    is_active: Optional[bool] = None


class ChatSession(BaseModel):
    id: int
    title: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ChatSessionSummary(ChatSession):
    message_count: int = 0
    last_message_at: Optional[datetime] = None


class SessionResponse(BaseModel):
    session: ChatSession


class SessionListResponse(BaseModel):
    sessions: List[ChatSessionSummary]


class ChatMessageCreate(BaseModel):
    role: MessageRole
    content: str
    documents_used: int = Field(default=0, ge=0)
    metadata: Optional[Dict[str, Any]] = None


class ChatMessage(BaseModel):
    id: int
    session_id: int
    role: MessageRole
    content: str
    documents_used: int
    metadata: Optional[Dict[str, Any]] = None
    created_at: datetime

    class Config:
        from_attributes = True
        populate_by_name = True

    @model_validator(mode='before')
    @classmethod
    def map_message_metadata(cls, data):
        """Map the ORM's message_metadata attribute to the metadata field"""
        if isinstance(data, dict) and 'message_metadata' in data:
            data = dict(data)
            data['metadata'] = data.pop('message_metadata')
        elif hasattr(data, 'message_metadata'):
            return {
                'id': data.id,
                'session_id': data.session_id,
                'role': data.role,
                'content': data.content,
                'documents_used': data.documents_used,
                'metadata': data.message_metadata,
                'created_at': data.created_at
            }
        return data


class MessageListResponse(BaseModel):
    messages: List[ChatMessage]


class MessageCreatedResponse(BaseModel):
    message: ChatMessage


class ChatRequest(BaseModel):
    # Optional here so a missing message is reported as "Message is required"
    message: Optional[str] = None
    session_id: Optional[int] = Field(default=None, alias="sessionId")

    class Config:
        populate_by_name = True


class ChatResponse(BaseModel):
    success: bool = True
    response: str
    usage: Optional[Dict[str, Any]] = None
    documents_used: int = Field(alias="documentsUsed")
    session_id: int = Field(alias="sessionId")
    retries: int = 0

    class Config:
        populate_by_name = True
