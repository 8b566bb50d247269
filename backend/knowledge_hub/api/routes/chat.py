from fastapi import APIRouter, Depends, status
from ...core.security import get_current_user
from ...models import User
from ...schemas import (
    ChatRequest,
    ChatResponse,
    ChatSessionCreate,
    ChatSessionUpdate,
    SessionResponse,
    SessionListResponse,
    MessageListResponse,
    MessageCreatedResponse,
    ChatMessageCreate,
    SuccessResponse
)
from ...services import ChatService, ChatOrchestrator
from ..dependencies import get_chat_service, get_chat_orchestrator

router = APIRouter(tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    current_user: User = Depends(get_current_user),
    orchestrator: ChatOrchestrator = Depends(get_chat_orchestrator)
):
    """Answer a message using the user's most recent documents as context"""
    reply = await orchestrator.send_message(current_user.id, request.message, request.session_id)
    return ChatResponse(
        response=reply.response,
        usage=reply.usage,
        documents_used=reply.documents_used,
        session_id=reply.session_id,
        retries=reply.retries
    )


@router.get("/chat/sessions", response_model=SessionListResponse)
def list_sessions(
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    """List the current user's chat sessions, most recently updated first"""
    return {"sessions": chat_service.list_sessions(current_user.id)}


@router.post("/chat/sessions", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def create_session(
    session_data: ChatSessionCreate,
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    """Create a new chat session"""
    return {"session": chat_service.create_session(current_user.id, session_data.title)}


@router.get("/chat/sessions/{session_id}", response_model=SessionResponse)
def get_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    """Get a specific chat session"""
    return {"session": chat_service.get_session(current_user.id, session_id)}


@router.put("/chat/sessions/{session_id}", response_model=SessionResponse)
def update_session(
    session_id: int,
    session_data: ChatSessionUpdate,
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    """Rename or (de)activate a chat session"""
    return {"session": chat_service.update_session(current_user.id, session_id, session_data)}


@router.delete("/chat/sessions/{session_id}", response_model=SuccessResponse)
def delete_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    """Delete a chat session and all of its messages"""
    chat_service.delete_session(current_user.id, session_id)
    return {"success": True}


@router.get("/chat/sessions/{session_id}/messages", response_model=MessageListResponse)
def get_session_messages(
    session_id: int,
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    """Get all messages for a chat session"""
    return {"messages": chat_service.get_session_messages(current_user.id, session_id)}


@router.post(
    "/chat/sessions/{session_id}/messages",
    response_model=MessageCreatedResponse,
    status_code=status.HTTP_201_CREATED
)
def add_message(
    session_id: int,
    message_data: ChatMessageCreate,
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    """Append a message to a chat session"""
    return {"message": chat_service.add_message(current_user.id, session_id, message_data)}
