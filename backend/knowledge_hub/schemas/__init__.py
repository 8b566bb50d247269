from .common import SuccessResponse, MessageResponse
from .auth import UserRegister, UserLogin, Token
from .user import (
    User,
    ProfileUpdate,
    PasswordChange,
    AccountDelete,
    ProfileResponse,
    ProfileUpdateResponse,
    MIN_PASSWORD_LENGTH,
)
from .document import Document, DocumentSummary, Pagination, DocumentListResponse, DocumentUploadResponse
from .chat import (
    ChatSession,
    ChatSessionCreate,
    ChatSessionUpdate,
    ChatSessionSummary,
    SessionResponse,
    SessionListResponse,
    ChatMessage,
    ChatMessageCreate,
    MessageListResponse,
    MessageCreatedResponse,
    ChatRequest,
    ChatResponse,
)

__all__ = [
    "SuccessResponse",
    "MessageResponse",
    "UserRegister",
    "UserLogin",
    "Token",
    "User",
    "ProfileUpdate",
    "PasswordChange",
    "AccountDelete",
    "ProfileResponse",
    "ProfileUpdateResponse",
    "MIN_PASSWORD_LENGTH",
    "Document",
    "DocumentSummary",
    "Pagination",
    "DocumentListResponse",
    "DocumentUploadResponse",
    "ChatSession",
    "ChatSessionCreate",
    "ChatSessionUpdate",
    "ChatSessionSummary",
    "SessionResponse",
    "SessionListResponse",
    "ChatMessage",
    "ChatMessageCreate",
    "MessageListResponse",
    "MessageCreatedResponse",
    "ChatRequest",
    "ChatResponse",
]
