from .auth_service import AuthService
from .user_service import UserService
from .document_service import DocumentService
from .chat_service import ChatService
from .llm_service import LLMService, CompletionResult
from .chat_orchestrator import ChatOrchestrator, ChatReply
from .storage_service import LocalFileStorage, get_file_storage

__all__ = [
    "AuthService",
    "UserService",
    "DocumentService",
    "ChatService",
    "LLMService",
    "CompletionResult",
    "ChatOrchestrator",
    "ChatReply",
    "LocalFileStorage",
    "get_file_storage",
]
