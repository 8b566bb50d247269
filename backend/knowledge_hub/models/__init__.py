from .user import User
from .document import Document
from .chat import ChatSession, ChatMessage, MessageRole, DEFAULT_SESSION_TITLE

__all__ = [
    "User",
    "Document",
    "ChatSession",
    "ChatMessage",
    "MessageRole",
    "DEFAULT_SESSION_TITLE",
]
