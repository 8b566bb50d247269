from .base import BaseRepository
from .user_repository import UserRepository
from .document_repository import DocumentRepository
from .chat_repository import ChatRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "DocumentRepository",
    "ChatRepository",
]
