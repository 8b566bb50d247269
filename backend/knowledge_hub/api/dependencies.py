"""
Dependency Injection Container for API Routes

Services are built per request around the request's database session.
The LLM service is process-wide so its concurrency limit is shared by
every request.
"""
from functools import lru_cache
from fastapi import Depends
from sqlalchemy.orm import Session
from ..core.database import get_db
from ..services import (
    AuthService,
    UserService,
    DocumentService,
    ChatService,
    ChatOrchestrator,
    LLMService,
    get_file_storage
)
from ..clients import LLMProviderFactory
from ..config import settings
import logging

logger = logging.getLogger(__name__)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_document_service(db: Session = Depends(get_db)) -> DocumentService:
    """
    Get DocumentService instance

    Args:
        db: Database session (injected by FastAPI)

    Returns:
        DocumentService backed by the configured upload directory
    """
    return DocumentService(db, get_file_storage())


def get_chat_service(db: Session = Depends(get_db)) -> ChatService:
    return ChatService(db)


@lru_cache(maxsize=1)
def _get_llm_service() -> LLMService:
    """
    Internal function to create LLMService (cached for performance)

    Without an API key the service is created without a provider and
    chat requests fail with a 500 instead of the app refusing to start.
    """
    provider = None
    if LLMProviderFactory.is_configured():
        provider = LLMProviderFactory.create_provider()
    else:
        logger.warning("No LLM provider API key configured; chat is unavailable")
    return LLMService(
        provider,
        max_concurrent_requests=settings.llm_max_concurrent_requests
    )


def get_llm_service() -> LLMService:
    """
    Get LLMService instance (singleton pattern)

    Returns:
        LLMService instance
    """
    return _get_llm_service()


def get_chat_orchestrator(
    chat_service: ChatService = Depends(get_chat_service),
    document_service: DocumentService = Depends(get_document_service),
    llm_service: LLMService = Depends(get_llm_service)
) -> ChatOrchestrator:
    """
    Get ChatOrchestrator instance with dependencies

    Args:
        chat_service: Chat service (injected by dependency)
        document_service: Document service (injected by dependency)
        llm_service: LLM service (injected by dependency)

    Returns:
        ChatOrchestrator instance
    """
    return ChatOrchestrator(chat_service, document_service, llm_service)
