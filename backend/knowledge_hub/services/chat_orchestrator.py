from dataclasses import dataclass
from typing import Any, Dict, Optional
from ..models import MessageRole
from ..exceptions import KnowledgeHubException, InternalError, ValidationError
from ..core.events import event_bus, ChatCompletedEvent
from ..core.telemetry import get_tracer
from ..config import settings
from opentelemetry import trace
from .chat_service import ChatService
from .document_service import DocumentService
from .llm_service import LLMService
from .prompts import ChatPromptBuilder
import logging

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


@dataclass
class ChatReply:
    """Outcome of one chat turn"""
    response: str
    usage: Optional[Dict[str, Any]]
    documents_used: int
    session_id: int
    retries: int = 0


class ChatOrchestrator:
    """
    Runs one chat turn end to end

    The user message is committed before the provider is called, so it
    survives an upstream failure; the assistant message is only stored
    once a completion has come back.
    """

    def __init__(
        self,
        chat_service: ChatService,
        document_service: DocumentService,
        llm_service: LLMService,
        prompt_builder: Optional[ChatPromptBuilder] = None
    ):
        self.chat_service = chat_service
        self.document_service = document_service
        self.llm_service = llm_service
        self.prompt_builder = prompt_builder or ChatPromptBuilder(
            char_limit=settings.chat_context_char_limit,
            document_limit=settings.chat_context_document_limit
        )

    async def send_message(
        self,
        user_id: int,
        message: Optional[str],
        session_id: Optional[int] = None
    ) -> ChatReply:
        """
        Answer a user message, grounded in the user's recent documents

        Args:
            user_id: Authenticated user
            message: The user's message
            session_id: Existing session to continue; a new one is created when omitted

        Raises:
            ValidationError: Message missing or blank
            InternalError: No provider credential configured, or an unexpected failure
            NotFoundError: session_id given but not owned by the user
            RateLimitedError: Provider still rate limited after all attempts
            UpstreamError: Provider answered with another error status
        """
        if message is None or not message.strip():
            raise ValidationError("Message is required")
        self.llm_service.ensure_available()

        with tracer.start_as_current_span("chat.send_message") as span:
            span.set_attribute("chat.user_id", user_id)
            span.set_attribute("chat.message_length", len(message))
            try:
                session_created = False
                # sessionId 0 counts as absent
                if session_id:
                    session = self.chat_service.get_session(user_id, session_id)
                else:
                    session = self.chat_service.create_session(user_id)
                    session_created = True
                span.set_attribute("chat.session_id", session.id)
                span.set_attribute("chat.session_created", session_created)

                self.chat_service.append_message(session.id, MessageRole.USER, message)

                documents = self.document_service.list_context_documents(
                    user_id, self.prompt_builder.document_limit
                )
                prompt = self.prompt_builder.build(message, documents)
                span.set_attribute("chat.documents_used", prompt.documents_used)

                result = await self.llm_service.complete(prompt)

                self.chat_service.append_message(
                    session.id,
                    MessageRole.ASSISTANT,
                    result.content,
                    documents_used=prompt.documents_used,
                    metadata={
                        "model": result.model,
                        "usage": result.usage,
                        "retries": result.retries
                    }
                )
                self.chat_service.touch_session(session.id)
                span.set_attribute("chat.retries", result.retries)
            except KnowledgeHubException as e:
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e.detail)))
                raise
            except Exception as e:
                logger.error(f"Chat turn failed for user {user_id}: {e}", exc_info=True)
                span.record_exception(e)
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise InternalError() from e

        logger.info(
            f"Chat turn completed for user {user_id} in session {session.id} "
            f"({prompt.documents_used} documents, {result.retries} retries)"
        )
        event_bus.publish(ChatCompletedEvent(
            user_id=user_id,
            session_id=session.id,
            documents_used=prompt.documents_used,
            retries=result.retries,
            session_created=session_created,
            usage=result.usage
        ))

        return ChatReply(
            response=result.content,
            usage=result.usage,
            documents_used=prompt.documents_used,
            session_id=session.id,
            retries=result.retries
        )
