from ..events import ChatCompletedEvent
import logging

logger = logging.getLogger(__name__)


class ChatEventHandler:
    """Handler for chat-related events"""

    def handle_completed(self, event: ChatCompletedEvent):
        total_tokens = event.usage.get("total_tokens")
        logger.info(
            f"Chat turn completed: user {event.user_id}, session {event.session_id} "
            f"(new session: {event.session_created}), documents used: {event.documents_used}, "
            f"retries: {event.retries}, total tokens: {total_tokens} at {event.timestamp}"
        )
