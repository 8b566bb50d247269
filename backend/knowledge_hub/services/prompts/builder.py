"""
Chat prompt assembly.

Builds the fixed system instruction and a bounded document context block
from the user's most recent documents. There is no ranking: the caller
decides which documents are candidates and in what order.
"""

from typing import Iterable, Optional
from .models import ChatPrompt, ContextDocument

SYSTEM_PROMPT = (
    "You are an AI assistant helping users with their uploaded documents. "
    "Provide accurate and helpful responses based on the document content."
)
CONTEXT_HEADER = "Relevant documents:\n"
TRUNCATION_MARKER = "..."
DEFAULT_CHAR_LIMIT = 2000
DEFAULT_DOCUMENT_LIMIT = 10


def truncate_content(content: str, char_limit: int = DEFAULT_CHAR_LIMIT) -> str:
    """Cut content to char_limit characters, marking the cut with '...'."""
    if len(content) <= char_limit:
        return content
    return content[:char_limit] + TRUNCATION_MARKER


class ChatPromptBuilder:
    """
    Builder for chat prompts.

    Args:
        char_limit: Maximum characters of each document's content
        document_limit: Maximum number of documents in the context block
    """

    def __init__(
        self,
        char_limit: int = DEFAULT_CHAR_LIMIT,
        document_limit: int = DEFAULT_DOCUMENT_LIMIT,
        system_prompt: str = SYSTEM_PROMPT
    ):
        self.char_limit = char_limit
        self.document_limit = document_limit
        self.system_prompt = system_prompt

    def build_context_block(self, documents: Iterable[ContextDocument]) -> str:
        """
        Format documents as numbered, truncated excerpts.

        Returns:
            Empty string when there are no documents
        """
        sections = []
        for index, document in enumerate(documents, start=1):
            if index > self.document_limit:
                break
            excerpt = truncate_content(document.content or "", self.char_limit)
            sections.append(f"\nDocument {index}: {document.title}\n{excerpt}\n")
        if not sections:
            return ""
        return CONTEXT_HEADER + "".join(sections)

    def build(self, user_message: str, documents: Optional[Iterable] = None) -> ChatPrompt:
        """
        Assemble the prompt for one chat turn.

        Args:
            user_message: The user's raw message
            documents: Candidate documents, newest first (ORM rows or ContextDocument)

        Returns:
            ChatPrompt with documents_used set to the number of documents included
        """
        context_documents = [
            ContextDocument.model_validate(document)
            for document in list(documents or [])[:self.document_limit]
        ]
        return ChatPrompt(
            system_prompt=self.system_prompt,
            user_message=user_message,
            context_block=self.build_context_block(context_documents),
            documents_used=len(context_documents)
        )
