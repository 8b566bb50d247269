"""
Prompt assembly for chat completions.
"""

from .models import ChatPrompt, ContextDocument
from .builder import (
    ChatPromptBuilder,
    truncate_content,
    SYSTEM_PROMPT,
    CONTEXT_HEADER,
    TRUNCATION_MARKER,
)

__all__ = [
    "ChatPrompt",
    "ContextDocument",
    "ChatPromptBuilder",
    "truncate_content",
    "SYSTEM_PROMPT",
    "CONTEXT_HEADER",
    "TRUNCATION_MARKER",
]
