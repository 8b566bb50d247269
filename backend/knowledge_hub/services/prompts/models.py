"""
Pydantic models for assembled chat prompts.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class ContextDocument(BaseModel):
    """The parts of a stored document that go into a prompt."""
    title: str
    content: Optional[str] = None

    class Config:
        from_attributes = True


class ChatPrompt(BaseModel):
    """Everything sent upstream for one chat turn."""
    system_prompt: str
    user_message: str
    context_block: str = ""
    documents_used: int = Field(default=0, ge=0)

    def to_messages(self) -> List[Dict[str, str]]:
        """
        Chat-completion message array.

        The document context follows the user message as a second system
        message, and is left out entirely when there are no documents.
        """
        messages = [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": self.user_message},
        ]
        if self.context_block:
            messages.append({"role": "system", "content": self.context_block})
        return messages
