from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Any, List, Optional


@dataclass
class ProviderCompletion:
    """One successful chat-completion response, normalised across providers"""
    content: Optional[str]
    usage: Optional[Dict[str, Any]]
    model: str


class ProviderHTTPError(Exception):
    """The provider answered with a non-2xx status"""

    def __init__(self, status_code: int, body: str = "", retry_after: Optional[str] = None):
        super().__init__(f"Provider returned HTTP {status_code}")
        self.status_code = status_code
        self.body = body
        # Raw Retry-After header value, if the provider sent one
        self.retry_after = retry_after


class LLMProvider(ABC):
    """Abstract interface for LLM providers"""

    @abstractmethod
    async def chat_completion(
        self,
        messages: List[Dict[str, str]],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None
    ) -> ProviderCompletion:
        """
        Send exactly one chat completion request

        Args:
            messages: List of message dicts with 'role' and 'content' keys
            model: Model name (uses default if None)
            temperature: Sampling temperature
            max_tokens: Completion token ceiling

        Returns:
            The normalised completion

        Raises:
            ProviderHTTPError: On any non-2xx response
        """
        pass

    @abstractmethod
    def get_default_model(self) -> str:
        """Get the default model for this provider"""
        pass
