from .base import LLMProvider, ProviderCompletion, ProviderHTTPError
from .openai_provider import OpenAIProvider
from .factory import LLMProviderFactory

__all__ = [
    "LLMProvider",
    "ProviderCompletion",
    "ProviderHTTPError",
    "OpenAIProvider",
    "LLMProviderFactory",
]
