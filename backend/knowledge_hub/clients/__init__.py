from .llm_providers import (
    LLMProvider,
    LLMProviderFactory,
    OpenAIProvider,
    ProviderCompletion,
    ProviderHTTPError,
)

__all__ = [
    "LLMProvider",
    "LLMProviderFactory",
    "OpenAIProvider",
    "ProviderCompletion",
    "ProviderHTTPError",
]
