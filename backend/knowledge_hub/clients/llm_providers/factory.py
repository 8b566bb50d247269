from typing import Optional
from .base import LLMProvider
from .openai_provider import OpenAIProvider
from ...config import settings
import logging

logger = logging.getLogger(__name__)


class LLMProviderFactory:
    """Factory for creating LLM providers"""

    @staticmethod
    def resolve_provider_name(provider_name: Optional[str] = None) -> Optional[str]:
        """
        Pick the provider to use

        An explicit name (argument, then LLM_PROVIDER) wins; otherwise the first
        provider with an API key, OpenRouter before OpenAI. None when no key is set.
        """
        provider_name = provider_name or settings.llm_provider
        if provider_name:
            return provider_name
        if settings.openrouter_api_key:
            return "openrouter"
        if settings.openai_api_key:
            return "openai"
        return None

    @staticmethod
    def is_configured(provider_name: Optional[str] = None) -> bool:
        """Whether the resolved provider has an API key"""
        provider_name = LLMProviderFactory.resolve_provider_name(provider_name)
        if provider_name == "openrouter":
            return bool(settings.openrouter_api_key)
        if provider_name == "openai":
            return bool(settings.openai_api_key)
        return False

    @staticmethod
    def create_provider(provider_name: Optional[str] = None) -> LLMProvider:
        """
        Create LLM provider based on configuration

        Args:
            provider_name: Optional provider name override. If None, uses settings.

        Returns:
            LLM provider instance

        Raises:
            ValueError: If required configuration is missing
        """
        provider_name = LLMProviderFactory.resolve_provider_name(provider_name)

        if provider_name is None:
            raise ValueError("Either OPENROUTER_API_KEY or OPENAI_API_KEY must be set")

        if provider_name == "openrouter":
            if not settings.openrouter_api_key:
                raise ValueError("OPENROUTER_API_KEY is required for OpenRouter provider")
            return OpenAIProvider(
                api_key=settings.openrouter_api_key,
                base_url=settings.openrouter_base_url,
                default_model=settings.chat_model,
                default_headers={
                    "HTTP-Referer": settings.app_url,
                    "X-Title": settings.app_title,
                }
            )

        if provider_name == "openai":
            if not settings.openai_api_key:
                raise ValueError("OPENAI_API_KEY is required for OpenAI provider")
            return OpenAIProvider(
                api_key=settings.openai_api_key,
                base_url=settings.openai_base_url,
                default_model=settings.chat_model
            )

        raise ValueError(f"Unknown LLM provider: {provider_name}. Supported providers: openrouter, openai")
