from typing import List, Dict, Optional
import httpx
from openai import AsyncOpenAI, APIStatusError
from .base import LLMProvider, ProviderCompletion, ProviderHTTPError
import logging

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """
    Provider for any OpenAI-compatible chat-completions API (OpenRouter, OpenAI)

    The SDK's built-in retries are disabled: LLMService owns the retry policy
    and every call here is exactly one HTTP request.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        default_model: str,
        default_headers: Optional[Dict[str, str]] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize provider

        Args:
            api_key: Provider API key
            base_url: API base URL, e.g. https://openrouter.ai/api/v1
            default_model: Model used when a call does not name one
            default_headers: Extra headers sent with every request
            http_client: Optional httpx client (shared pool, or a mock transport in tests)
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
            default_headers=default_headers,
            http_client=http_client
        )
        self._default_model = default_model
        logger.info(f"Initialized OpenAI-compatible provider at {base_url} with model: {default_model}")

    async def chat_completion(
        self,
        messages: List[Dict[str, str]],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None
    ) -> ProviderCompletion:
        """Make one chat completion request"""
        model = model or self._default_model

        kwargs = {
            "model": model,
            "messages": messages,
            "temperature": temperature
        }
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except APIStatusError as e:
            raise ProviderHTTPError(
                status_code=e.status_code,
                body=e.response.text,
                retry_after=e.response.headers.get("retry-after")
            ) from e

        content = None
        choices = getattr(response, "choices", None) or []
        if choices and choices[0].message is not None:
            content = choices[0].message.content

        usage = response.usage.model_dump() if getattr(response, "usage", None) else None
        return ProviderCompletion(
            content=content,
            usage=usage,
            model=getattr(response, "model", None) or model
        )

    def get_default_model(self) -> str:
        return self._default_model
