from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional
from ..clients.llm_providers.base import LLMProvider, ProviderHTTPError
from ..core.telemetry import get_tracer
from ..exceptions import InternalError, RateLimitedError, UpstreamError
from ..config import settings
from .prompts import ChatPrompt
from opentelemetry import trace
import asyncio
import logging
import math

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

NO_RESPONSE_TEXT = "No response received"
HTTP_TOO_MANY_REQUESTS = 429


@dataclass
class CompletionResult:
    """A successful completion and how many attempts it took"""
    content: str
    usage: Optional[Dict[str, Any]]
    model: str
    attempts: int = 1

    @property
    def retries(self) -> int:
        return self.attempts - 1


def parse_retry_after_ms(value: Optional[str]) -> Optional[int]:
    """
    Retry-After header in milliseconds

    Only the delta-seconds form is understood; missing, negative or
    unparseable values (including HTTP dates) give None.
    """
    if value is None:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return int(seconds * 1000)


class LLMService:
    """Chat completions against the configured provider, with retry on rate limiting"""

    def __init__(
        self,
        provider: Optional[LLMProvider],
        max_concurrent_requests: Optional[int] = None,
        max_attempts: Optional[int] = None,
        backoff_base_ms: Optional[int] = None,
        default_retry_after_ms: Optional[int] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ):
        """
        Initialize LLM service with a provider

        Args:
            provider: LLM provider implementation, or None when no API key is configured
            max_concurrent_requests: Maximum in-flight upstream requests (defaults to settings)
            max_attempts: Total attempts per completion, first try included
            backoff_base_ms: Delay after the first rate-limited attempt when no Retry-After is sent
            default_retry_after_ms: Retry hint reported when the final 429 carries no Retry-After
            sleep: Coroutine function used to wait between attempts
        """
        self.provider = provider
        self.max_attempts = max_attempts or settings.chat_max_attempts
        self.backoff_base_ms = backoff_base_ms or settings.chat_backoff_base_ms
        self.default_retry_after_ms = default_retry_after_ms or settings.chat_default_retry_after_ms
        self._sleep = sleep

        max_concurrent = max_concurrent_requests or settings.llm_max_concurrent_requests
        self._semaphore = asyncio.Semaphore(max_concurrent)

        logger.debug(
            f"Initialized LLMService with provider: {provider.__class__.__name__ if provider else None}, "
            f"max_concurrent={max_concurrent}, max_attempts={self.max_attempts}"
        )

    def is_available(self) -> bool:
        return self.provider is not None

    def ensure_available(self) -> None:
        """Fail with a 500 when no provider API key is configured"""
        if not self.is_available():
            logger.error("Chat requested but no LLM provider API key is configured")
            raise InternalError("LLM provider API key not configured")

    def backoff_delay_ms(self, attempt: int, retry_after: Optional[str] = None) -> int:
        """
        Wait before the attempt that follows a rate-limited ``attempt``

        The provider's Retry-After wins; otherwise base * 2^(attempt-1),
        so 1000ms after attempt 1 and 2000ms after attempt 2.
        """
        retry_after_ms = parse_retry_after_ms(retry_after)
        if retry_after_ms is not None:
            return retry_after_ms
        return self.backoff_base_ms * 2 ** (attempt - 1)

    async def complete(
        self,
        prompt: ChatPrompt,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> CompletionResult:
        """
        Get the assistant reply for a prompt

        Args:
            prompt: Assembled chat prompt
            temperature: Sampling temperature (defaults to settings)
            max_tokens: Completion token ceiling (defaults to settings)

        Returns:
            CompletionResult; content falls back to "No response received"

        Raises:
            RateLimitedError: Still rate limited after max_attempts
            UpstreamError: Any other non-2xx provider status (not retried)
        """
        self.ensure_available()
        model = self.provider.get_default_model()
        temperature = settings.chat_temperature if temperature is None else temperature
        max_tokens = max_tokens or settings.chat_max_tokens
        messages = prompt.to_messages()

        with tracer.start_as_current_span("llm.complete") as span:
            span.set_attribute("llm.model", model)
            span.set_attribute("llm.provider", self.provider.__class__.__name__)
            span.set_attribute("llm.documents_used", prompt.documents_used)
            span.set_attribute("llm.max_attempts", self.max_attempts)

            attempt = 1
            while True:
                try:
                    async with self._semaphore:
                        completion = await self.provider.chat_completion(
                            messages=messages,
                            model=model,
                            temperature=temperature,
                            max_tokens=max_tokens
                        )
                    break
                except ProviderHTTPError as e:
                    span.set_attribute("llm.last_status", e.status_code)
                    if e.status_code != HTTP_TOO_MANY_REQUESTS:
                        logger.error(f"LLM provider error {e.status_code} on attempt {attempt}: {e.body}")
                        span.set_status(trace.Status(trace.StatusCode.ERROR, f"upstream {e.status_code}"))
                        raise UpstreamError(e.status_code, e.body) from e

                    if attempt >= self.max_attempts:
                        retry_after_ms = parse_retry_after_ms(e.retry_after)
                        if retry_after_ms is None:
                            retry_after_ms = self.default_retry_after_ms
                        logger.warning(
                            f"LLM provider still rate limited after {attempt} attempts; "
                            f"suggesting retry in {retry_after_ms}ms"
                        )
                        span.set_attribute("llm.attempts", attempt)
                        span.set_status(trace.Status(trace.StatusCode.ERROR, "rate limited"))
                        raise RateLimitedError(retry_after_ms, attempt) from e

                    delay_ms = self.backoff_delay_ms(attempt, e.retry_after)
                    logger.warning(
                        f"LLM provider rate limited (attempt {attempt}/{self.max_attempts}), "
                        f"retrying in {delay_ms}ms"
                    )
                    await self._sleep(delay_ms / 1000)
                    attempt += 1

            span.set_attribute("llm.attempts", attempt)

        content = completion.content or NO_RESPONSE_TEXT
        if not completion.content:
            logger.warning("LLM provider returned no completion text")

        return CompletionResult(
            content=content,
            usage=completion.usage,
            model=completion.model,
            attempts=attempt
        )
