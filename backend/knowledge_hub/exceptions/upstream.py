import math
from fastapi import status
from .base import KnowledgeHubException


class RateLimitedError(KnowledgeHubException):
    """The LLM provider kept answering 429 after every retry attempt"""

    def __init__(self, retry_after_ms: int, attempts: int):
        self.retry_after_ms = retry_after_ms
        self.attempts = attempts
        super().__init__(
            detail="Provider rate limited",
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            headers={"Retry-After": str(max(1, math.ceil(retry_after_ms / 1000)))},
            extra={"retryAfterMs": retry_after_ms}
        )


class UpstreamError(KnowledgeHubException):
    """The LLM provider answered with a non-429 error status"""

    def __init__(self, upstream_status: int, body: str = ""):
        self.upstream_status = upstream_status
        # Kept for server-side logging only, never returned to the caller
        self.body = body
        super().__init__(
            detail=f"LLM provider error: {upstream_status}",
            status_code=upstream_status
        )
