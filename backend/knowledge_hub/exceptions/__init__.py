from .base import KnowledgeHubException
from .not_found import NotFoundError
from .validation import ValidationError
from .auth import AuthenticationError
from .upstream import RateLimitedError, UpstreamError
from .internal import InternalError

__all__ = [
    "KnowledgeHubException",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "RateLimitedError",
    "UpstreamError",
    "InternalError",
]
