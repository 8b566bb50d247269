from fastapi import status
from .base import KnowledgeHubException


class ValidationError(KnowledgeHubException):
    """Exception raised when request fields are missing or malformed"""

    def __init__(self, detail: str):
        super().__init__(
            detail=detail,
            status_code=status.HTTP_400_BAD_REQUEST
        )
