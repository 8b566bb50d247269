from fastapi import status
from .base import KnowledgeHubException


class AuthenticationError(KnowledgeHubException):
    """Exception raised when authentication fails"""

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            detail=detail,
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"}
        )
