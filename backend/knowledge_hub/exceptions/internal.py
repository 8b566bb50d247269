from fastapi import status
from .base import KnowledgeHubException


class InternalError(KnowledgeHubException):
    """Unexpected failure, reported to the caller without internal detail"""

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(
            detail=detail,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
