from fastapi import status
from .base import KnowledgeHubException


class NotFoundError(KnowledgeHubException):
    """Exception raised when a resource is absent or not owned by the caller"""

    def __init__(self, resource: str, identifier: str = None):
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            detail=f"{resource} not found",
            status_code=status.HTTP_404_NOT_FOUND
        )
