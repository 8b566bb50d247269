from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class KnowledgeHubException(HTTPException):
    """
    Base exception for the Knowledge Hub API

    ``detail`` is the short message returned to the caller as ``{"error": detail}``.
    ``extra`` holds additional top-level fields for the error body.
    """

    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers: Optional[Dict[str, str]] = None,
        extra: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.extra = extra or {}

    def to_body(self) -> Dict[str, Any]:
        """Wire representation of the error"""
        return {"error": self.detail, **self.extra}
