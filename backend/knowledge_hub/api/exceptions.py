from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException
from ..exceptions import KnowledgeHubException
import logging

logger = logging.getLogger(__name__)


async def knowledge_hub_exception_handler(request: Request, exc: KnowledgeHubException):
    """Serialize application errors as {"error": ...}"""
    if exc.status_code >= 500:
        logger.error(f"Application error {exc.status_code}: {exc.detail} - {request.url}")
    else:
        logger.warning(f"Application error {exc.status_code}: {exc.detail} - {request.url}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_body(),
        headers=exc.headers
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Framework errors such as unknown routes, in the same {"error": ...} shape"""
    logger.warning(f"HTTP error {exc.status_code}: {exc.detail} - {request.url}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors as a 400"""
    errors = jsonable_encoder(exc.errors())
    logger.warning(f"Validation error: {errors} - {request.url}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": errors}
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.error(f"Unhandled exception: {exc} - {request.url}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )
