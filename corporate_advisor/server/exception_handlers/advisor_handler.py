"""
Handler for domain errors raised by the services.
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from corporate_advisor.core.errors import AdvisorError
from corporate_advisor.core.logging_config import get_logger

logger = get_logger(__name__)


async def advisor_error_handler(request: Request, exc: AdvisorError) -> JSONResponse:
    """Render an ``AdvisorError`` as ``{"error": message}`` with its status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc.__cause__)
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)
