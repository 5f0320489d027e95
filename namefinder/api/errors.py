"""
Application error to HTTP response mapping.

Sandi Metz Principles:
- Single Responsibility: Translate domain errors into HTTP errors
- Open/Closed: New error types only need a table entry
"""

from typing import Dict, Type

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from namefinder.exceptions import (
    AppError,
    ConfigurationError,
    DataSourceError,
    LLMProviderError,
    ValidationError,
)
from namefinder.utils.logger import get_logger, log_error

logger = get_logger(__name__)

STATUS_CODES: Dict[Type[AppError], int] = {
    ValidationError: 400,
    DataSourceError: 404,
    LLMProviderError: 502,
    ConfigurationError: 503,
}


def status_for(error: Exception) -> int:
    """HTTP status code for an error (500 when unmapped)."""
    for error_type, status_code in STATUS_CODES.items():
        if isinstance(error, error_type):
            return status_code
    return 500


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an application error."""
    status_code = status_for(exc)
    if status_code >= 500:
        log_error(exc, "request", path=request.url.path)
        detail = str(exc) if status_code != 500 else "Internal server error"
    else:
        logger.info("Request rejected", path=request.url.path, error=str(exc))
        detail = str(exc)
    return JSONResponse(status_code=status_code, content={"detail": detail})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register application error handlers.

    Args:
        app: FastAPI application
    """
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
