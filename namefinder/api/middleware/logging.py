"""
API Request Logging Middleware.

Logs every request with timing and binds a request ID into the
structlog context so service logs can be correlated with the request.

Sandi Metz Principles:
- Single Responsibility: Request/response logging
- Non-intrusive: Doesn't modify request/response beyond the ID header
- Configurable: Excluded paths and slow-request threshold
"""

import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from namefinder.utils.logger import get_logger, log_request, log_response

logger = get_logger(__name__)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    enabled: bool = True
    log_headers: bool = False
    excluded_paths: List[str] = field(default_factory=lambda: ["/health", "/ready"])
    slow_request_threshold_ms: float = 30000.0


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for request/response logging.

    Streaming responses are logged when their headers are sent.
    """

    def __init__(
        self,
        app,
        config: Optional[LoggingConfig] = None,
    ):
        """
        Initialize middleware.

        Args:
            app: FastAPI application
            config: Logging configuration
        """
        super().__init__(app)
        self._config = config or LoggingConfig()

    def _generate_request_id(self) -> str:
        """Generate unique request ID."""
        return str(uuid.uuid4())[:8]

    def _should_log(self, path: str) -> bool:
        """Check if path should be logged."""
        if not self._config.enabled:
            return False
        return path not in self._config.excluded_paths

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request with logging.

        Args:
            request: Incoming request
            call_next: Next middleware/handler

        Returns:
            Response
        """
        request_id = request.headers.get("X-Request-ID") or self._generate_request_id()

        if not self._should_log(request.url.path):
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response

        structlog.contextvars.bind_contextvars(request_id=request_id)
        start_time = time.time()
        try:
            log_data = {
                "query": str(request.query_params) if request.query_params else None,
                "client": request.client.host if request.client else "unknown",
            }
            if self._config.log_headers:
                log_data["headers"] = dict(request.headers)
            log_request(request.method, request.url.path, **log_data)

            try:
                response = await call_next(request)
            except Exception as e:
                duration_ms = (time.time() - start_time) * 1000
                logger.error(
                    "Request failed", duration_ms=round(duration_ms, 2), error=str(e)
                )
                raise

            duration_ms = (time.time() - start_time) * 1000
            response_log = {
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
            }
            if duration_ms > self._config.slow_request_threshold_ms:
                logger.warning("Slow request detected", **response_log)
            else:
                log_response(response.status_code, round(duration_ms, 2))
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers["X-Request-ID"] = request_id
        return response


# Default configuration
default_logging_config = LoggingConfig()
