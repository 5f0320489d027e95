"""
API Middleware module.

Contains middleware for:
- Request logging
"""

from namefinder.api.middleware.logging import (
    LoggingConfig,
    RequestLoggingMiddleware,
    default_logging_config,
)

__all__ = [
    "RequestLoggingMiddleware",
    "LoggingConfig",
    "default_logging_config",
]
