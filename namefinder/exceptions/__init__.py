"""
Custom exceptions for the application.
"""


class AppError(Exception):
    """Base exception for application errors."""

    pass


class LLMProviderError(AppError):
    """Raised when LLM provider fails."""

    pass


class ResponseParseError(AppError):
    """Raised when provider content does not have the expected shape."""

    pass


class ValidationError(AppError):
    """Raised when validation fails."""

    pass


class ConfigurationError(AppError):
    """Raised when configuration is invalid."""

    pass


class DataSourceError(AppError):
    """Raised when candidate name data is unavailable."""

    pass
