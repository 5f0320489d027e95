"""
Structured logging configuration.

Console output while developing, one JSON object per line in production.
Request IDs bound by the request middleware are merged into every event.

Following Sandi Metz principles:
- Single Responsibility: Logging setup and configuration
- Small functions: Each setup step isolated
- Clear naming: Descriptive function names
"""

import logging
import sys
from typing import Any, List

import structlog

NOISY_LOGGERS = ("httpx", "httpcore", "openai", "anthropic")


def _shared_processors() -> List[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON lines instead of console output
    """
    shared = _shared_processors()
    renderer = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, log_level.upper()))

    # Provider SDKs log every HTTP request at INFO
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structured logger
    """
    return structlog.get_logger(name)


def truncate(text: str, limit: int = 30) -> str:
    """Shorten free text (themes, criteria) for log context."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def log_request(method: str, path: str, **kwargs: Any) -> None:
    """Log an incoming HTTP request."""
    get_logger("http").info("request", method=method, path=path, **kwargs)


def log_response(status_code: int, latency_ms: float, **kwargs: Any) -> None:
    """Log a completed HTTP response."""
    get_logger("http").info(
        "response", status_code=status_code, latency_ms=latency_ms, **kwargs
    )


def log_cache_hit(name: str, source: str = "memory", **kwargs: Any) -> None:
    """
    Log analysis cache hit.

    Args:
        name: Analyzed name
        source: Where the analysis came from
        **kwargs: Additional context
    """
    get_logger("cache").info("cache_hit", name=name, source=source, **kwargs)


def log_cache_miss(name: str, **kwargs: Any) -> None:
    """Log analysis cache miss."""
    get_logger("cache").info("cache_miss", name=name, **kwargs)


def log_llm_call(
    provider: str, model: str, tokens: int, operation: str = "", **kwargs: Any
) -> None:
    """
    Log a provider call.

    Args:
        provider: Provider name
        model: Model name
        tokens: Total tokens used
        operation: Which analysis step issued the call
        **kwargs: Additional context
    """
    get_logger("llm").info(
        "llm_call",
        provider=provider,
        model=model,
        tokens=tokens,
        operation=operation,
        **kwargs
    )


def log_search_summary(
    processed: int, matches: int, provider_calls: int, **kwargs: Any
) -> None:
    """
    Log the outcome of one name search.

    Args:
        processed: Names with an analysis in the result
        matches: Analyses with overallMatch set
        provider_calls: Provider calls issued for the search
        **kwargs: Additional context
    """
    match_ratio = round(matches / processed, 2) if processed else 0.0
    get_logger("search").info(
        "search_completed",
        processed=processed,
        matches=matches,
        match_ratio=match_ratio,
        provider_calls=provider_calls,
        **kwargs
    )


def log_error(error: Exception, context: str, **kwargs: Any) -> None:
    """
    Log error with context.

    Args:
        error: Exception that occurred
        context: Error context
        **kwargs: Additional context
    """
    get_logger("error").error(
        "error_occurred",
        error=str(error),
        error_type=type(error).__name__,
        context=context,
        **kwargs
    )
