"""
Retry logic for LLM providers.

Sandi Metz Principles:
- Single Responsibility: Manage retry logic
- Small methods: Each method < 10 lines
- Dependency Injection: Configuration injected
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Tuple, Type

from anthropic import (
    APIConnectionError as AnthropicConnectionError,
    APITimeoutError as AnthropicTimeoutError,
    InternalServerError as AnthropicInternalServerError,
    RateLimitError as AnthropicRateLimitError,
)
from openai import (
    APIConnectionError as OpenAIConnectionError,
    APITimeoutError as OpenAITimeoutError,
    InternalServerError as OpenAIInternalServerError,
    RateLimitError as OpenAIRateLimitError,
)

from namefinder.utils.logger import get_logger

logger = get_logger(__name__)

# Transient provider failures worth another attempt
RETRYABLE_EXCEPTIONS: Tuple[Type[BaseException], ...] = (
    OpenAIRateLimitError,
    OpenAITimeoutError,
    OpenAIConnectionError,
    OpenAIInternalServerError,
    AnthropicRateLimitError,
    AnthropicTimeoutError,
    AnthropicConnectionError,
    AnthropicInternalServerError,
)


@dataclass
class RetryConfig:
    """Retry configuration."""

    max_attempts: int = 3
    initial_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0


class RetryHandler:
    """
    Exponential backoff retry handler.

    Retries transient provider failures with increasing delays;
    anything else propagates on the first attempt.
    """

    def __init__(
        self,
        config: RetryConfig | None = None,
        retryable: Tuple[Type[BaseException], ...] = RETRYABLE_EXCEPTIONS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize retry handler.

        Args:
            config: Retry configuration (uses defaults if None)
            retryable: Exception types that trigger another attempt
            sleep: Coroutine used to wait between attempts
        """
        self._config = config or RetryConfig()
        self._retryable = retryable
        self._sleep = sleep

    async def execute(self, func: Callable[[], Awaitable[Any]]) -> Any:
        """
        Execute function with retry logic.

        Args:
            func: Async function to execute

        Returns:
            Function result

        Raises:
            Exception: The last error once attempts are exhausted
        """
        attempt = 1
        while True:
            try:
                return await func()
            except self._retryable as e:
                if attempt >= self._config.max_attempts:
                    logger.error("Retry attempts exhausted", attempts=attempt, error=str(e))
                    raise

                delay = self.calculate_delay(attempt)
                logger.warning(
                    "Provider call failed, retrying",
                    attempt=attempt,
                    delay_seconds=round(delay, 2),
                    error=str(e),
                )
                await self._sleep(delay)
                attempt += 1

    def calculate_delay(self, attempt: int) -> float:
        """
        Calculate delay for attempt using exponential backoff.

        Args:
            attempt: Current attempt number (1-indexed)

        Returns:
            Delay in seconds
        """
        delay = self._config.initial_delay * (
            self._config.exponential_base ** (attempt - 1)
        )
        return min(delay, self._config.max_delay)
