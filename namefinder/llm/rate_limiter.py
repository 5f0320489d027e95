"""
Rate limiting for LLM providers.

Sandi Metz Principles:
- Single Responsibility: Manage provider request budget
- Small methods: Each method < 10 lines
- Dependency Injection: Clock and sleep injected
"""

import asyncio
import time
from collections import deque
from dataclasses import dataclass
from typing import Awaitable, Callable, Deque

from namefinder.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class RateLimitConfig:
    """Rate limit configuration."""

    requests_per_minute: int
    window_seconds: float = 60.0


class RateLimiter:
    """
    Sliding-window rate limiter for provider calls.

    Keeps the timestamps of recent calls and blocks once the window's
    budget is spent, until the oldest call leaves the window.
    """

    def __init__(
        self,
        config: RateLimitConfig,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize rate limiter.

        Args:
            config: Rate limit configuration
            clock: Monotonic time source in seconds
            sleep: Coroutine used to wait
        """
        self._config = config
        self._clock = clock
        self._sleep = sleep
        self._requests: Deque[float] = deque()
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """
        Acquire permission to make request.

        Blocks until rate limit allows request.
        """
        async with self._lock:
            await self._wait_if_needed()
            self._requests.append(self._clock())

    async def _wait_if_needed(self) -> None:
        """Wait if the window budget is spent."""
        self._cleanup_old_requests()

        if len(self._requests) >= self._config.requests_per_minute:
            wait_time = self._calculate_wait_time()
            logger.debug("Provider rate limit reached", wait_seconds=round(wait_time, 2))
            await self._sleep(wait_time)
            self._cleanup_old_requests()

    def _cleanup_old_requests(self) -> None:
        """Drop requests that left the window."""
        cutoff = self._clock() - self._config.window_seconds
        while self._requests and self._requests[0] <= cutoff:
            self._requests.popleft()

    def _calculate_wait_time(self) -> float:
        """
        Calculate time to wait before next request.

        Returns:
            Wait time in seconds
        """
        if not self._requests:
            return 0.0
        elapsed = self._clock() - self._requests[0]
        return max(0.0, self._config.window_seconds - elapsed)

    def get_remaining_requests(self) -> int:
        """
        Get remaining requests in current window.

        Returns:
            Number of remaining requests
        """
        self._cleanup_old_requests()
        return max(0, self._config.requests_per_minute - len(self._requests))
