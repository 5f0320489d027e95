"""
In-flight analysis deduplication.

Concurrent misses for the same cache key share one provider call
instead of racing to compute the same analysis.

Sandi Metz Principles:
- Single Responsibility: Single-flight coordination
- Async-safe: Lock guards the pending map
- Small methods: Each method < 10 lines
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Tuple

from namefinder.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class DeduplicationStats:
    """Statistics for deduplication."""

    total_requests: int = 0
    deduplicated: int = 0
    unique: int = 0
    abandoned: int = 0

    @property
    def dedup_rate(self) -> float:
        """Get deduplication rate."""
        if self.total_requests == 0:
            return 0.0
        return self.deduplicated / self.total_requests


class InFlightDeduplicator:
    """
    Single-flight coordinator keyed by cache key.

    The first caller for a key becomes the leader and computes the
    result; callers arriving while it runs await the leader's future.
    The entry is removed once the leader completes.
    """

    def __init__(self):
        self._pending: Dict[str, asyncio.Future] = {}
        self._lock = asyncio.Lock()
        self._stats = DeduplicationStats()

    async def get_or_create(self, key: str) -> Tuple[bool, asyncio.Future]:
        """
        Get the pending computation for a key or register a new one.

        Args:
            key: Cache key

        Returns:
            Tuple of (is_duplicate, future)
        """
        async with self._lock:
            self._stats.total_requests += 1

            pending = self._pending.get(key)
            if pending is not None and not pending.done():
                self._stats.deduplicated += 1
                logger.debug("Analysis deduplicated", key=key)
                return (True, pending)

            self._stats.unique += 1
            future: asyncio.Future = asyncio.get_running_loop().create_future()
            self._pending[key] = future
            return (False, future)

    async def complete(
        self, key: str, result: Any = None, error: BaseException | None = None
    ) -> None:
        """
        Resolve a pending computation and release the key.

        Args:
            key: Cache key
            result: Computed result
            error: Error if the computation failed
        """
        async with self._lock:
            future = self._pending.pop(key, None)
            if future is None or future.done():
                return

            if error is not None:
                future.set_exception(error)
                # Mark retrieved so an unawaited failure does not warn
                future.exception()
            else:
                future.set_result(result)

    async def run(self, key: str, compute: Callable[[], Awaitable[Any]]) -> Any:
        """
        Run ``compute`` once per key across concurrent callers.

        A cancelled leader releases the key; its followers then start
        over and one of them becomes the new leader.

        Args:
            key: Cache key
            compute: Coroutine factory producing the result

        Returns:
            The leader's result
        """
        while True:
            is_duplicate, future = await self.get_or_create(key)
            if not is_duplicate:
                break
            try:
                return await asyncio.shield(future)
            except asyncio.CancelledError:
                if not future.cancelled():
                    raise
                logger.info("Leader cancelled, retrying analysis", key=key)

        try:
            result = await compute()
        except asyncio.CancelledError:
            self._abandon(key, future)
            raise
        except Exception as e:
            await self.complete(key, error=e)
            raise

        await self.complete(key, result=result)
        return result

    def _abandon(self, key: str, future: asyncio.Future) -> None:
        """Release a key whose leader was cancelled."""
        if self._pending.get(key) is future:
            del self._pending[key]
        future.cancel()
        self._stats.abandoned += 1

    @property
    def pending_count(self) -> int:
        """Get number of in-flight computations."""
        return len(self._pending)

    @property
    def stats(self) -> DeduplicationStats:
        """Get deduplication statistics."""
        return self._stats

    def reset_stats(self) -> None:
        """Reset statistics."""
        self._stats = DeduplicationStats()
