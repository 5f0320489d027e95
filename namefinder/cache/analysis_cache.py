"""
Analysis cache service.

In-memory map of analyses keyed by (name, gender, theme, criteria),
mirrored to a namespaced blob in an external store.

Sandi Metz Principles:
- Single Responsibility: Cache lifecycle (lookup, expiry, persistence)
- Dependency Injection: Store and clock injected
- Small methods: Each operation < 10 lines where possible
"""

import asyncio
import time
from typing import Any, Callable, Dict, Optional, Protocol, Set

from pydantic import ValidationError as PydanticValidationError

from namefinder.analysis.scoring import recompute_overall_match
from namefinder.config import config
from namefinder.models.analysis import NameMatchAnalysis
from namefinder.models.cache_entry import MS_PER_DAY, CacheEntry, CacheStats
from namefinder.utils.hasher import generate_cache_key
from namefinder.utils.logger import get_logger, log_cache_hit, log_cache_miss

logger = get_logger(__name__)


class BlobStore(Protocol):
    """Key-value store holding the serialized cache map."""

    async def load_blob(self, key: str) -> Optional[Dict[str, Any]]: ...

    async def save_blob(self, key: str, data: Dict[str, Any]) -> bool: ...

    async def delete_blob(self, key: str) -> bool: ...


def _text(value: Any) -> str:
    return getattr(value, "value", value) or ""


class AnalysisCache:
    """
    Time-expiring analysis cache.

    Entries older than the expiry window are removed when read or swept.
    Each mutation queues a persistence write of the whole map; ``flush``
    awaits the queued writes. Without a store the cache is session-only.
    """

    def __init__(
        self,
        store: Optional[BlobStore] = None,
        expiry_days: Optional[float] = None,
        namespace: Optional[str] = None,
        clock: Callable[[], float] = time.time,
        overall_match_rule: Optional[str] = None,
    ):
        """
        Initialize cache.

        Args:
            store: Persistence store (None for session-only caching)
            expiry_days: Entry lifetime in days (defaults to configuration)
            namespace: Blob key in the store (defaults to configuration)
            clock: Time source in epoch seconds
            overall_match_rule: Rule re-applied to loaded analyses
                (defaults to configuration)
        """
        self._store = store
        self._expiry_days = expiry_days if expiry_days is not None else config.cache_expiry_days
        self._namespace = namespace or config.cache_namespace
        self._clock = clock
        self._rule = overall_match_rule
        self._entries: Dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0
        self._pending_writes: Set[asyncio.Task] = set()
        self._write_lock = asyncio.Lock()
        self._sweeper: Optional[asyncio.Task] = None

    @property
    def expiry_ms(self) -> float:
        """Entry lifetime in milliseconds."""
        return self._expiry_days * MS_PER_DAY

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    @staticmethod
    def make_key(name: str, gender: Any, meaning_theme: str, chinese_metaphysics: str) -> str:
        """Normalized cache key for the four criteria."""
        return generate_cache_key(
            _text(name), _text(gender), _text(meaning_theme), _text(chinese_metaphysics)
        )

    async def load(self) -> int:
        """
        Hydrate the in-memory map from the store.

        Invalid or expired entries are skipped. The overall verdict of
        each loaded analysis is derived again from its categories.

        Returns:
            Number of entries loaded
        """
        if self._store is None:
            return 0

        try:
            blob = await self._store.load_blob(self._namespace)
        except Exception as e:
            logger.error("Cache load failed", namespace=self._namespace, error=str(e))
            return 0

        loaded = 0
        corrected = 0
        now = self._now_ms()
        for key, data in (blob or {}).items():
            try:
                entry = CacheEntry.from_blob(key, data)
            except (PydanticValidationError, AttributeError, TypeError):
                logger.warning("Skipping invalid cache entry", key=key)
                continue
            if entry.is_expired(now, self.expiry_ms):
                continue

            analysis = recompute_overall_match(entry.analysis, self._rule)
            if analysis is not entry.analysis:
                entry = entry.model_copy(update={"analysis": analysis})
                corrected += 1
            self._entries[key] = entry
            loaded += 1

        if corrected:
            logger.warning("Corrected stored overall verdicts", entries=corrected)
            self._schedule_persist()
        logger.info("Analysis cache loaded", entries=loaded)
        return loaded

    async def get(
        self, name: str, gender: Any, meaning_theme: str, chinese_metaphysics: str
    ) -> Optional[NameMatchAnalysis]:
        """
        Look up a cached analysis.

        Counts a hit or a miss. An expired entry is removed and counts
        as a miss.

        Returns:
            Cached analysis, or None
        """
        key = self.make_key(name, gender, meaning_theme, chinese_metaphysics)
        entry = self._entries.get(key)

        if entry is not None and entry.is_expired(self._now_ms(), self.expiry_ms):
            del self._entries[key]
            self._schedule_persist()
            logger.info("Cache entry expired", key=key)
            entry = None

        if entry is None:
            self._misses += 1
            log_cache_miss(name)
            return None

        self._hits += 1
        log_cache_hit(name)
        return entry.analysis

    def has(
        self, name: str, gender: Any, meaning_theme: str, chinese_metaphysics: str
    ) -> bool:
        """Check for a live entry without touching the session counters."""
        key = self.make_key(name, gender, meaning_theme, chinese_metaphysics)
        entry = self._entries.get(key)
        return entry is not None and not entry.is_expired(self._now_ms(), self.expiry_ms)

    async def set(
        self,
        name: str,
        gender: Any,
        meaning_theme: str,
        chinese_metaphysics: str,
        analysis: NameMatchAnalysis,
    ) -> Optional[asyncio.Task]:
        """
        Store an analysis under the criteria key with a fresh timestamp.

        Returns:
            Handle of the queued persistence write (None when session-only)
        """
        key = self.make_key(name, gender, meaning_theme, chinese_metaphysics)
        self._entries[key] = CacheEntry(key=key, analysis=analysis, timestamp=self._now_ms())
        logger.debug("Cache stored", key=key)
        return self._schedule_persist()

    def stats(self) -> CacheStats:
        """
        Current cache statistics.

        Returns:
            Entry count, average age and session hit/miss counters
        """
        now = self._now_ms()
        ages = [entry.age_ms(now) for entry in self._entries.values()]
        average_days = sum(ages) / len(ages) / MS_PER_DAY if ages else 0.0
        lookups = self._hits + self._misses
        hit_rate = self._hits / lookups * 100 if lookups else 0.0

        return CacheStats(
            total_entries=len(self._entries),
            average_age_days=round(average_days, 2),
            session_hits=self._hits,
            session_misses=self._misses,
            session_hit_rate=round(hit_rate, 2),
        )

    def reset_session_stats(self) -> None:
        """Reset the session hit/miss counters."""
        self._hits = 0
        self._misses = 0

    async def clear_all(self) -> None:
        """Empty the cache and remove the persisted blob."""
        self._entries.clear()
        await self.flush()

        if self._store is not None:
            try:
                await self._store.delete_blob(self._namespace)
            except Exception as e:
                logger.error("Cache blob delete failed", error=str(e))

        logger.info("Analysis cache cleared")

    async def sweep_expired(self) -> int:
        """
        Remove every expired entry.

        Returns:
            Number of entries removed
        """
        now = self._now_ms()
        expired = [
            key for key, entry in self._entries.items()
            if entry.is_expired(now, self.expiry_ms)
        ]
        for key in expired:
            del self._entries[key]

        if expired:
            self._schedule_persist()
            logger.info("Expired cache entries swept", removed=len(expired))
        return len(expired)

    async def flush(self) -> None:
        """Wait for all queued persistence writes."""
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes), return_exceptions=True)

    def start_sweeper(self, interval_seconds: Optional[float] = None) -> None:
        """
        Run ``sweep_expired`` periodically on a background task.

        Args:
            interval_seconds: Sweep interval (defaults to configuration)
        """
        if self._sweeper is not None and not self._sweeper.done():
            return
        interval = interval_seconds or config.cache_sweep_interval_seconds
        self._sweeper = asyncio.create_task(self._sweep_forever(interval))
        logger.info("Cache sweeper started", interval_seconds=interval)

    async def stop_sweeper(self) -> None:
        """Cancel the background sweeper."""
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None

    async def _sweep_forever(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await self.sweep_expired()
            except Exception as e:
                logger.error("Cache sweep failed", error=str(e))

    def _schedule_persist(self) -> Optional[asyncio.Task]:
        """Queue a write of the current map to the store."""
        if self._store is None:
            return None
        task = asyncio.create_task(self._persist())
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)
        return task

    async def _persist(self) -> bool:
        """Write the map as it is when the write runs."""
        async with self._write_lock:
            blob = {key: entry.to_blob() for key, entry in self._entries.items()}
            try:
                saved = await self._store.save_blob(self._namespace, blob)
            except Exception as e:
                logger.error("Cache persist failed", error=str(e))
                return False
            if not saved:
                logger.warning("Cache persist not acknowledged", entries=len(blob))
            return bool(saved)

    def __len__(self) -> int:
        return len(self._entries)
