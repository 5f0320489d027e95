"""
Cache administration endpoints.

Sandi Metz Principles:
- Single Responsibility: Cache inspection and clearing
- Dependency Injection: Cache and deduplicator injected
"""

from fastapi import APIRouter, Depends

from namefinder.api.deps import get_analysis_cache, get_deduplicator
from namefinder.cache.analysis_cache import AnalysisCache
from namefinder.models.response import AdminStatsResponse, ClearCacheResponse
from namefinder.pipeline.deduplication import InFlightDeduplicator
from namefinder.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("/admin/cache-stats", response_model=AdminStatsResponse)
async def cache_stats(
    cache: AnalysisCache = Depends(get_analysis_cache),  # noqa: B008
    deduplicator: InFlightDeduplicator = Depends(get_deduplicator),  # noqa: B008
) -> AdminStatsResponse:
    """
    Analysis cache statistics.

    Returns:
        Entry count, average age, session hit rate and in-flight
        deduplication counters
    """
    dedup = deduplicator.stats
    return AdminStatsResponse(
        **cache.stats().model_dump(),
        in_flight=deduplicator.pending_count,
        deduplicated_requests=dedup.deduplicated,
        abandoned_requests=dedup.abandoned,
        dedup_rate=round(dedup.dedup_rate, 4),
    )


@router.post("/admin/clear-cache", response_model=ClearCacheResponse)
async def clear_cache(
    cache: AnalysisCache = Depends(get_analysis_cache),  # noqa: B008
    deduplicator: InFlightDeduplicator = Depends(get_deduplicator),  # noqa: B008
) -> ClearCacheResponse:
    """
    Remove every cached analysis, in memory and persisted.

    Deduplication counters restart with the emptied cache.

    Returns:
        Clearing result
    """
    await cache.clear_all()
    deduplicator.reset_stats()
    logger.info("Cache cleared via admin endpoint")
    return ClearCacheResponse(success=True)
