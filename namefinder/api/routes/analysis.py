"""
Name analysis and search endpoints.

Sandi Metz Principles:
- Single Responsibility: HTTP request handling
- Small functions: Minimal logic in endpoints
- Dependency Injection: Services injected
"""

import asyncio
from typing import AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from namefinder.analysis.analyzer import NameAnalyzer
from namefinder.api.deps import get_name_analyzer, get_search_service
from namefinder.api.streaming import SSE_HEADERS, format_event
from namefinder.exceptions import ValidationError
from namefinder.models.request import (
    AnalysisRequest,
    FavoriteItem,
    NameDetailsRequest,
    SearchRequest,
)
from namefinder.models.response import AnalysisResponse, NameDetailsResponse, SearchResponse
from namefinder.services.search_service import NameSearchService
from namefinder.utils.logger import get_logger, log_error

router = APIRouter()
logger = get_logger(__name__)


@router.post("/analysis", response_model=AnalysisResponse)
async def analyze_name(
    request: AnalysisRequest,
    analyzer: NameAnalyzer = Depends(get_name_analyzer),  # noqa: B008
) -> AnalysisResponse:
    """
    Analyze one name against the criteria.

    Provider failures come back as an error analysis, not an HTTP error.

    Args:
        request: Analysis request
        analyzer: Name analyzer (injected)

    Returns:
        Analysis response
    """
    analysis = await analyzer.analyze_request(request)
    return AnalysisResponse(analysis=analysis)


@router.post("/name-details", response_model=NameDetailsResponse)
async def name_details(
    request: NameDetailsRequest,
    analyzer: NameAnalyzer = Depends(get_name_analyzer),  # noqa: B008
) -> NameDetailsResponse:
    """
    Re-analyze favorite names, each under its own saved criteria.

    Names without a saved item are analyzed as Male with no theme or
    metaphysics criteria. Analyses run concurrently and come back in
    request order.

    Args:
        request: Names and their favorite items
        analyzer: Name analyzer (injected)

    Returns:
        One analysis per name
    """
    names = [name.strip() for name in request.names if name.strip()]
    if not names:
        raise ValidationError("Invalid names array provided")

    saved = request.criteria_by_name()
    logger.info("Fetching favorite name details", names=len(names), saved=len(saved))

    items = [saved.get(name) or FavoriteItem(name=name) for name in names]
    details = await asyncio.gather(
        *(
            analyzer.analyze(
                name,
                item.gender,
                item.meaning_theme,
                item.chinese_metaphysics,
                item.chinese_translation,
            )
            for name, item in zip(names, items)
        )
    )
    return NameDetailsResponse(details=list(details), count=len(details))


@router.post("/search", response_model=SearchResponse)
async def search_names(
    request: SearchRequest,
    service: NameSearchService = Depends(get_search_service),  # noqa: B008
) -> SearchResponse:
    """
    Search a candidate list for names matching the criteria.

    Args:
        request: Search request
        service: Search service (injected)

    Returns:
        Merged analyses with counters
    """
    result = await service.run_search(
        request.names,
        request.gender,
        request.meaning_theme,
        request.chinese_metaphysics,
        target_matches=request.target_matches,
        use_prefiltering=request.use_prefiltering,
        batch_size=request.batch_size,
        user_translations=request.chinese_translations,
    )
    return SearchResponse(
        analyses=result.analyses,
        total_processed=result.total_processed,
        total_matches=result.total_matches,
    )


@router.post("/search/stream")
async def stream_search(
    request: SearchRequest,
    service: NameSearchService = Depends(get_search_service),  # noqa: B008
) -> StreamingResponse:
    """
    Search with partial results streamed as server-sent events.

    Each event carries the analyses of one step; the last event has
    stage "complete" and every merged analysis.
    """
    # Reject bad input before the stream starts
    service.clean_names(request.names)
    return StreamingResponse(
        _search_events(service, request),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


async def _search_events(
    service: NameSearchService, request: SearchRequest
) -> AsyncIterator[str]:
    try:
        async for progress in service.stream_search(
            request.names,
            request.gender,
            request.meaning_theme,
            request.chinese_metaphysics,
            target_matches=request.target_matches,
            use_prefiltering=request.use_prefiltering,
            batch_size=request.batch_size,
            user_translations=request.chinese_translations,
        ):
            yield format_event(progress.to_event())
    except Exception as e:
        log_error(e, "search_stream")
        yield format_event({"error": "Search failed"})
