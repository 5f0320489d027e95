"""
Candidate name endpoints.

Sandi Metz Principles:
- Single Responsibility: HTTP access to candidate sources
- Small functions: Minimal logic in endpoints
- Dependency Injection: Sources injected
"""

import asyncio
import json
from typing import AsyncIterator, List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from namefinder.api.deps import get_pop_culture_source, get_popularity_reader
from namefinder.api.streaming import SSE_HEADERS, format_event
from namefinder.config import config
from namefinder.exceptions import ValidationError
from namefinder.models.analysis import Gender
from namefinder.models.candidate import BabyNameCandidate
from namefinder.models.response import (
    CandidatesResponse,
    PopCultureResponse,
    PopularityResponse,
    YearRange,
)
from namefinder.sources.pop_culture import PopCultureSource
from namefinder.sources.popularity import PopularityReader
from namefinder.utils.logger import get_logger, log_error

router = APIRouter()
logger = get_logger(__name__)


@router.get("/names", response_model=CandidatesResponse)
async def list_names(
    gender: Gender,
    limit: int = Query(100, ge=1, le=5000),
    offset: int = Query(0, ge=0),
    start_year: Optional[int] = Query(None, alias="startYear"),
    end_year: Optional[int] = Query(None, alias="endYear"),
    reader: PopularityReader = Depends(get_popularity_reader),  # noqa: B008
) -> CandidatesResponse:
    """
    Popular names over a year range, paginated.

    Args:
        gender: Gender
        limit: Page size
        offset: Page start
        start_year: First year
        end_year: Last year
        reader: Popularity reader (injected)

    Returns:
        Page of ranked candidates
    """
    start, end = reader.clamp_range(start_year, end_year)
    candidates = await asyncio.to_thread(reader.get_candidates, gender, start, end)

    return CandidatesResponse(
        names=candidates[offset:offset + limit],
        total_available=len(candidates),
        offset=offset,
        limit=limit,
        year_range=YearRange(start=start, end=end),
    )


@router.get("/names/stream")
async def stream_names(
    gender: Gender,
    limit: int = Query(100, ge=1, le=5000),
    start_year: Optional[int] = Query(None, alias="startYear"),
    end_year: Optional[int] = Query(None, alias="endYear"),
    reader: PopularityReader = Depends(get_popularity_reader),  # noqa: B008
) -> StreamingResponse:
    """
    Popular names streamed in small batches.

    Ends with a ``{"complete": true}`` event.
    """
    start, end = reader.clamp_range(start_year, end_year)
    return StreamingResponse(
        _name_events(reader, gender, start, end, limit),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


async def _name_events(
    reader: PopularityReader, gender: Gender, start: int, end: int, limit: int
) -> AsyncIterator[str]:
    try:
        candidates = await asyncio.to_thread(reader.get_candidates, gender, start, end, limit)
        size = config.stream_chunk_size
        for index in range(0, len(candidates), size):
            batch: List[BabyNameCandidate] = candidates[index:index + size]
            yield format_event([c.model_dump(mode="json") for c in batch])
            await asyncio.sleep(config.stream_delay_seconds)
        yield format_event({"complete": True})
    except Exception as e:
        log_error(e, "name_stream")
        yield format_event({"error": "Failed to stream names"})


@router.get("/names/pop-culture", response_model=PopCultureResponse)
async def pop_culture_names(
    gender: Gender,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    exclude: Optional[str] = Query(None, description="JSON array of names to leave out"),
    source: PopCultureSource = Depends(get_pop_culture_source),  # noqa: B008
) -> PopCultureResponse:
    """
    Names popularized by movies, series and books, paginated.

    Args:
        gender: Gender
        skip: Names to skip
        limit: Page size
        exclude: JSON array of names to leave out
        source: Pop-culture source (injected)

    Returns:
        Page of names
    """
    excluded = set(_parse_exclude(exclude))
    names = [name for name in await source.get_names(gender) if name not in excluded]
    page = names[skip:skip + limit]

    return PopCultureResponse(
        names=page,
        count=len(page),
        total=len(names),
        has_more=skip + limit < len(names),
    )


def _parse_exclude(exclude: Optional[str]) -> List[str]:
    """Decode the exclude list; unreadable input excludes nothing."""
    if not exclude:
        return []
    try:
        names = json.loads(exclude)
    except json.JSONDecodeError:
        logger.warning("Ignoring unreadable exclude parameter")
        return []
    return [name for name in names if isinstance(name, str)] if isinstance(names, list) else []


@router.get("/names/{name}/popularity", response_model=PopularityResponse)
async def name_popularity(
    name: str,
    gender: Optional[Gender] = None,
    year: Optional[int] = None,
    reader: PopularityReader = Depends(get_popularity_reader),  # noqa: B008
) -> PopularityResponse:
    """
    Most recent ranking of a name.

    Without a gender both are tried and only ranked records are returned.

    Args:
        name: Name to look up
        gender: Gender
        year: Year to search back from
        reader: Popularity reader (injected)

    Returns:
        Popularity records
    """
    if not name.strip():
        raise ValidationError("Name is required")

    if gender is not None:
        record = await asyncio.to_thread(reader.find_popularity, name, gender, year)
        return PopularityResponse(data=[record])

    records = [
        await asyncio.to_thread(reader.find_popularity, name, candidate_gender, year)
        for candidate_gender in Gender
    ]
    return PopularityResponse(data=[record for record in records if record.rank is not None])
