"""
API response models.

Sandi Metz Principles:
- Small classes with clear purpose
- Immutable response data
- Clear naming conventions
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from namefinder.models.analysis import CamelModel, NameMatchAnalysis
from namefinder.models.cache_entry import CacheStats
from namefinder.models.candidate import BabyNameCandidate, NamePopularity


class AnalysisResponse(BaseModel):
    """Single-name analysis response."""

    analysis: NameMatchAnalysis


class SearchResponse(CamelModel):
    """Batch search response."""

    analyses: List[NameMatchAnalysis] = Field(default_factory=list)
    total_processed: int = Field(..., ge=0, description="Names analyzed")
    total_matches: int = Field(..., ge=0, description="Names with overallMatch")


class YearRange(BaseModel):
    """Inclusive year range."""

    start: int
    end: int


class CandidatesResponse(CamelModel):
    """Paginated popularity candidates."""

    names: List[BabyNameCandidate]
    total_available: int = Field(..., ge=0)
    offset: int = Field(..., ge=0)
    limit: int = Field(..., ge=0)
    year_range: YearRange


class PopCultureResponse(CamelModel):
    """Paginated pop-culture names."""

    success: bool = True
    names: List[str]
    count: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    has_more: bool


class PopularityResponse(BaseModel):
    """Popularity records for one name."""

    data: List[NamePopularity]


class NameDetailsResponse(BaseModel):
    """Analyses of favorite names."""

    details: List[NameMatchAnalysis]
    count: int = Field(..., ge=0)


class AdminStatsResponse(CacheStats):
    """Cache statistics with in-flight deduplication counters."""

    in_flight: int = Field(0, ge=0, alias="inFlight")
    deduplicated_requests: int = Field(0, ge=0, alias="deduplicatedRequests")
    abandoned_requests: int = Field(0, ge=0, alias="abandonedRequests")
    dedup_rate: float = Field(0.0, ge=0, le=1, alias="dedupRate")


class ClearCacheResponse(BaseModel):
    """Cache clearing result."""

    success: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"] = Field(..., description="Service status")
    environment: str = Field(..., description="Environment name")
    version: str = Field(..., description="Application version")


class ComponentHealth(BaseModel):
    """Health status of a component."""

    status: Literal["healthy", "unhealthy", "degraded"] = Field(
        ..., description="Component status"
    )
    latency_ms: Optional[float] = Field(None, description="Check latency in ms")
    message: Optional[str] = Field(None, description="Status message")


class DetailedHealthResponse(BaseModel):
    """Detailed health check response."""

    status: Literal["healthy", "unhealthy", "degraded"] = Field(
        ..., description="Overall status"
    )
    environment: str = Field(..., description="Environment name")
    version: str = Field(..., description="Application version")
    components: Dict[str, ComponentHealth] = Field(
        default_factory=dict, description="Component health status"
    )
