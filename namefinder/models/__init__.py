"""
Models package for NameFinder.

Exports all model classes for easy imports throughout the application.
"""

# Analysis models
from namefinder.models.analysis import (
    CategoryAnalysis,
    ChineseTranslation,
    Gender,
    NameMatchAnalysis,
)

# Cache models
from namefinder.models.cache_entry import CacheEntry, CacheStats

# Candidate models
from namefinder.models.candidate import BabyNameCandidate, NamePopularity

# LLM models
from namefinder.models.llm import (
    CompletionRequest,
    LLMResponse,
    ParsedContent,
    ParseFailure,
    ParseOutcome,
)

# Request models
from namefinder.models.request import AnalysisRequest, SearchRequest

# Response models
from namefinder.models.response import (
    AnalysisResponse,
    CandidatesResponse,
    HealthResponse,
    SearchResponse,
)

__all__ = [
    # Analysis
    "CategoryAnalysis",
    "ChineseTranslation",
    "Gender",
    "NameMatchAnalysis",
    # Cache
    "CacheEntry",
    "CacheStats",
    # Candidates
    "BabyNameCandidate",
    "NamePopularity",
    # LLM
    "CompletionRequest",
    "LLMResponse",
    "ParsedContent",
    "ParseFailure",
    "ParseOutcome",
    # Requests
    "AnalysisRequest",
    "SearchRequest",
    # Responses
    "AnalysisResponse",
    "CandidatesResponse",
    "HealthResponse",
    "SearchResponse",
]
