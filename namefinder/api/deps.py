"""
API dependency injection.

Sandi Metz Principles:
- Single Responsibility: Dependency creation and injection
- Dependency Inversion: Create dependencies from abstractions
"""

from fastapi import Depends, Request

from namefinder.analysis.analyzer import NameAnalyzer
from namefinder.analysis.batch_analyzer import BatchAnalyzer
from namefinder.analysis.prefilter import NamePrefilter
from namefinder.cache.analysis_cache import AnalysisCache
from namefinder.llm.provider import BaseLLMProvider
from namefinder.pipeline.deduplication import InFlightDeduplicator
from namefinder.services.search_service import NameSearchService
from namefinder.sources.pop_culture import PopCultureSource
from namefinder.sources.popularity import PopularityReader


def get_app_state(request: Request):
    """
    Get application state.

    Args:
        request: FastAPI request

    Returns:
        ApplicationState created by the lifespan handler
    """
    return request.app.state.app_state


def get_analysis_cache(request: Request) -> AnalysisCache:
    """
    Get the process-wide analysis cache.

    Args:
        request: FastAPI request

    Returns:
        Analysis cache
    """
    return get_app_state(request).cache


def get_llm_provider(request: Request) -> BaseLLMProvider:
    """
    Get the configured LLM provider.

    Raises:
        ConfigurationError: If the provider is not configured
    """
    return get_app_state(request).get_provider()


def get_popularity_reader(request: Request) -> PopularityReader:
    """Get the popularity data reader."""
    return get_app_state(request).popularity_reader


def get_name_analyzer(
    request: Request,
    cache: AnalysisCache = Depends(get_analysis_cache),  # noqa: B008
    provider: BaseLLMProvider = Depends(get_llm_provider),  # noqa: B008
) -> NameAnalyzer:
    """
    Get single-name analyzer.

    Analyzers share the application's in-flight deduplicator.
    """
    return NameAnalyzer(
        provider=provider,
        cache=cache,
        deduplicator=get_app_state(request).deduplicator,
    )


def get_search_service(
    cache: AnalysisCache = Depends(get_analysis_cache),  # noqa: B008
    provider: BaseLLMProvider = Depends(get_llm_provider),  # noqa: B008
    analyzer: NameAnalyzer = Depends(get_name_analyzer),  # noqa: B008
) -> NameSearchService:
    """
    Get search service with dependencies.

    Args:
        cache: Analysis cache (injected)
        provider: LLM provider (injected)
        analyzer: Single-name analyzer (injected)

    Returns:
        Search service instance
    """
    return NameSearchService(
        cache=cache,
        analyzer=analyzer,
        batch_analyzer=BatchAnalyzer(provider, cache),
        prefilter=NamePrefilter(provider),
    )


def get_pop_culture_source(
    provider: BaseLLMProvider = Depends(get_llm_provider),  # noqa: B008
) -> PopCultureSource:
    """Get pop-culture name source."""
    return PopCultureSource(provider)


def get_deduplicator(request: Request) -> InFlightDeduplicator:
    """Get the application's in-flight deduplicator."""
    return get_app_state(request).deduplicator
