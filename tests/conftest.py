"""
Pytest configuration and fixtures.

Provides common fixtures for testing.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from namefinder.analysis.scoring import normalize_analysis
from namefinder.cache.analysis_cache import AnalysisCache
from namefinder.config import AppConfig
from namefinder.models.analysis import NameMatchAnalysis
from namefinder.pipeline.deduplication import InFlightDeduplicator
from tests.mocks.cache_mocks import FakeClock, InMemoryBlobStore
from tests.mocks.llm_mocks import MockLLMProvider, build_raw_analysis


@pytest.fixture
def test_config() -> AppConfig:
    """
    Create test configuration.

    Returns:
        Test configuration instance
    """
    return AppConfig(
        app_env="development",
        redis_host="localhost",
        redis_port=6379,
        openai_api_key="test-key",
        anthropic_api_key="test-key",
    )


@pytest.fixture
def mock_redis_pool():
    """
    Mock Redis connection pool.

    Returns:
        Mocked Redis pool
    """
    pool = MagicMock()
    pool.disconnect = AsyncMock()
    return pool


@pytest.fixture
def fake_clock() -> FakeClock:
    """Manually advanced clock."""
    return FakeClock()


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    """In-memory persistence store."""
    return InMemoryBlobStore()


@pytest.fixture
def analysis_cache(blob_store, fake_clock) -> AnalysisCache:
    """
    Analysis cache over the in-memory store and fake clock.

    Returns:
        Cache with a 30-day expiry window
    """
    return AnalysisCache(
        store=blob_store, expiry_days=30, namespace="testCache", clock=fake_clock
    )


@pytest.fixture
def deduplicator() -> InFlightDeduplicator:
    """Fresh in-flight deduplicator."""
    return InFlightDeduplicator()


@pytest.fixture
def mock_provider() -> MockLLMProvider:
    """Scripted LLM provider."""
    return MockLLMProvider()


@pytest.fixture
def sample_raw_analysis() -> dict:
    """
    Provider-shaped analysis JSON.

    Returns:
        Raw analysis for "Amelia" with every category matching
    """
    return build_raw_analysis("Amelia", matches=True)


@pytest.fixture
def sample_analysis(sample_raw_analysis) -> NameMatchAnalysis:
    """
    Normalized analysis.

    Returns:
        Matching analysis for "Amelia"
    """
    return normalize_analysis(sample_raw_analysis, "Amelia", "half")


@pytest.fixture
def non_matching_analysis() -> NameMatchAnalysis:
    """Normalized non-matching analysis for "Liam"."""
    return normalize_analysis(build_raw_analysis("Liam", matches=False), "Liam", "half")
