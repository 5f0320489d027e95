"""Test name search service."""

from unittest.mock import AsyncMock

import pytest

from namefinder.analysis.analyzer import NameAnalyzer
from namefinder.analysis.batch_analyzer import BatchAnalyzer
from namefinder.analysis.prefilter import NamePrefilter
from namefinder.analysis.scoring import normalize_analysis
from namefinder.exceptions import ValidationError
from namefinder.models.analysis import Gender
from namefinder.pipeline.deduplication import InFlightDeduplicator
from namefinder.services.search_service import NameSearchService, clamp
from tests.mocks.llm_mocks import (
    FailingOperationProvider,
    MockLLMProvider,
    analysis_handler,
    batch_handler,
    build_raw_analysis,
    requested_names,
)

CRITERIA = (Gender.FEMALE, "strength", "Wood element")


def _build_service(provider, cache):
    sleep = AsyncMock()
    service = NameSearchService(
        cache=cache,
        analyzer=NameAnalyzer(provider, cache, InFlightDeduplicator(), "half"),
        batch_analyzer=BatchAnalyzer(provider, cache, "half"),
        prefilter=NamePrefilter(provider, min_names=20, min_results=10, max_names=500),
        sleep=sleep,
        inter_batch_delay=1.0,
    )
    return service, sleep


def _batched_names(provider):
    return [
        name
        for request in provider.requests
        if request.operation == "batch_analysis"
        for name in requested_names(request)
    ]


async def _cache_analysis(cache, name, matches):
    analysis = normalize_analysis(build_raw_analysis(name, matches=matches), name, "half")
    await cache.set(name, *CRITERIA, analysis)


class TestClamp:
    """Test clamp helper."""

    def test_should_clamp_into_range(self):
        """Test lower and upper bounds."""
        assert clamp(0, 1, 50) == 1
        assert clamp(80, 1, 50) == 50
        assert clamp(7, 1, 50) == 7


class TestRunSearch:
    """Test NameSearchService.run_search."""

    @pytest.mark.asyncio
    async def test_should_stop_at_first_match_with_batch_size_one(self, analysis_cache):
        """Test target 1 is met by the first single-name chunk."""
        provider = MockLLMProvider(
            handlers={"batch_analysis": batch_handler(matching=["Amelia"])}
        )
        service, sleep = _build_service(provider, analysis_cache)

        result = await service.run_search(
            ["Amelia", "Liam", "Noah"], *CRITERIA, target_matches=1, batch_size=1
        )

        assert provider.get_call_count() == 1
        assert result.total_processed == 1
        assert result.total_matches == 1
        assert [a.name for a in result.analyses] == ["Amelia"]
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_should_meet_target_from_cache_without_calls(self, analysis_cache):
        """Test cached matches satisfy the target with zero provider calls."""
        await _cache_analysis(analysis_cache, "Amelia", True)
        await _cache_analysis(analysis_cache, "Olivia", True)
        provider = MockLLMProvider(handlers={"batch_analysis": batch_handler()})
        service, _ = _build_service(provider, analysis_cache)

        result = await service.run_search(
            ["Amelia", "Olivia", "Emma", "Ava"], *CRITERIA, target_matches=2
        )

        assert provider.get_call_count() == 0
        assert result.provider_calls == 0
        assert result.total_matches == 2
        assert {a.name for a in result.analyses} == {"Amelia", "Olivia"}

    @pytest.mark.asyncio
    async def test_should_analyze_only_uncached_names(self, analysis_cache):
        """Test cache hits are not sent to the provider."""
        await _cache_analysis(analysis_cache, "Amelia", False)
        provider = MockLLMProvider(handlers={"batch_analysis": batch_handler()})
        service, _ = _build_service(provider, analysis_cache)

        result = await service.run_search(["Amelia", "Emma", "Ava"], *CRITERIA)

        assert _batched_names(provider) == ["Emma", "Ava"]
        assert result.total_processed == 3

    @pytest.mark.asyncio
    async def test_should_keep_full_list_when_prefilter_too_aggressive(self, analysis_cache):
        """Test 100 names with fewer than 10 prefilter survivors are all analyzed."""
        names = [f"Name{i}" for i in range(100)]
        provider = MockLLMProvider(
            handlers={
                "prefilter": lambda request: "Name1, Name2, Name3",
                "batch_analysis": batch_handler(),
            }
        )
        service, sleep = _build_service(provider, analysis_cache)

        result = await service.run_search(
            names, *CRITERIA, target_matches=50, batch_size=10
        )

        assert provider.calls_for("prefilter") == 1
        assert provider.calls_for("batch_analysis") == 10
        assert sorted(_batched_names(provider)) == sorted(names)
        assert result.total_processed == 100
        assert sleep.await_count == 9

    @pytest.mark.asyncio
    async def test_should_analyze_prefilter_survivors(self, analysis_cache):
        """Test a useful prefilter result narrows the list."""
        names = [f"Name{i}" for i in range(30)]
        survivors = names[:10]
        provider = MockLLMProvider(
            handlers={
                "prefilter": lambda request: ", ".join(survivors),
                "batch_analysis": batch_handler(),
            }
        )
        service, _ = _build_service(provider, analysis_cache)

        result = await service.run_search(names, *CRITERIA, batch_size=5)

        assert _batched_names(provider) == survivors
        assert result.total_processed == 10

    @pytest.mark.asyncio
    async def test_should_skip_prefilter_when_disabled(self, analysis_cache):
        """Test use_prefiltering False."""
        names = [f"Name{i}" for i in range(30)]
        provider = MockLLMProvider(handlers={"batch_analysis": batch_handler()})
        service, _ = _build_service(provider, analysis_cache)

        await service.run_search(names, *CRITERIA, use_prefiltering=False, batch_size=10)

        assert provider.calls_for("prefilter") == 0
        assert provider.calls_for("batch_analysis") == 3

    @pytest.mark.asyncio
    async def test_should_restore_translated_names_after_prefilter(self, analysis_cache):
        """Test names with user translations are never filtered out."""
        names = [f"Name{i}" for i in range(30)]
        provider = MockLLMProvider(
            handlers={
                "prefilter": lambda request: ", ".join(names[:10]),
                "batch_analysis": batch_handler(),
            }
        )
        service, _ = _build_service(provider, analysis_cache)

        result = await service.run_search(
            names, *CRITERIA, batch_size=10, user_translations={"Name29": "名字"}
        )

        by_name = {a.name: a for a in result.analyses}
        assert by_name["Name29"].primary_translation == "名字"

    @pytest.mark.asyncio
    async def test_should_fall_back_to_single_analysis_when_chunk_fails(
        self, analysis_cache
    ):
        """Test a failed 5-name chunk still yields 5 analyses."""
        names = ["Amelia", "Olivia", "Emma", "Ava", "Mia"]
        provider = FailingOperationProvider(
            failing=["batch_analysis"],
            handlers={"analysis": analysis_handler(matching=["Emma"])},
        )
        service, _ = _build_service(provider, analysis_cache)

        result = await service.run_search(names, *CRITERIA, batch_size=5)

        assert [a.name for a in result.analyses] == names
        assert result.total_matches == 1
        assert provider.calls_for("analysis") == 5
        assert result.provider_calls == 6

    @pytest.mark.asyncio
    async def test_should_analyze_names_missing_from_chunk(self, analysis_cache):
        """Test names the batch response left out are analyzed individually."""
        provider = MockLLMProvider(
            handlers={
                "batch_analysis": batch_handler(omit=["Emma"]),
                "analysis": analysis_handler(),
            }
        )
        service, _ = _build_service(provider, analysis_cache)

        result = await service.run_search(["Amelia", "Emma"], *CRITERIA, batch_size=5)

        assert [a.name for a in result.analyses] == ["Amelia", "Emma"]
        assert provider.calls_for("analysis") == 1

    @pytest.mark.asyncio
    async def test_should_return_error_analyses_when_everything_fails(self, analysis_cache):
        """Test provider outage still yields one record per name."""
        provider = MockLLMProvider(should_fail=True)
        service, _ = _build_service(provider, analysis_cache)

        result = await service.run_search(["Amelia", "Emma"], *CRITERIA)

        assert result.total_processed == 2
        assert result.total_matches == 0
        assert all(a.origin == "Unknown (error occurred)" for a in result.analyses)

    @pytest.mark.asyncio
    async def test_should_pause_between_chunks(self, analysis_cache):
        """Test the fixed delay between chunk calls."""
        provider = MockLLMProvider(handlers={"batch_analysis": batch_handler()})
        service, sleep = _build_service(provider, analysis_cache)

        await service.run_search(["A1", "A2", "A3"], *CRITERIA, batch_size=1)

        assert sleep.await_count == 2
        sleep.assert_awaited_with(1.0)

    @pytest.mark.asyncio
    async def test_should_dedupe_and_strip_names(self, analysis_cache):
        """Test input cleaning."""
        provider = MockLLMProvider(handlers={"batch_analysis": batch_handler()})
        service, _ = _build_service(provider, analysis_cache)

        result = await service.run_search([" Liam ", "Liam", "", "Noah"], *CRITERIA)

        assert [a.name for a in result.analyses] == ["Liam", "Noah"]

    @pytest.mark.asyncio
    async def test_should_clamp_batch_size(self, analysis_cache):
        """Test batch size above the bound."""
        names = [f"N{i}" for i in range(15)]
        provider = MockLLMProvider(handlers={"batch_analysis": batch_handler()})
        service, _ = _build_service(provider, analysis_cache)

        await service.run_search(names, Gender.MALE, "", "", batch_size=99)

        assert provider.calls_for("batch_analysis") == 2

    @pytest.mark.asyncio
    async def test_should_reject_empty_name_list(self, analysis_cache, mock_provider):
        """Test empty input."""
        service, _ = _build_service(mock_provider, analysis_cache)

        with pytest.raises(ValidationError):
            await service.run_search(["", "  "], *CRITERIA)

    @pytest.mark.asyncio
    async def test_should_reject_unknown_gender(self, analysis_cache, mock_provider):
        """Test invalid gender."""
        service, _ = _build_service(mock_provider, analysis_cache)

        with pytest.raises(ValidationError):
            await service.run_search(["Liam"], "Other", "", "")


class TestStreamSearch:
    """Test NameSearchService.stream_search."""

    @pytest.mark.asyncio
    async def test_should_yield_cached_chunk_and_complete_events(self, analysis_cache):
        """Test event sequence."""
        await _cache_analysis(analysis_cache, "Amelia", False)
        provider = MockLLMProvider(handlers={"batch_analysis": batch_handler()})
        service, _ = _build_service(provider, analysis_cache)

        events = [
            progress
            async for progress in service.stream_search(
                ["Amelia", "Emma", "Ava"], *CRITERIA, batch_size=1
            )
        ]

        assert [e.stage for e in events] == ["cached", "chunk", "chunk", "complete"]
        assert [a.name for a in events[0].analyses] == ["Amelia"]
        assert events[0].remaining == 2
        assert events[1].remaining == 1
        assert events[-1].total_processed == 3

    @pytest.mark.asyncio
    async def test_should_serialize_progress_event(self, analysis_cache):
        """Test camelCase event payload."""
        provider = MockLLMProvider(handlers={"batch_analysis": batch_handler(["Emma"])})
        service, _ = _build_service(provider, analysis_cache)

        events = [p async for p in service.stream_search(["Emma"], *CRITERIA)]
        payload = events[-1].to_event()

        assert payload["stage"] == "complete"
        assert payload["totalProcessed"] == 1
        assert payload["totalMatches"] == 1
        assert payload["analyses"][0]["overallMatch"] is True
