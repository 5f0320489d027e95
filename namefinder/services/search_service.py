"""
Name search service.

Orchestrates cache partitioning, theme prefiltering, chunked batch
analysis with per-name fallback, and early exit once enough names match.

Sandi Metz Principles:
- Single Responsibility: Search orchestration
- Small methods: Each step isolated
- Dependency Injection: Cache, analyzers, prefilter and sleep injected
"""

import asyncio
from dataclasses import dataclass, field
from typing import AsyncIterator, Awaitable, Callable, Dict, List, Optional, Tuple

from namefinder.analysis.analyzer import NameAnalyzer
from namefinder.analysis.batch_analyzer import BatchAnalyzer
from namefinder.analysis.prefilter import NamePrefilter
from namefinder.analysis.scoring import apply_user_translation
from namefinder.cache.analysis_cache import AnalysisCache
from namefinder.config import config
from namefinder.exceptions import ValidationError
from namefinder.models.analysis import Gender, NameMatchAnalysis
from namefinder.utils.logger import get_logger, log_search_summary, truncate

logger = get_logger(__name__)


@dataclass
class SearchProgress:
    """One step of a running search."""

    stage: str
    analyses: List[NameMatchAnalysis] = field(default_factory=list)
    total_processed: int = 0
    total_matches: int = 0
    provider_calls: int = 0
    remaining: int = 0

    def to_event(self) -> dict:
        """Serialize for a server-sent event."""
        return {
            "stage": self.stage,
            "analyses": [analysis.to_json_dict() for analysis in self.analyses],
            "totalProcessed": self.total_processed,
            "totalMatches": self.total_matches,
            "remaining": self.remaining,
        }


@dataclass
class SearchResult:
    """Final search outcome."""

    analyses: List[NameMatchAnalysis]
    total_processed: int
    total_matches: int
    provider_calls: int = 0


@dataclass
class _SearchState:
    merged: Dict[str, NameMatchAnalysis] = field(default_factory=dict)
    provider_calls: int = 0

    @property
    def matches(self) -> int:
        return sum(1 for analysis in self.merged.values() if analysis.overall_match)

    def add(self, pairs: List[Tuple[str, NameMatchAnalysis]]) -> None:
        # Same name again replaces the earlier record in place
        for name, analysis in pairs:
            self.merged[name] = analysis

    def progress(self, stage: str, analyses: List[NameMatchAnalysis], remaining: int = 0):
        return SearchProgress(
            stage=stage,
            analyses=analyses,
            total_processed=len(self.merged),
            total_matches=self.matches,
            provider_calls=self.provider_calls,
            remaining=remaining,
        )


def clamp(value: int, lower: int, upper: int) -> int:
    """Clamp an integer into [lower, upper]."""
    return max(lower, min(upper, value))


class NameSearchService:
    """
    Finds names matching the criteria with as few provider calls as possible.

    Chunks run in sequence with a fixed pause between them; names within
    a fallback chunk are analyzed in parallel. Only invalid input raises.
    """

    def __init__(
        self,
        cache: AnalysisCache,
        analyzer: NameAnalyzer,
        batch_analyzer: BatchAnalyzer,
        prefilter: NamePrefilter,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        inter_batch_delay: Optional[float] = None,
    ):
        """
        Initialize service.

        Args:
            cache: Analysis cache
            analyzer: Single-name analyzer (fallback path)
            batch_analyzer: Chunk analyzer
            prefilter: Theme prefilter
            sleep: Coroutine used for the pause between chunks
            inter_batch_delay: Pause in seconds (defaults to configuration)
        """
        self._cache = cache
        self._analyzer = analyzer
        self._batch = batch_analyzer
        self._prefilter = prefilter
        self._sleep = sleep
        self._delay = (
            config.inter_batch_delay_seconds if inter_batch_delay is None else inter_batch_delay
        )

    async def run_search(
        self,
        names: List[str],
        gender: Gender,
        meaning_theme: str,
        chinese_metaphysics: str,
        target_matches: Optional[int] = None,
        use_prefiltering: bool = True,
        batch_size: Optional[int] = None,
        user_translations: Optional[Dict[str, str]] = None,
    ) -> SearchResult:
        """
        Run a search to completion.

        Args:
            names: Candidate names, in priority order
            gender: Gender
            meaning_theme: Desired meaning/theme
            chinese_metaphysics: Desired metaphysics alignment
            target_matches: Stop once this many names match (clamped to [1, 50])
            use_prefiltering: Narrow long lists by theme first
            batch_size: Names per provider call (clamped to [1, 10])
            user_translations: User translations keyed by name

        Returns:
            Merged analyses and counters

        Raises:
            ValidationError: If the name list is empty or gender is unknown
        """
        final = SearchProgress(stage="complete")
        async for progress in self.stream_search(
            names,
            gender,
            meaning_theme,
            chinese_metaphysics,
            target_matches=target_matches,
            use_prefiltering=use_prefiltering,
            batch_size=batch_size,
            user_translations=user_translations,
        ):
            final = progress

        return SearchResult(
            analyses=final.analyses,
            total_processed=final.total_processed,
            total_matches=final.total_matches,
            provider_calls=final.provider_calls,
        )

    async def stream_search(
        self,
        names: List[str],
        gender: Gender,
        meaning_theme: str,
        chinese_metaphysics: str,
        target_matches: Optional[int] = None,
        use_prefiltering: bool = True,
        batch_size: Optional[int] = None,
        user_translations: Optional[Dict[str, str]] = None,
    ) -> AsyncIterator[SearchProgress]:
        """
        Run a search, yielding progress after each step.

        Yields a "cached" event, one "chunk" event per analyzed chunk and
        a final "complete" event carrying every merged analysis.

        Raises:
            ValidationError: If the name list is empty or gender is unknown
        """
        candidates = self.clean_names(names)
        gender = self._validate_gender(gender)
        target = clamp(
            config.default_target_matches if target_matches is None else target_matches,
            config.min_target_matches,
            config.max_target_matches,
        )
        size = clamp(
            config.default_batch_size if batch_size is None else batch_size,
            1,
            config.max_batch_size,
        )
        translations = self._clean_translations(user_translations)
        criteria = (gender, meaning_theme, chinese_metaphysics)
        state = _SearchState()

        logger.info(
            "Search started",
            candidates=len(candidates),
            gender=gender.value,
            theme=truncate(meaning_theme),
            target=target,
            batch_size=size,
        )

        cached, to_process = await self._partition(candidates, criteria, translations)
        state.add(cached)
        yield state.progress("cached", [a for _, a in cached], remaining=len(to_process))

        if state.matches < target and to_process:
            if use_prefiltering:
                to_process = await self._apply_prefilter(
                    to_process, meaning_theme, translations, state
                )

            chunks = [to_process[i:i + size] for i in range(0, len(to_process), size)]
            for index, chunk in enumerate(chunks):
                if state.matches >= target:
                    logger.info("Target reached, stopping early", matches=state.matches)
                    break

                pairs = await self._analyze_chunk(chunk, criteria, translations, state)
                state.add(pairs)
                remaining = sum(len(c) for c in chunks[index + 1:])
                yield state.progress("chunk", [a for _, a in pairs], remaining=remaining)

                if index < len(chunks) - 1 and state.matches < target:
                    await self._sleep(self._delay)

        log_search_summary(len(state.merged), state.matches, state.provider_calls)
        yield state.progress("complete", list(state.merged.values()))

    @staticmethod
    def clean_names(names: List[str]) -> List[str]:
        """
        Strip names, drop blanks and duplicates (first occurrence wins).

        Raises:
            ValidationError: If no name is left
        """
        if not isinstance(names, list):
            raise ValidationError("Names must be a list")
        stripped = (name.strip() for name in names if isinstance(name, str))
        cleaned = list(dict.fromkeys(name for name in stripped if name))
        if not cleaned:
            raise ValidationError("Name list must not be empty")
        return cleaned

    @staticmethod
    def _validate_gender(gender: Gender) -> Gender:
        """
        Raises:
            ValidationError: If gender is not Male or Female
        """
        try:
            return Gender(gender)
        except ValueError as e:
            raise ValidationError(f"Invalid gender: {gender}") from e

    @staticmethod
    def _clean_translations(translations: Optional[Dict[str, str]]) -> Dict[str, str]:
        return {
            name.strip(): value.strip()
            for name, value in (translations or {}).items()
            if isinstance(value, str) and value.strip()
        }

    async def _partition(
        self,
        names: List[str],
        criteria: Tuple[Gender, str, str],
        translations: Dict[str, str],
    ) -> Tuple[List[Tuple[str, NameMatchAnalysis]], List[str]]:
        """Split names into cache hits and names still to analyze."""
        cached: List[Tuple[str, NameMatchAnalysis]] = []
        to_process: List[str] = []
        for name in names:
            analysis = await self._cache.get(name, *criteria)
            if analysis is None:
                to_process.append(name)
            else:
                cached.append((name, apply_user_translation(analysis, translations.get(name))))

        logger.info("Cache partitioned", cached=len(cached), to_process=len(to_process))
        return (cached, to_process)

    async def _apply_prefilter(
        self,
        names: List[str],
        meaning_theme: str,
        translations: Dict[str, str],
        state: _SearchState,
    ) -> List[str]:
        """Prefilter names, keeping every name the user translated."""
        if not self._prefilter.should_filter(names, meaning_theme):
            return names

        state.provider_calls += 1
        filtered = await self._prefilter.filter(names, meaning_theme)
        kept = set(filtered)
        restored = [name for name in names if name in translations and name not in kept]
        if restored:
            logger.info("Restoring user-translated names", count=len(restored))
        return filtered + restored

    async def _analyze_chunk(
        self,
        chunk: List[str],
        criteria: Tuple[Gender, str, str],
        translations: Dict[str, str],
        state: _SearchState,
    ) -> List[Tuple[str, NameMatchAnalysis]]:
        """
        Analyze a chunk, degrading to per-name analysis.

        Names the batch call failed on or left out are analyzed
        individually and in parallel.
        """
        chunk_translations = {n: translations[n] for n in chunk if n in translations}
        state.provider_calls += 1
        try:
            analyses, missing = await self._batch.analyze_chunk(
                chunk, *criteria, chunk_translations
            )
        except Exception as e:
            logger.warning(
                "Chunk analysis failed, analyzing names individually",
                names=chunk,
                error=str(e),
            )
            analyses, missing = [], list(chunk)

        results = {analysis.name: analysis for analysis in analyses}
        if missing:
            state.provider_calls += len(missing)
            singles = await asyncio.gather(
                *(
                    self._analyzer.analyze(name, *criteria, translations.get(name))
                    for name in missing
                )
            )
            results.update(zip(missing, singles))

        return [(name, results[name]) for name in chunk if name in results]

