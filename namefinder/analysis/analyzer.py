"""
Single-name analyzer.

Sandi Metz Principles:
- Single Responsibility: Produce one name's analysis
- Dependency Injection: Provider, cache and deduplicator injected
- Small methods: Cache path, compute path and fallback kept apart
"""

from typing import Optional

from namefinder.analysis.prompts import build_analysis_request
from namefinder.analysis.scoring import (
    apply_user_translation,
    create_error_analysis,
    normalize_analysis,
    recompute_overall_match,
)
from namefinder.cache.analysis_cache import AnalysisCache
from namefinder.exceptions import LLMProviderError, ResponseParseError
from namefinder.llm.provider import BaseLLMProvider
from namefinder.llm.response_parser import LLMResponseParser
from namefinder.models.analysis import Gender, NameMatchAnalysis
from namefinder.models.llm import ParseFailure
from namefinder.models.request import AnalysisRequest
from namefinder.pipeline.deduplication import InFlightDeduplicator
from namefinder.utils.logger import get_logger, log_error, truncate

logger = get_logger(__name__)


class NameAnalyzer:
    """
    Analyzes one name against the user's criteria.

    Serves from the cache when possible; otherwise makes exactly one
    provider call, shared by concurrent callers asking for the same key.
    Provider and parse failures become an error analysis.
    """

    def __init__(
        self,
        provider: BaseLLMProvider,
        cache: AnalysisCache,
        deduplicator: Optional[InFlightDeduplicator] = None,
        overall_match_rule: Optional[str] = None,
    ):
        """
        Initialize analyzer.

        Args:
            provider: LLM provider for analysis calls
            cache: Analysis cache
            deduplicator: In-flight deduplicator (creates one if None)
            overall_match_rule: Overall-match rule override
        """
        self._provider = provider
        self._cache = cache
        self._dedup = deduplicator or InFlightDeduplicator()
        self._rule = overall_match_rule
        self._analysis_count = 0

    @property
    def analysis_count(self) -> int:
        """Number of fresh provider computations."""
        return self._analysis_count

    async def analyze(
        self,
        name: str,
        gender: Gender,
        meaning_theme: str,
        chinese_metaphysics: str,
        user_translation: Optional[str] = None,
    ) -> NameMatchAnalysis:
        """
        Analyze a name.

        Args:
            name: Candidate name
            gender: Gender
            meaning_theme: Desired meaning/theme
            chinese_metaphysics: Desired metaphysics alignment
            user_translation: User translation to put first

        Returns:
            Analysis (an error analysis if the provider call failed)
        """
        cached = await self._cache.get(name, gender, meaning_theme, chinese_metaphysics)
        if cached is not None:
            return apply_user_translation(cached, user_translation)

        logger.info(
            "Analyzing name",
            name=name,
            gender=getattr(gender, "value", gender),
            theme=truncate(meaning_theme),
            criteria=truncate(chinese_metaphysics),
        )
        key = self._cache.make_key(name, gender, meaning_theme, chinese_metaphysics)

        try:
            analysis = await self._dedup.run(
                key,
                lambda: self._compute(
                    name, gender, meaning_theme, chinese_metaphysics, user_translation
                ),
            )
        except (LLMProviderError, ResponseParseError) as e:
            logger.error("Name analysis failed", name=name, error=str(e))
            return create_error_analysis(
                name, f"Error analyzing name: {e}", user_translation
            )
        except Exception as e:
            log_error(e, "name_analysis", name=name)
            return create_error_analysis(
                name, f"Unexpected error analyzing name: {e}", user_translation
            )

        return apply_user_translation(analysis, user_translation)

    async def analyze_request(self, request: AnalysisRequest) -> NameMatchAnalysis:
        """Analyze the name described by a request model."""
        return await self.analyze(
            request.name,
            request.gender,
            request.meaning_theme,
            request.chinese_metaphysics,
            request.chinese_translation,
        )

    async def _compute(
        self,
        name: str,
        gender: Gender,
        meaning_theme: str,
        chinese_metaphysics: str,
        user_translation: Optional[str],
    ) -> NameMatchAnalysis:
        """
        Run one provider call and cache the normalized result.

        Raises:
            LLMProviderError: If the provider call fails
            ResponseParseError: If the content is not a JSON object
        """
        self._analysis_count += 1
        request = build_analysis_request(
            name,
            getattr(gender, "value", gender),
            meaning_theme,
            chinese_metaphysics,
            user_translation,
        )
        response = await self._provider.complete(request)

        outcome = LLMResponseParser.parse_json_content(response.content)
        if isinstance(outcome, ParseFailure):
            raise ResponseParseError(outcome.message)
        if not isinstance(outcome.data, dict):
            raise ResponseParseError("Expected a JSON object")

        analysis = normalize_analysis(outcome.data, name, self._rule)
        analysis = recompute_overall_match(
            apply_user_translation(analysis, user_translation), self._rule
        )
        await self._cache.set(name, gender, meaning_theme, chinese_metaphysics, analysis)
        return analysis
