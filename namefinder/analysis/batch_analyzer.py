"""
Chunk analyzer: several names in one provider call.

Sandi Metz Principles:
- Single Responsibility: Analyze one chunk of names
- Dependency Injection: Provider and cache injected
- Fail loudly: Whole-chunk failures raise so the caller can degrade
"""

from typing import Any, Dict, List, Optional, Tuple

from namefinder.analysis.prompts import build_batch_request
from namefinder.analysis.scoring import (
    apply_user_translation,
    normalize_analysis,
    recompute_overall_match,
)
from namefinder.cache.analysis_cache import AnalysisCache
from namefinder.exceptions import ResponseParseError
from namefinder.llm.provider import BaseLLMProvider
from namefinder.llm.response_parser import LLMResponseParser
from namefinder.models.analysis import Gender, NameMatchAnalysis
from namefinder.models.llm import ParseFailure
from namefinder.utils.logger import get_logger

logger = get_logger(__name__)


class BatchAnalyzer:
    """
    Analyzes a chunk of names with a single provider call.

    Entries are matched back to the requested names case-insensitively;
    entries for names that were not requested are ignored.
    """

    def __init__(
        self,
        provider: BaseLLMProvider,
        cache: AnalysisCache,
        overall_match_rule: Optional[str] = None,
    ):
        """
        Initialize batch analyzer.

        Args:
            provider: LLM provider
            cache: Analysis cache receiving every result
            overall_match_rule: Overall-match rule override
        """
        self._provider = provider
        self._cache = cache
        self._rule = overall_match_rule

    async def analyze_chunk(
        self,
        names: List[str],
        gender: Gender,
        meaning_theme: str,
        chinese_metaphysics: str,
        user_translations: Optional[Dict[str, str]] = None,
    ) -> Tuple[List[NameMatchAnalysis], List[str]]:
        """
        Analyze a chunk of names.

        Args:
            names: Names in the chunk
            gender: Gender
            meaning_theme: Desired meaning/theme
            chinese_metaphysics: Desired metaphysics alignment
            user_translations: User translations keyed by name

        Returns:
            Tuple of (analyses in chunk order, names the response left out)

        Raises:
            LLMProviderError: If the provider call fails
            ResponseParseError: If the response holds no analysis list
        """
        if not names:
            return ([], [])

        translations = user_translations or {}
        request = build_batch_request(
            names,
            getattr(gender, "value", gender),
            meaning_theme,
            chinese_metaphysics,
            translations,
        )
        response = await self._provider.complete(request)
        entries = self._parse_entries(response.content)

        by_name = self._match_entries(entries, names)
        analyses = []
        for name in names:
            if name not in by_name:
                continue
            analysis = self._finalize(by_name[name], name, translations.get(name))
            await self._cache.set(name, gender, meaning_theme, chinese_metaphysics, analysis)
            analyses.append(analysis)

        missing = [name for name in names if name not in by_name]
        logger.info(
            "Chunk analyzed",
            requested=len(names),
            returned=len(analyses),
            missing=len(missing),
        )
        return (analyses, missing)

    @staticmethod
    def _parse_entries(content: str) -> List[Dict[str, Any]]:
        """
        Decode the analysis list from provider content.

        Raises:
            ResponseParseError: If content is not JSON or holds no list
        """
        outcome = LLMResponseParser.parse_json_content(content)
        if isinstance(outcome, ParseFailure):
            raise ResponseParseError(outcome.message)

        data = outcome.data
        if isinstance(data, dict) and "name" in data:
            data = [data]
        entries = LLMResponseParser.extract_list(data, "results", "analyses")
        if not entries:
            raise ResponseParseError("Response holds no analysis list")
        return [entry for entry in entries if isinstance(entry, dict)]

    @staticmethod
    def _match_entries(
        entries: List[Dict[str, Any]], names: List[str]
    ) -> Dict[str, Dict[str, Any]]:
        """Map requested names to their entries (first entry wins)."""
        requested = {name.lower(): name for name in names}
        matched: Dict[str, Dict[str, Any]] = {}
        for entry in entries:
            name = requested.get(str(entry.get("name", "")).strip().lower())
            if name is not None and name not in matched:
                matched[name] = entry
        return matched

    def _finalize(
        self, entry: Dict[str, Any], name: str, user_translation: Optional[str]
    ) -> NameMatchAnalysis:
        analysis = normalize_analysis(entry, name, self._rule)
        return recompute_overall_match(
            apply_user_translation(analysis, user_translation), self._rule
        )
