"""
Theme prefilter: one cheap bulk call narrowing a long candidate list.

Sandi Metz Principles:
- Single Responsibility: Narrow candidates by theme
- Dependency Injection: Provider injected
- Graceful degradation: Any doubt returns the input list
"""

from typing import List, Optional

from namefinder.analysis.prompts import build_prefilter_request
from namefinder.config import config
from namefinder.exceptions import LLMProviderError
from namefinder.llm.provider import BaseLLMProvider
from namefinder.llm.response_parser import LLMResponseParser
from namefinder.utils.logger import get_logger, truncate

logger = get_logger(__name__)


class NamePrefilter:
    """
    Keeps the candidates whose meaning plausibly relates to a theme.

    Returned names are intersected with the candidates, so names the
    provider invents are ignored. Results below the floor are discarded.
    """

    def __init__(
        self,
        provider: BaseLLMProvider,
        min_names: Optional[int] = None,
        min_results: Optional[int] = None,
        max_names: Optional[int] = None,
    ):
        """
        Initialize prefilter.

        Args:
            provider: LLM provider
            min_names: Only filter lists longer than this
            min_results: Discard results with fewer survivors than this
            max_names: Names listed in the single call
        """
        self._provider = provider
        self._min_names = config.prefilter_min_names if min_names is None else min_names
        self._min_results = (
            config.prefilter_min_results if min_results is None else min_results
        )
        self._max_names = max_names or config.prefilter_max_names

    def should_filter(self, names: List[str], meaning_theme: str) -> bool:
        """Check whether a list is worth a prefilter call."""
        return bool(meaning_theme and meaning_theme.strip()) and len(names) > self._min_names

    async def filter(self, names: List[str], meaning_theme: str) -> List[str]:
        """
        Narrow ``names`` to those related to the theme.

        Args:
            names: Candidate names
            meaning_theme: Desired meaning/theme

        Returns:
            Surviving names in candidate order, or ``names`` unchanged
        """
        if not self.should_filter(names, meaning_theme):
            return names

        listed = names[: self._max_names]
        request = build_prefilter_request(listed, meaning_theme, len(names))
        try:
            response = await self._provider.complete(request)
        except LLMProviderError as e:
            logger.warning("Prefilter failed, using full list", error=str(e))
            return names

        returned = {n.lower() for n in LLMResponseParser.parse_name_list(response.content)}
        survivors = list(dict.fromkeys(name for name in names if name.lower() in returned))

        if len(survivors) < self._min_results:
            logger.info(
                "Prefilter too aggressive, using full list",
                survivors=len(survivors),
                candidates=len(names),
            )
            return names

        logger.info(
            "Candidates prefiltered",
            theme=truncate(meaning_theme),
            before=len(names),
            after=len(survivors),
        )
        return survivors
