"""
Pop-culture name source.

Sandi Metz Principles:
- Single Responsibility: Fetch culturally salient names
- Dependency Injection: Provider injected
"""

from typing import List, Optional

from namefinder.analysis.prompts import build_pop_culture_request
from namefinder.config import config
from namefinder.llm.provider import BaseLLMProvider
from namefinder.llm.response_parser import LLMResponseParser
from namefinder.models.analysis import Gender
from namefinder.models.llm import ParseFailure
from namefinder.utils.logger import get_logger

logger = get_logger(__name__)


class PopCultureSource:
    """
    Asks the provider for names popularized by movies, series and books.

    Results are not cached; every call is a fresh provider request.
    """

    def __init__(self, provider: BaseLLMProvider):
        """
        Initialize source.

        Args:
            provider: LLM provider
        """
        self._provider = provider

    async def get_names(self, gender: Gender, count: Optional[int] = None) -> List[str]:
        """
        Fetch pop-culture names.

        Args:
            gender: Gender
            count: Number of names to ask for (defaults to configuration)

        Returns:
            Distinct names in response order; empty if content is unreadable

        Raises:
            LLMProviderError: If the provider call fails
        """
        gender = Gender(gender)
        request = build_pop_culture_request(gender.value, count or config.pop_culture_name_count)
        response = await self._provider.complete(request)

        outcome = LLMResponseParser.parse_json_content(response.content)
        if isinstance(outcome, ParseFailure):
            logger.error("Pop-culture response unreadable", error=outcome.message)
            return []

        names = list(dict.fromkeys(LLMResponseParser.extract_string_list(outcome.data)))
        logger.info("Pop-culture names fetched", gender=gender.value, count=len(names))
        return names
