"""
Provider contract shared by the OpenAI and Anthropic adapters.

Every model call the name finder makes goes through ``complete``:
single-name analysis, batch analysis of up to ten names, the
quick-reject prefilter and pop-culture name discovery. The calling step
is carried in ``CompletionRequest.operation`` so adapters can tag their
logs with it.
"""

from abc import ABC, abstractmethod

from namefinder.models.llm import CompletionRequest, LLMResponse


class BaseLLMProvider(ABC):
    """
    One configured chat-completion backend.

    Adapters return the raw text of the reply; decoding it into analyses
    or name lists is left to the analysis package.
    """

    @abstractmethod
    async def complete(self, request: CompletionRequest) -> LLMResponse:
        """
        Send a system/user prompt pair and return the reply text.

        When ``request.json_mode`` is set the adapter asks the backend
        for a single JSON object (analysis, batch and pop-culture prompts
        all do). Model, token limit and temperature fall back to the
        adapter's configured defaults.

        Raises:
            LLMProviderError: Backend call failed; callers turn this
                into error analyses rather than failing the request
        """

    @abstractmethod
    def get_name(self) -> str:
        """Short backend name used in logs and token accounting."""

    def _build_error_message(self, error: Exception, context: str) -> str:
        """Prefix a backend failure with the call that raised it."""
        return f"{context}: {type(error).__name__} - {error}"
