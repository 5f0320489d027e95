"""
Mock LLM providers for testing.

Sandi Metz Principles:
- Single Responsibility: Provide test doubles
- Small classes: Each mock < 100 lines
- Clear naming: Self-documenting code
"""

import asyncio
import json
import re
from typing import Callable, Dict, Iterable, List, Optional

from namefinder.exceptions import LLMProviderError
from namefinder.llm.provider import BaseLLMProvider
from namefinder.models.analysis import CORE_CATEGORIES, OPTIONAL_CATEGORIES
from namefinder.models.llm import CompletionRequest, LLMResponse

Handler = Callable[[CompletionRequest], str]

_SINGLE_NAME = re.compile(r'Analyze the name "([^"]+)"')
_BATCH_NAMES = re.compile(r"- Names to analyze: (.+)")


def _camel(field: str) -> str:
    head, *rest = field.split("_")
    return head + "".join(part.capitalize() for part in rest)


def build_raw_analysis(
    name: str,
    matches: bool = True,
    translations: Optional[List[str]] = None,
    include_optional: bool = True,
) -> dict:
    """
    Build provider-shaped analysis JSON for a name.

    Every category carries the same verdict, so the derived
    overallMatch equals ``matches``.
    """
    fields = CORE_CATEGORIES + (OPTIONAL_CATEGORIES if include_optional else ())
    raw = {
        "name": name,
        "overallMatch": not matches,
        "origin": "English",
        "meaning": f"Meaning of {name}",
        "chineseTranslations": [
            {"translation": t, "explanation": f"{t} explained"}
            for t in (translations or ["艾米莉亚", "阿梅莉亚"])
        ],
        "summary": f"{name} summary",
    }
    for field in fields:
        raw[_camel(field)] = {
            "matches": matches,
            "explanation": f"{field} for {name}",
            "score": 8 if matches else 2,
        }
    return raw


def requested_names(request: CompletionRequest) -> List[str]:
    """Names a single or batch analysis request asks about."""
    single = _SINGLE_NAME.search(request.user_prompt)
    if single:
        return [single.group(1)]
    batch = _BATCH_NAMES.search(request.user_prompt)
    if batch:
        return [name.strip() for name in batch.group(1).split(",")]
    return []


def analysis_handler(matching: Iterable[str] = ()) -> Handler:
    """Answer single-name requests; names in ``matching`` match."""
    wanted = set(matching)

    def handle(request: CompletionRequest) -> str:
        name = requested_names(request)[0]
        return json.dumps(build_raw_analysis(name, matches=name in wanted))

    return handle


def batch_handler(matching: Iterable[str] = (), omit: Iterable[str] = ()) -> Handler:
    """Answer batch requests; names in ``omit`` are left out of the response."""
    wanted = set(matching)
    skipped = set(omit)

    def handle(request: CompletionRequest) -> str:
        results = [
            build_raw_analysis(name, matches=name in wanted)
            for name in requested_names(request)
            if name not in skipped
        ]
        return json.dumps({"results": results})

    return handle


class MockLLMProvider(BaseLLMProvider):
    """
    Mock LLM provider for testing.

    Returns scripted content per operation without making real API calls.
    """

    def __init__(
        self,
        name: str = "mock-provider",
        response_content: str = "{}",
        handlers: Optional[Dict[str, Handler]] = None,
        model: str = "mock-model",
        should_fail: bool = False,
        failure_message: str = "Mock provider error",
    ):
        """
        Initialize mock provider.

        Args:
            name: Provider name
            response_content: Content for operations without a handler
            handlers: Content builders keyed by request operation
            model: Model name to return
            should_fail: Whether to raise LLMProviderError
            failure_message: Error message when failing
        """
        self._name = name
        self._response_content = response_content
        self._handlers = dict(handlers or {})
        self._model = model
        self._should_fail = should_fail
        self._failure_message = failure_message
        self._requests: List[CompletionRequest] = []

    async def complete(self, request: CompletionRequest) -> LLMResponse:
        """
        Return scripted response.

        Raises:
            LLMProviderError: If should_fail is True
        """
        self._requests.append(request)
        await asyncio.sleep(0)

        if self._should_fail:
            raise LLMProviderError(self._failure_message)

        handler = self._handlers.get(request.operation)
        content = handler(request) if handler else self._response_content

        return LLMResponse(
            content=content,
            prompt_tokens=10,
            completion_tokens=5,
            model=self._model,
        )

    def get_name(self) -> str:
        """Get provider name."""
        return self._name

    def get_call_count(self) -> int:
        """Get number of times complete was called."""
        return len(self._requests)

    def calls_for(self, operation: str) -> int:
        """Get number of calls made for one operation."""
        return sum(1 for request in self._requests if request.operation == operation)

    @property
    def requests(self) -> List[CompletionRequest]:
        """Requests received, in order."""
        return list(self._requests)

    def set_handler(self, operation: str, handler: Handler) -> None:
        """Script the content returned for an operation."""
        self._handlers[operation] = handler

    def set_should_fail(self, should_fail: bool) -> None:
        """Configure whether provider should fail."""
        self._should_fail = should_fail


class FailingOperationProvider(MockLLMProvider):
    """Mock provider that fails only for the given operations."""

    def __init__(self, failing: Iterable[str], **kwargs):
        super().__init__(**kwargs)
        self._failing = set(failing)

    async def complete(self, request: CompletionRequest) -> LLMResponse:
        if request.operation in self._failing:
            self._requests.append(request)
            raise LLMProviderError(f"{request.operation} failed")
        return await super().complete(request)


class BlockingLLMProvider(MockLLMProvider):
    """Mock provider whose calls wait until released."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def complete(self, request: CompletionRequest) -> LLMResponse:
        self.started.set()
        await self.release.wait()
        return await super().complete(request)
