"""
Anthropic LLM provider implementation.

Sandi Metz Principles:
- Single Responsibility: Anthropic API interaction
- Small methods: Each method < 10 lines
- Dependency Injection: API key injected
"""

from anthropic import AnthropicError, AsyncAnthropic

from namefinder.config import config
from namefinder.exceptions import LLMProviderError
from namefinder.llm.provider import BaseLLMProvider
from namefinder.llm.rate_limiter import RateLimitConfig, RateLimiter
from namefinder.llm.retry import RetryConfig, RetryHandler
from namefinder.models.llm import CompletionRequest, LLMResponse
from namefinder.utils.logger import get_logger, log_llm_call

logger = get_logger(__name__)


class AnthropicProvider(BaseLLMProvider):
    """
    Anthropic/Claude implementation of LLM provider.

    Handles communication with Anthropic API with rate limiting and retry.
    """

    def __init__(
        self,
        api_key: str,
        rate_limiter: RateLimiter | None = None,
        retry_handler: RetryHandler | None = None,
        requests_per_minute: int = 50,
    ):
        """
        Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key
            rate_limiter: Optional rate limiter (creates default if None)
            retry_handler: Optional retry handler (creates default if None)
            requests_per_minute: Rate limit (default: 50 RPM for tier 1)
        """
        self._api_key = api_key
        self._client: AsyncAnthropic | None = None
        self._rate_limiter = rate_limiter or RateLimiter(
            RateLimitConfig(requests_per_minute=requests_per_minute)
        )
        self._retry_handler = retry_handler or RetryHandler(
            RetryConfig(max_attempts=config.llm_retry_attempts)
        )

    async def complete(self, request: CompletionRequest) -> LLMResponse:
        """
        Generate completion using Anthropic.

        Args:
            request: Completion request

        Returns:
            LLM response

        Raises:
            LLMProviderError: If API call fails
        """
        await self._rate_limiter.acquire()

        try:
            return await self._retry_handler.execute(
                lambda: self._make_api_call(request)
            )
        except AnthropicError as e:
            error_msg = self._build_error_message(e, "Anthropic API call failed")
            logger.error("Anthropic error", error=str(e), operation=request.operation)
            raise LLMProviderError(error_msg) from e
        except Exception as e:
            error_msg = self._build_error_message(
                e, "Unexpected error in Anthropic provider"
            )
            logger.error("Unexpected error", error=str(e), operation=request.operation)
            raise LLMProviderError(error_msg) from e

    async def _make_api_call(self, request: CompletionRequest) -> LLMResponse:
        """
        Make Anthropic API call.

        Args:
            request: Completion request

        Returns:
            LLM response
        """
        client = self._get_client()

        response = await client.messages.create(
            model=request.get_model(config.anthropic_model),
            max_tokens=request.get_max_tokens(config.default_max_tokens),
            temperature=min(request.get_temperature(config.default_temperature), 1.0),
            system=self._build_system_prompt(request),
            messages=[{"role": "user", "content": request.user_prompt}],
        )

        llm_response = LLMResponse(
            content=response.content[0].text if response.content else "",
            prompt_tokens=response.usage.input_tokens,
            completion_tokens=response.usage.output_tokens,
            model=response.model,
        )

        log_llm_call(
            provider="anthropic",
            model=llm_response.model,
            tokens=llm_response.total_tokens,
            operation=request.operation,
        )

        return llm_response

    @staticmethod
    def _build_system_prompt(request: CompletionRequest) -> str:
        """Messages API has no JSON mode; ask for it in the system prompt."""
        if request.json_mode:
            return f"{request.system_prompt}\n\nRespond with a single valid JSON object only."
        return request.system_prompt

    def get_name(self) -> str:
        """
        Get provider name.

        Returns:
            Provider name
        """
        return "anthropic"

    def _get_client(self) -> AsyncAnthropic:
        """
        Get or create Anthropic client.

        Returns:
            Anthropic async client
        """
        if not self._client:
            self._client = AsyncAnthropic(api_key=self._api_key)
        return self._client
