"""
LLM request and response models.

Sandi Metz Principles:
- Small classes focused on LLM interaction
- Clear separation of request and response
- Immutable data structures
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel, Field


class CompletionRequest(BaseModel):
    """Prompt pair sent to a provider."""

    system_prompt: str = Field(..., description="System instructions")
    user_prompt: str = Field(..., min_length=1, description="User message")
    operation: str = Field("analysis", description="Calling step, for logs/tests")
    model: Optional[str] = Field(None, description="Model override")
    max_tokens: Optional[int] = Field(None, ge=1, le=16000)
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    json_mode: bool = Field(False, description="Ask for a JSON object response")

    def get_model(self, default: str) -> str:
        """Get model with fallback to default."""
        return self.model or default

    def get_max_tokens(self, default: int) -> int:
        """Get max_tokens with fallback to default."""
        return self.max_tokens or default

    def get_temperature(self, default: float) -> float:
        """Get temperature with fallback to default."""
        return self.temperature if self.temperature is not None else default


class LLMResponse(BaseModel):
    """LLM response model."""

    content: str = Field(..., description="Response content")
    prompt_tokens: int = Field(..., description="Prompt tokens", ge=0)
    completion_tokens: int = Field(..., description="Completion tokens", ge=0)
    model: str = Field(..., description="Model used")

    @property
    def total_tokens(self) -> int:
        """Calculate total tokens."""
        return self.prompt_tokens + self.completion_tokens


@dataclass(frozen=True)
class ParsedContent:
    """Provider content decoded as JSON."""

    data: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ParseFailure:
    """Provider content that could not be decoded."""

    raw: str
    message: str

    @property
    def ok(self) -> bool:
        return False


ParseOutcome = Union[ParsedContent, ParseFailure]
