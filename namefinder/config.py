"""
Application configuration management.

Following Sandi Metz principles:
- Single Responsibility: Configuration loading and validation
- Small class: Grouped, descriptive settings
- Clear naming: Descriptive property names
"""

from typing import List, Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """
    Application configuration with validation.

    Loads from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="NameFinder", description="Application name")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    log_level: str = Field(default="INFO", description="Logging level")
    debug: bool = Field(default=False, description="Debug mode")

    # API settings
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API port")
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        description="CORS allowed origins",
    )

    # Redis settings
    redis_host: str = Field(default="localhost", description="Redis host")
    redis_port: int = Field(default=6379, ge=1, le=65535, description="Redis port")
    redis_db: int = Field(default=0, ge=0, le=15, description="Redis database")
    redis_password: str = Field(default="", description="Redis password")
    redis_max_connections: int = Field(default=10, ge=1, description="Max connections")
    cache_persistence_enabled: bool = Field(
        default=True, description="Persist the analysis cache to Redis"
    )

    # LLM Provider settings
    openai_api_key: str = Field(default="", description="OpenAI API key")
    anthropic_api_key: str = Field(default="", description="Anthropic API key")
    default_llm_provider: Literal["openai", "anthropic"] = Field(
        default="openai", description="Default provider"
    )
    default_model: str = Field(default="gpt-4o", description="Default OpenAI model")
    anthropic_model: str = Field(
        default="claude-3-5-sonnet-20241022", description="Default Anthropic model"
    )
    default_max_tokens: int = Field(default=4000, ge=1, description="Max tokens")
    default_temperature: float = Field(
        default=0.7, ge=0.0, le=2.0, description="Temperature"
    )
    llm_requests_per_minute: int = Field(
        default=500, ge=1, description="Provider request budget per minute"
    )
    llm_retry_attempts: int = Field(
        default=3, ge=1, le=10, description="Attempts per provider call"
    )

    # Analysis cache settings
    cache_namespace: str = Field(
        default="nameAnalysisCache", description="Persisted cache blob key"
    )
    cache_expiry_days: float = Field(default=30, gt=0, description="Entry lifetime")
    cache_sweep_interval_seconds: float = Field(
        default=3600, gt=0, description="Expired entry sweep interval"
    )
    enable_cache_sweeper: bool = Field(
        default=True, description="Run the background expiry sweeper"
    )

    # Search policy
    default_target_matches: int = Field(default=10, ge=1, description="Target matches")
    min_target_matches: int = Field(default=1, ge=1, description="Target lower bound")
    max_target_matches: int = Field(default=50, ge=1, description="Target upper bound")
    default_batch_size: int = Field(default=5, ge=1, description="Names per call")
    max_batch_size: int = Field(default=10, ge=1, description="Batch size bound")
    prefilter_min_names: int = Field(
        default=20, ge=0, description="Prefilter only above this many names"
    )
    prefilter_min_results: int = Field(
        default=10, ge=0, description="Discard prefilter results below this"
    )
    prefilter_max_names: int = Field(
        default=500, ge=1, description="Names listed in the prefilter call"
    )
    inter_batch_delay_seconds: float = Field(
        default=1.0, ge=0.0, description="Pause between batch calls"
    )
    overall_match_rule: Literal["half", "core"] = Field(
        default="half", description="Rule deriving overallMatch"
    )

    # Candidate data settings
    names_data_dir: str = Field(default="data/names", description="yobYYYY.txt dir")
    default_start_year: int = Field(default=2013, ge=1880, description="Start year")
    default_end_year: int = Field(default=2023, ge=1880, description="End year")
    earliest_data_year: int = Field(default=1880, ge=1, description="First data year")
    pop_culture_name_count: int = Field(
        default=50, ge=1, le=200, description="Names per pop-culture request"
    )
    stream_chunk_size: int = Field(default=20, ge=1, description="Names per SSE event")
    stream_delay_seconds: float = Field(
        default=0.1, ge=0.0, description="Pause between SSE events"
    )

    @model_validator(mode="after")
    def validate_bounds(self) -> "AppConfig":
        """Validate paired lower/upper bounds."""
        if self.min_target_matches > self.max_target_matches:
            raise ValueError("min_target_matches must not exceed max_target_matches")
        if self.default_batch_size > self.max_batch_size:
            raise ValueError("default_batch_size must not exceed max_batch_size")
        return self

    @property
    def allowed_origins_list(self) -> List[str]:
        """Get allowed origins as list."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    @property
    def redis_url(self) -> str:
        """Build Redis URL."""
        if self.redis_password:
            return (
                f"redis://:{self.redis_password}@"
                f"{self.redis_host}:{self.redis_port}/{self.redis_db}"
            )
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    @property
    def cache_expiry_seconds(self) -> float:
        """Entry lifetime in seconds."""
        return self.cache_expiry_days * 24 * 60 * 60

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"


# Global configuration instance
config = AppConfig()
