"""
Main FastAPI application.

Following Sandi Metz:
- Single Responsibility: Application setup and configuration
- Small methods: Each lifecycle stage isolated
- Clear naming: Descriptive function names
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import ConnectionPool
from starlette.middleware.gzip import GZipMiddleware

from namefinder.api.errors import register_exception_handlers
from namefinder.api.middleware import (
    RequestLoggingMiddleware,
    default_logging_config,
)
from namefinder.api.routes import admin, analysis, health, names
from namefinder.api.routes.docs import API_DESCRIPTION, TAGS_METADATA
from namefinder.cache.analysis_cache import AnalysisCache
from namefinder.config import config
from namefinder.llm.factory import LLMProviderFactory
from namefinder.llm.provider import BaseLLMProvider
from namefinder.pipeline.deduplication import InFlightDeduplicator
from namefinder.repositories.redis_repository import RedisRepository, create_redis_pool
from namefinder.sources.popularity import PopularityReader
from namefinder.utils.logger import get_logger, setup_logging

setup_logging(config.log_level, json_logs=config.is_production)
logger = get_logger(__name__)


class ApplicationState:
    """
    Manages application-wide state.

    Single Responsibility: Lifecycle management of shared resources.
    """

    def __init__(self) -> None:
        self.redis_pool: Optional[ConnectionPool] = None
        self.repository: Optional[RedisRepository] = None
        self.cache: Optional[AnalysisCache] = None
        self.deduplicator = InFlightDeduplicator()
        self.popularity_reader = PopularityReader(config.names_data_dir)
        self._provider: Optional[BaseLLMProvider] = None

    async def startup(self) -> None:
        """Initialize application resources."""
        logger.info("Starting NameFinder", env=config.app_env)
        if config.cache_persistence_enabled:
            self.redis_pool = await create_redis_pool()
            self.repository = RedisRepository(self.redis_pool)
            logger.info("Redis pool initialized")

        self.cache = AnalysisCache(store=self.repository)
        await self.cache.load()
        if config.enable_cache_sweeper:
            self.cache.start_sweeper(config.cache_sweep_interval_seconds)
        logger.info("NameFinder started successfully")

    async def shutdown(self) -> None:
        """Cleanup application resources."""
        logger.info("Shutting down NameFinder")
        try:
            if self.cache:
                await self.cache.stop_sweeper()
                await self.cache.flush()
            if self.redis_pool:
                await self.redis_pool.disconnect()
                logger.info("Redis pool closed")
            logger.info("NameFinder shut down successfully")
        except Exception as e:
            logger.error("Error during shutdown", error=str(e))

    def get_provider(self) -> BaseLLMProvider:
        """
        Get the LLM provider, creating it on first use.

        Raises:
            ConfigurationError: If the provider is not configured
        """
        if self._provider is None:
            self._provider = LLMProviderFactory.create()
        return self._provider


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    state = ApplicationState()
    await state.startup()
    app.state.app_state = state

    yield

    await state.shutdown()


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title=config.app_name,
        description=API_DESCRIPTION,
        version=health.VERSION,
        docs_url="/docs" if config.is_development else None,
        redoc_url="/redoc" if config.is_development else None,
        openapi_tags=TAGS_METADATA,
        lifespan=lifespan,
    )

    # Add middleware (order matters - first added is last executed)

    # GZip compression for responses
    app.add_middleware(GZipMiddleware, minimum_size=500)

    # Request logging
    app.add_middleware(
        RequestLoggingMiddleware,
        config=default_logging_config,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health.router, tags=["health"])
    app.include_router(analysis.router, prefix="/api/v1", tags=["analysis"])
    app.include_router(names.router, prefix="/api/v1", tags=["names"])
    app.include_router(admin.router, prefix="/api/v1", tags=["admin"])

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "namefinder.main:app",
        host=config.api_host,
        port=config.api_port,
        reload=config.is_development,
    )
