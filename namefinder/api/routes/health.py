"""
Health check endpoints.

Sandi Metz Principles:
- Single Responsibility: Health check logic only
- Small functions: Each check isolated
- Clear naming: Descriptive endpoint names
"""

import time

from fastapi import APIRouter, Request

from namefinder.config import config
from namefinder.models.response import (
    ComponentHealth,
    DetailedHealthResponse,
    HealthResponse,
)
from namefinder.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)

VERSION = "0.1.0"


async def check_redis_health(request: Request) -> ComponentHealth:
    """Check Redis health; an unavailable store only degrades the service."""
    try:
        app_state = getattr(request.app.state, "app_state", None)
        if app_state is None:
            return ComponentHealth(status="unhealthy", message="App state not initialized")

        if app_state.repository is None:
            return ComponentHealth(status="degraded", message="Persistence disabled")

        start = time.time()
        is_healthy = await app_state.repository.ping()
        latency = (time.time() - start) * 1000

        if is_healthy:
            return ComponentHealth(status="healthy", latency_ms=round(latency, 2))
        return ComponentHealth(status="degraded", message="Ping failed, session-only cache")

    except Exception as e:
        logger.error("Redis health check failed", error=str(e))
        return ComponentHealth(status="degraded", message=str(e))


def check_cache_health(request: Request) -> ComponentHealth:
    """Check the analysis cache is available."""
    app_state = getattr(request.app.state, "app_state", None)
    if app_state is None or app_state.cache is None:
        return ComponentHealth(status="unhealthy", message="Analysis cache not initialized")

    stats = app_state.cache.stats()
    return ComponentHealth(status="healthy", message=f"{stats.total_entries} entries")


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns:
        Health status response
    """
    return HealthResponse(
        status="healthy",
        environment=config.app_env,
        version=VERSION,
    )


@router.get("/ready", response_model=DetailedHealthResponse)
async def readiness_check(request: Request) -> DetailedHealthResponse:
    """
    Readiness check endpoint.

    Checks all dependencies and returns detailed status.

    Returns:
        Detailed health status response
    """
    components = {
        "redis": await check_redis_health(request),
        "cache": check_cache_health(request),
    }

    statuses = [c.status for c in components.values()]
    if all(s == "healthy" for s in statuses):
        overall_status = "healthy"
    elif any(s == "unhealthy" for s in statuses):
        overall_status = "unhealthy"
    else:
        overall_status = "degraded"

    return DetailedHealthResponse(
        status=overall_status,
        environment=config.app_env,
        version=VERSION,
        components=components,
    )
