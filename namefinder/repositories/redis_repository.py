"""
Redis repository for the persisted analysis cache.

Sandi Metz Principles:
- Single Responsibility: Redis data access
- Small methods: Each operation isolated
- Dependency Injection: Redis pool injected
"""

import json
from typing import Any, Dict, Optional

from redis.asyncio import ConnectionPool, Redis

from namefinder.config import config
from namefinder.utils.logger import get_logger

logger = get_logger(__name__)


async def create_redis_pool() -> ConnectionPool:
    """
    Create Redis connection pool.

    Returns:
        Redis connection pool
    """
    return ConnectionPool.from_url(
        config.redis_url,
        max_connections=config.redis_max_connections,
        decode_responses=True,
    )


class RedisRepository:
    """
    Namespaced JSON blob store backed by Redis.

    Failures are logged and reported through return values; callers
    keep working without persistence.
    """

    def __init__(self, pool: ConnectionPool):
        """
        Initialize repository.

        Args:
            pool: Redis connection pool
        """
        self._pool = pool

    async def load_blob(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Load a JSON blob.

        Args:
            key: Blob key (cache namespace)

        Returns:
            Decoded blob if found and valid, None otherwise
        """
        try:
            async with Redis(connection_pool=self._pool) as client:
                data = await client.get(key)
                if not data:
                    return None
                blob = json.loads(data)
                return blob if isinstance(blob, dict) else None
        except json.JSONDecodeError as e:
            logger.error("Stored blob is not valid JSON", key=key, error=str(e))
            return None
        except Exception as e:
            logger.error("Redis load failed", key=key, error=str(e))
            return None

    async def save_blob(self, key: str, data: Dict[str, Any]) -> bool:
        """
        Store a JSON blob, replacing any previous value.

        Args:
            key: Blob key (cache namespace)
            data: JSON-serializable blob

        Returns:
            True if stored successfully, False otherwise
        """
        try:
            async with Redis(connection_pool=self._pool) as client:
                await client.set(key, json.dumps(data, ensure_ascii=False))
                return True
        except Exception as e:
            logger.error("Redis save failed", key=key, error=str(e))
            return False

    async def delete_blob(self, key: str) -> bool:
        """
        Delete a blob.

        Args:
            key: Blob key (cache namespace)

        Returns:
            True if a blob was deleted, False otherwise
        """
        try:
            async with Redis(connection_pool=self._pool) as client:
                result = await client.delete(key)
                return result > 0
        except Exception as e:
            logger.error("Redis delete failed", key=key, error=str(e))
            return False

    async def ping(self) -> bool:
        """
        Ping Redis server.

        Returns:
            True if connected, False otherwise
        """
        try:
            async with Redis(connection_pool=self._pool) as client:
                await client.ping()
                return True
        except Exception as e:
            logger.error("Redis ping failed", error=str(e))
            return False
