"""
Redis client for room metadata and admission control.
Separated from business logic for clean architecture.
"""

import redis.asyncio as redis
from typing import Optional
from roomgate.core.config import get_settings


class RedisClient:
    """Singleton Redis client with connection pooling."""

    _instance: Optional[redis.Redis] = None

    @classmethod
    def get_client(cls) -> redis.Redis:
        """Get or create Redis client instance."""
        if cls._instance is None:
            settings = get_settings()
            cls._instance = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
                socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
                health_check_interval=30,
            )
        return cls._instance

    @classmethod
    async def close(cls):
        """Close Redis connection."""
        if cls._instance:
            await cls._instance.aclose()
            cls._instance = None


# Convenience function, also used as a FastAPI dependency
def get_redis() -> redis.Redis:
    """Get Redis client instance."""
    return RedisClient.get_client()
