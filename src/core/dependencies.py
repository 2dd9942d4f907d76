"""
Redis connection management.
"""

from redis.asyncio import Redis

from .config import settings


class RedisManager:
    """Redis connection manager."""

    _client: Redis | None = None

    @classmethod
    async def get_client(cls) -> Redis:
        """Get the shared Redis client."""
        if cls._client is None:
            cls._client = Redis.from_url(
                settings.redis.url,
                encoding="utf-8",
                decode_responses=True,
            )
        return cls._client

    @classmethod
    async def close(cls) -> None:
        """Close the Redis connection."""
        if cls._client is not None:
            await cls._client.aclose()
            cls._client = None
