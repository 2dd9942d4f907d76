"""Redis-based rate limiting.

Sliding window limiter shared by HTTP routes and socket event handlers.
A rejected call raises :class:`ThrottlerError`, the marker the error
classifier maps to ``TooManyRequest``.
"""

from __future__ import annotations

import math
import time
import uuid
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from redis.asyncio import Redis

from src.core.config import settings
from src.core.dependencies import RedisManager

P = ParamSpec("P")
R = TypeVar("R")


class ThrottlerError(Exception):
    """Request rejected by a rate limit policy."""

    def __init__(self, retry_after: int | None = None) -> None:
        self.retry_after = retry_after
        message = "Rate limit exceeded"
        if retry_after is not None:
            message = f"{message}. Try again in {retry_after} seconds."
        super().__init__(message)


class RedisRateLimiter:
    """Redis-based sliding window rate limiter.

    Uses sorted sets to implement a sliding window rate limiting algorithm.

    Attributes:
        key_prefix: Prefix for Redis keys.
        limit: Maximum number of requests allowed in the window.
        window_seconds: Size of the sliding window in seconds.
    """

    PREFIX = "rate_limit:"

    def __init__(
        self,
        key_prefix: str,
        limit: int | None = None,
        window_seconds: int | None = None,
        client_factory: Callable[[], Awaitable[Redis]] = RedisManager.get_client,
    ) -> None:
        self.key_prefix = key_prefix
        self.limit = limit or settings.rate_limit.default_limit
        self.window_seconds = window_seconds or settings.rate_limit.default_window_seconds
        self._client_factory = client_factory

    async def is_allowed(self, identifier: str) -> tuple[bool, int]:
        """Check if request is allowed.

        Args:
            identifier: Unique identifier for the client (user id, IP, socket id).

        Returns:
            Tuple of (is_allowed, retry_after_seconds).
        """
        redis = await self._client_factory()
        key = f"{self.PREFIX}{self.key_prefix}:{identifier}"

        now = time.time()
        window_start = now - self.window_seconds

        pipe = redis.pipeline()
        pipe.zremrangebyscore(key, 0, window_start)
        pipe.zcard(key)
        # Unique member so requests in the same second are all counted
        pipe.zadd(key, {f"{time.time_ns()}:{uuid.uuid4().hex}": now})
        pipe.expire(key, self.window_seconds)

        results = await pipe.execute()
        count = results[1]

        if count >= self.limit:
            oldest = await redis.zrange(key, 0, 0, withscores=True)
            if oldest:
                retry_after = math.ceil(oldest[0][1] + self.window_seconds - now)
                return False, max(retry_after, 1)
            return False, self.window_seconds

        return True, 0

    async def check(self, identifier: str) -> None:
        """Raise :class:`ThrottlerError` when ``identifier`` is over the limit."""
        allowed, retry_after = await self.is_allowed(identifier)
        if not allowed:
            raise ThrottlerError(retry_after)


def rate_limit(
    limiter: RedisRateLimiter,
    key: Callable[..., str] | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator for rate-limited handlers.

    Args:
        limiter: The rate limiter instance to use.
        key: Builds the client identifier from the handler arguments.
            Defaults to ``user_id`` or the request client host.

    Raises:
        ThrottlerError: When the rate limit is exceeded.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            if key is not None:
                identifier = key(*args, **kwargs)
            else:
                identifier = _default_identifier(kwargs)

            await limiter.check(identifier)
            return await func(*args, **kwargs)

        return wrapper

    return decorator


def _default_identifier(kwargs: dict) -> str:
    user_id = kwargs.get("user_id")
    if user_id:
        return str(user_id)

    request = kwargs.get("request")
    client = getattr(request, "client", None)
    if client:
        return client.host
    return "unknown"


__all__ = [
    "RedisRateLimiter",
    "ThrottlerError",
    "rate_limit",
]
