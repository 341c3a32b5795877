"""Redis connection — shared by rate limiting and the health check.

Learn: Redis is optional. The pool is opened in the app lifespan; if that
fails, get_redis() returns None and callers carry on without it (no rate
limiting, health reports "disabled"). Tests never start the lifespan, so
they run without Redis at all.
"""

from typing import Optional

import redis.asyncio as aioredis

from padelhub.config import settings

# Global Redis connection pool (initialized in lifespan)
_redis: Optional[aioredis.Redis] = None


async def init_redis(url: Optional[str] = None) -> aioredis.Redis:
    """Open the connection pool and verify it answers."""
    global _redis
    client = aioredis.from_url(
        url or settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    await client.ping()
    _redis = client
    return _redis


async def close_redis() -> None:
    """Close the Redis connection pool."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def get_redis() -> Optional[aioredis.Redis]:
    """The shared connection, or None when Redis is not in use."""
    return _redis
