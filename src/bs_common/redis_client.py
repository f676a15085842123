"""Redis connection for the merchant read-through cache.

MongoDB stays the source of truth. Socket timeouts are kept short so an
unreachable Redis surfaces as a cache miss instead of stalling projection.
"""

import logging

import redis.asyncio as aioredis

from config.settings import settings

logger = logging.getLogger(__name__)

_redis_pool: aioredis.Redis | None = None


def create_redis(url: str, timeout: float) -> aioredis.Redis:
    return aioredis.from_url(
        url,
        decode_responses=True,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )


async def get_redis() -> aioredis.Redis:
    """Shared cache connection, created on first use."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is None:
        _redis_pool = create_redis(settings.REDIS_URL, settings.REDIS_TIMEOUT_SECONDS)
        logger.info(
            "Redis cache connection created: timeout=%.2fs ttl=%ds",
            settings.REDIS_TIMEOUT_SECONDS,
            settings.CACHE_TTL_SECONDS,
        )
    return _redis_pool


async def close_redis() -> None:
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None
