"""Cache port — injected into repository constructors instead of ambient state.

Semantics shared by every adapter:
  - values are JSON-serialisable dicts
  - ``set`` overwrites and restarts the TTL (write-through invalidation)
  - ``ttl=None`` falls back to the adapter's default TTL
  - an expired key reads as a miss
"""

import copy
import json
import logging
import time
from typing import Any, Protocol

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from config.settings import settings
from src.bs_common.errors import CacheError
from src.bs_common.redis_client import get_redis

logger = logging.getLogger(__name__)


class CacheProtocol(Protocol):
    async def get(self, key: str) -> dict[str, Any] | None: ...

    async def set(self, key: str, value: dict[str, Any], ttl: int | None = None) -> None: ...

    async def delete(self, *keys: str) -> None: ...


class RedisCache:
    """Redis adapter: ``SET key json EX ttl``."""

    def __init__(self, redis: aioredis.Redis, default_ttl: int) -> None:
        self._redis = redis
        self._default_ttl = default_ttl

    async def get(self, key: str) -> dict[str, Any] | None:
        try:
            raw = await self._redis.get(key)
        except RedisError as exc:
            logger.error("Cache get failed: key=%s error=%s", key, exc)
            raise CacheError(key, str(exc)) from exc
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: dict[str, Any], ttl: int | None = None) -> None:
        try:
            await self._redis.set(key, json.dumps(value), ex=ttl or self._default_ttl)
        except RedisError as exc:
            logger.error("Cache set failed: key=%s error=%s", key, exc)
            raise CacheError(key, str(exc)) from exc

    async def delete(self, *keys: str) -> None:
        if not keys:
            return
        try:
            await self._redis.delete(*keys)
        except RedisError as exc:
            logger.error("Cache delete failed: keys=%s error=%s", keys, exc)
            raise CacheError(",".join(keys), str(exc)) from exc


class InMemoryCache:
    """Process-local adapter for local runs and tests. Expiry uses the monotonic clock."""

    def __init__(self, default_ttl: int) -> None:
        self._default_ttl = default_ttl
        self._items: dict[str, tuple[float, dict[str, Any]]] = {}

    async def get(self, key: str) -> dict[str, Any] | None:
        item = self._items.get(key)
        if item is None:
            return None
        expires_at, value = item
        if time.monotonic() >= expires_at:
            del self._items[key]
            return None
        return copy.deepcopy(value)

    async def set(self, key: str, value: dict[str, Any], ttl: int | None = None) -> None:
        expires_at = time.monotonic() + (ttl or self._default_ttl)
        self._items[key] = (expires_at, copy.deepcopy(value))

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self._items.pop(key, None)


async def get_cache() -> CacheProtocol:
    """Build the adapter selected by ``settings.CACHE_BACKEND``."""
    if settings.CACHE_BACKEND == "memory":
        return InMemoryCache(settings.CACHE_TTL_SECONDS)
    return RedisCache(await get_redis(), settings.CACHE_TTL_SECONDS)
