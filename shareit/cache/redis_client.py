"""
Redis client - booking detail caching.
Design: Single lazily created client; every helper degrades to a cache miss when Redis is down or disabled.
"""

import json
import logging
from typing import Any

from redis.asyncio import Redis

from shareit.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

_redis: Redis | None = None


async def get_redis() -> Redis:
    """Get Redis connection (connection pool managed by redis-py)."""
    global _redis
    if _redis is None:
        _redis = Redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
    return _redis


async def cache_get(key: str) -> dict[str, Any] | None:
    """Get JSON value from cache. Returns None on miss, error, or when caching is disabled."""
    if not settings.cache_enabled:
        return None
    try:
        client = await get_redis()
        raw = await client.get(key)
    except Exception as e:
        logger.warning("cache_get failed: key=%s error=%s", key, e)
        return None
    return json.loads(raw) if raw else None


async def cache_set(key: str, value: dict[str, Any], ttl_seconds: int) -> bool:
    """Set JSON value with TTL."""
    if not settings.cache_enabled:
        return False
    try:
        client = await get_redis()
        await client.setex(key, ttl_seconds, json.dumps(value))
        return True
    except Exception as e:
        logger.warning("cache_set failed: key=%s error=%s", key, e)
        return False


async def cache_delete_many(keys: list[str]) -> bool:
    """Invalidate keys in one round trip (e.g. after a booking decision)."""
    if not settings.cache_enabled or not keys:
        return False
    try:
        client = await get_redis()
        await client.delete(*keys)
        return True
    except Exception as e:
        logger.warning("cache_delete_many failed: keys=%d error=%s", len(keys), e)
        return False
