"""Redis-backed DebtCacheProtocol.

Values are stored as JSON strings with a millisecond TTL (SET ... PX).
Any Redis failure is logged and treated as a miss / no-op: the service then
falls back to PostgreSQL.
"""

import json
import logging
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class RedisDebtCache:
    def __init__(self, client: aioredis.Redis) -> None:
        self._redis = client

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self._redis.get(key)
        except RedisError as exc:
            logger.warning("Cache get failed, treating as miss: key=%s err=%s", key, exc)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding undecodable cache entry: key=%s", key)
            return None

    async def set(self, key: str, value: Any, ttl_ms: int) -> None:
        try:
            await self._redis.set(key, json.dumps(value), px=ttl_ms)
        except RedisError as exc:
            logger.warning("Cache set failed: key=%s err=%s", key, exc)

    async def delete(self, *keys: str) -> None:
        if not keys:
            return
        try:
            await self._redis.delete(*keys)
        except RedisError as exc:
            # Stale entries survive until TTL expiry
            logger.warning("Cache delete failed: keys=%s err=%s", keys, exc)
