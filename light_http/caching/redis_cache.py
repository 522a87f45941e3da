"""
Redis cache backend storing JSON strings.
"""

import math
from typing import Any, Optional, Tuple

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.logging import get_logger
from ..request.materializer import type_adapter
from .backend import CacheBackend, CacheExpiration


class RedisCacheBackend(CacheBackend):
    """Values serialized to JSON and kept in Redis.

    Reads deserialize back into the caller's response type; an absent or empty
    string counts as a miss. Connection and serialization errors are not
    caught here and reach the caller.
    """

    def __init__(self, redis_client: redis.Redis, key_prefix: str = "", owns_client: bool = False):
        self.redis = redis_client
        self.key_prefix = key_prefix
        self._owns_client = owns_client
        self.logger = get_logger("light_http.cache.redis")

    @classmethod
    def from_url(cls, redis_url: str, key_prefix: str = "") -> "RedisCacheBackend":
        """Create a backend with its own connection pool."""
        client = redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            health_check_interval=30
        )
        return cls(client, key_prefix=key_prefix, owns_client=True)

    async def close(self):
        """Close the connection if this backend created it."""
        if self._owns_client:
            await self.redis.aclose()
            self.logger.info("Redis cache connection closed")

    def _make_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def try_get(self, key: str, response_type: Any = Any) -> Tuple[bool, Any]:
        cached_data = await self.redis.get(self._make_key(key))
        if isinstance(cached_data, bytes):
            cached_data = cached_data.decode("utf-8")
        if not cached_data:
            return False, None

        self.logger.debug("Cache hit", key=key)
        return True, type_adapter(response_type).validate_json(cached_data)

    async def set(
        self,
        key: str,
        value: Any,
        response_type: Any = Any,
        expiration: Optional[CacheExpiration] = None
    ) -> None:
        payload = type_adapter(response_type).dump_json(value).decode("utf-8")

        ttl_seconds = expiration.seconds_remaining() if expiration else None
        if ttl_seconds is None:
            await self.redis.set(self._make_key(key), payload)
        else:
            # Redis rejects a zero expiry; round up to the smallest unit it accepts.
            ttl_ms = max(1, math.ceil(ttl_seconds * 1000))
            await self.redis.set(self._make_key(key), payload, px=ttl_ms)

        self.logger.debug("Cached value", key=key, ttl=ttl_seconds)

    async def health_check(self) -> bool:
        """Check Redis health."""
        try:
            await self.redis.ping()
            return True
        except RedisError:
            return False
