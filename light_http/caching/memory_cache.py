"""
In-process cache backend storing typed values.
"""

import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from cachetools import TLRUCache

from shared.logging import get_logger
from .backend import CacheBackend, CacheExpiration


@dataclass
class _CacheEntry:
    value: Any
    ttl_seconds: Optional[float]


def _time_to_use(key: str, entry: _CacheEntry, now: float) -> float:
    if entry.ttl_seconds is None:
        return math.inf
    return now + entry.ttl_seconds


class MemoryCacheBackend(CacheBackend):
    """Native objects in a size-bounded ``cachetools.TLRUCache``.

    Each entry carries its own expiry; once ``maxsize`` is reached the least
    recently used entry is evicted.
    """

    def __init__(self, maxsize: int = 1024, timer: Callable[[], float] = time.monotonic):
        self.logger = get_logger("light_http.cache.memory")
        self._cache: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_time_to_use, timer=timer)

    async def try_get(self, key: str, response_type: Any = Any) -> Tuple[bool, Any]:
        entry = self._cache.get(key)
        if entry is None:
            return False, None
        return True, entry.value

    async def set(
        self,
        key: str,
        value: Any,
        response_type: Any = Any,
        expiration: Optional[CacheExpiration] = None
    ) -> None:
        ttl_seconds = expiration.seconds_remaining() if expiration else None
        self._cache[key] = _CacheEntry(value=value, ttl_seconds=ttl_seconds)
        self.logger.debug("Cached value", key=key, ttl=ttl_seconds)

    def invalidate(self, key: str) -> bool:
        """Drop one entry; returns whether it was present."""
        return self._cache.pop(key, None) is not None

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
