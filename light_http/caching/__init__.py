"""
Local and distributed caching around the request executor.
"""

from .backend import CacheBackend, CacheExpiration
from .cached_request import CachedHttpRequest
from .memory_cache import MemoryCacheBackend
from .redis_cache import RedisCacheBackend

__all__ = [
    "CacheBackend",
    "CacheExpiration",
    "CachedHttpRequest",
    "MemoryCacheBackend",
    "RedisCacheBackend",
]
