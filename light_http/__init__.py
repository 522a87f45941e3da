"""
Light HTTP request layer.

Sends single requests through ``httpx``, reports timeouts, cancellations and
non-2xx answers as a ``RequestStatus`` instead of exceptions, deserializes
JSON bodies into typed values and optionally memoizes successful results in an
in-process or Redis cache keyed by the resolved request URI.
"""

from .caching import (
    CacheBackend,
    CacheExpiration,
    CachedHttpRequest,
    MemoryCacheBackend,
    RedisCacheBackend,
)
from .request import (
    HttpRequest,
    RequestOutcome,
    RequestResult,
    RequestStatus,
    create_http_client,
    read_text,
    resolve_uri,
)

__all__ = [
    "CacheBackend",
    "CacheExpiration",
    "CachedHttpRequest",
    "HttpRequest",
    "MemoryCacheBackend",
    "RedisCacheBackend",
    "RequestOutcome",
    "RequestResult",
    "RequestStatus",
    "create_http_client",
    "read_text",
    "resolve_uri",
]
