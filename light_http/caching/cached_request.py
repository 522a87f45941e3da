"""
Read-through / write-through caching around the request executor.
"""

import asyncio
from typing import Any, Dict, Optional

from shared.logging import get_logger
from ..request.executor import HttpRequest, RequestContent
from ..request.materializer import ResponseHandler
from ..request.models import RequestResult, RequestStatus
from .backend import CacheBackend, CacheExpiration


class CachedHttpRequest:
    """Serve results from a cache keyed by the resolved request URI.

    On a hit the cached value is returned as a success with no network call.
    On a miss the request is sent and, only if it succeeded, the value is
    stored. Failures are never cached, and concurrent misses for the same URI
    each go to the network.

    Usage:
        ```python
        cached = CachedHttpRequest(HttpRequest(client), MemoryCacheBackend(maxsize=500))
        result = await cached.send_json(
            "GET", "v1/items",
            response_type=list[Item],
            expiration=CacheExpiration(ttl=timedelta(minutes=5)),
        )
        ```
    """

    def __init__(
        self,
        request: HttpRequest,
        cache: CacheBackend,
        default_expiration: Optional[CacheExpiration] = None
    ):
        self.request = request
        self.cache = cache
        self.default_expiration = default_expiration
        self.logger = get_logger("light_http.cached_request")

    async def send_with_handler(
        self,
        handler: ResponseHandler,
        method: str,
        uri: Optional[str] = None,
        *,
        content: RequestContent = None,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        response_type: Any = Any,
        only_on_success: bool = True,
        cancel_event: Optional[asyncio.Event] = None,
        expiration: Optional[CacheExpiration] = None
    ) -> RequestResult:
        """Cached variant of ``HttpRequest.send_with_handler``.

        ``response_type`` describes the handler's return value; the
        distributed backend needs it to read the value back from JSON.
        """
        return await self._send_cached(
            handler, method, uri, content, json_body, headers,
            response_type, only_on_success, cancel_event, expiration
        )

    async def send_json(
        self,
        method: str,
        uri: Optional[str] = None,
        *,
        content: RequestContent = None,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        response_type: Any = Any,
        only_on_success: bool = True,
        cancel_event: Optional[asyncio.Event] = None,
        expiration: Optional[CacheExpiration] = None
    ) -> RequestResult:
        """Cached variant of ``HttpRequest.send_json``."""
        return await self._send_cached(
            None, method, uri, content, json_body, headers,
            response_type, only_on_success, cancel_event, expiration
        )

    async def _send_cached(
        self,
        handler: Optional[ResponseHandler],
        method: str,
        uri: Optional[str],
        content: RequestContent,
        json_body: Any,
        headers: Optional[Dict[str, str]],
        response_type: Any,
        only_on_success: bool,
        cancel_event: Optional[asyncio.Event],
        expiration: Optional[CacheExpiration]
    ) -> RequestResult:
        cache_key = str(self.request.full_uri(uri))

        hit, cached_value = await self.cache.try_get(cache_key, response_type)
        if hit:
            self.logger.debug("Cache hit", uri=cache_key)
            return RequestResult(status=RequestStatus.succeeded(), value=cached_value)

        if handler is not None:
            result = await self.request.send_with_handler(
                handler,
                method,
                uri,
                content=content,
                json_body=json_body,
                headers=headers,
                only_on_success=only_on_success,
                cancel_event=cancel_event
            )
        else:
            result = await self.request.send_json(
                method,
                uri,
                content=content,
                json_body=json_body,
                headers=headers,
                response_type=response_type,
                only_on_success=only_on_success,
                cancel_event=cancel_event
            )

        if result.status.success:
            await self.cache.set(
                cache_key,
                result.value,
                response_type,
                expiration or self.default_expiration
            )

        return result
