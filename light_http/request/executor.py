"""
Single-exchange HTTP request executor.
"""

import asyncio
import re
from typing import Any, Dict, Optional, Tuple, Union

import httpx

from shared.errors import RequestCancelledError
from shared.logging import get_logger
from .materializer import ResponseHandler, materialize, parse_json, read_text
from .models import RequestResult, RequestStatus
from .transport import is_transport_error, log_transport_error
from .uri import resolve_uri

NEWLINES = re.compile(r"\r\n|\r|\n")

RequestContent = Union[str, bytes, None]


class HttpRequest:
    """Sends one request through an ``httpx.AsyncClient`` and reports the outcome as data.

    Timeouts, cancellations and connection failures come back as a failed
    ``RequestStatus`` instead of raising, as do non-2xx responses. Anything
    else (programming errors, bad URIs) propagates to the caller.

    Usage:
        ```python
        request = HttpRequest(httpx.AsyncClient(base_url="https://api.example.com/"))
        result = await request.send_json("GET", "v1/items", response_type=list[Item])
        if result.status.success:
            items = result.value
        ```
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client
        self.logger = get_logger("light_http.request")

    def full_uri(self, uri: Optional[str] = None) -> httpx.URL:
        """Resolve ``uri`` against the client's base address."""
        return resolve_uri(self.client.base_url, uri)

    async def send_status(
        self,
        method: str,
        uri: Optional[str] = None,
        *,
        content: RequestContent = None,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> RequestStatus:
        """Send a request and return only its status; the body is never parsed."""
        response, status = await self._send_internal(method, uri, content, json_body, headers, cancel_event)
        if response is not None:
            await response.aclose()
        return status

    async def send_with_handler(
        self,
        handler: ResponseHandler,
        method: str,
        uri: Optional[str] = None,
        *,
        content: RequestContent = None,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        only_on_success: bool = True,
        cancel_event: Optional[asyncio.Event] = None
    ) -> RequestResult:
        """Send a request and convert the response with ``handler``."""
        response, status = await self._send_internal(method, uri, content, json_body, headers, cancel_event)
        try:
            return await materialize(handler, response, status, only_on_success, uri=str(self.full_uri(uri)))
        finally:
            if response is not None:
                await response.aclose()

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
        cancel_event: Optional[asyncio.Event] = None
    ) -> RequestResult:
        """Send a request and deserialize its JSON body into ``response_type``."""
        result = await self.send_with_handler(
            read_text,
            method,
            uri,
            content=content,
            json_body=json_body,
            headers=headers,
            only_on_success=only_on_success,
            cancel_event=cancel_event
        )

        value = None
        if result.status.success or not only_on_success:
            value = parse_json(result.value, response_type)
        return RequestResult(status=result.status, value=value)

    async def _send_internal(
        self,
        method: str,
        uri: Optional[str],
        content: RequestContent,
        json_body: Any,
        headers: Optional[Dict[str, str]],
        cancel_event: Optional[asyncio.Event]
    ) -> Tuple[Optional[httpx.Response], RequestStatus]:
        """Perform the exchange.

        Returns the still-open response (or None) and its status. Whoever
        receives a response is responsible for closing it.
        """
        full_uri = self.full_uri(uri)
        request = self.client.build_request(
            method,
            full_uri,
            content=content,
            json=json_body,
            headers=headers
        )

        try:
            response = await self._send(request, cancel_event)
        except Exception as e:
            if not is_transport_error(e):
                raise
            log_transport_error(self.logger, e, str(full_uri))
            return None, RequestStatus.transport_failure(e, reason_phrase=str(e))

        if response.is_success:
            return response, RequestStatus.succeeded(response.status_code)

        reason = response.reason_phrase
        if response.status_code != 500:
            try:
                await response.aread()
            except Exception as e:
                await response.aclose()
                if not is_transport_error(e):
                    raise
                log_transport_error(self.logger, e, str(full_uri))
                return None, RequestStatus.transport_failure(e, reason_phrase=str(e))

            if response.text:
                reason = NEWLINES.sub(". ", response.text)

        self.logger.warning(
            "Request failed with status code",
            uri=str(full_uri),
            method=method,
            status_code=response.status_code,
            reason=reason
        )
        return response, RequestStatus.status_failure(response.status_code, reason)

    async def _send(self, request: httpx.Request, cancel_event: Optional[asyncio.Event]) -> httpx.Response:
        """Send once, abandoning the exchange if ``cancel_event`` fires first."""
        if cancel_event is None:
            return await self.client.send(request, stream=True)

        if cancel_event.is_set():
            raise RequestCancelledError(details={"uri": str(request.url)})

        send_task = asyncio.ensure_future(self.client.send(request, stream=True))
        cancel_task = asyncio.ensure_future(cancel_event.wait())
        done = set()
        try:
            done, _ = await asyncio.wait({send_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancel_task.cancel()
            if send_task not in done:
                # A response that raced the cancellation still has to be released.
                send_task.cancel()
                late = (await asyncio.gather(send_task, return_exceptions=True))[0]
                if isinstance(late, httpx.Response):
                    await late.aclose()

        if send_task in done:
            return send_task.result()
        raise RequestCancelledError(details={"uri": str(request.url)})
