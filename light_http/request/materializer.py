"""
Conversion of raw responses into typed request results.
"""

from functools import lru_cache
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx
from pydantic import TypeAdapter

from shared.logging import get_logger
from .models import RequestResult, RequestStatus
from .transport import is_transport_error, log_transport_error

T = TypeVar("T")

ResponseHandler = Callable[[httpx.Response], Awaitable[T]]

logger = get_logger("light_http.materializer")


async def read_text(response: httpx.Response) -> str:
    """Default handler: read the whole body as text."""
    await response.aread()
    return response.text


@lru_cache(maxsize=256)
def type_adapter(response_type: Any) -> TypeAdapter:
    """Shared pydantic adapter for a response type."""
    return TypeAdapter(response_type)


def parse_json(text: Optional[str], response_type: Any = Any) -> Any:
    """Deserialize a JSON body into ``response_type``; an empty body is None."""
    if not text:
        return None
    return type_adapter(response_type).validate_json(text)


async def materialize(
    handler: ResponseHandler,
    response: Optional[httpx.Response],
    status: RequestStatus,
    only_on_success: bool = True,
    uri: str = ""
) -> RequestResult:
    """Run ``handler`` over the response and wrap its value with the status.

    The handler is skipped when the request failed and ``only_on_success`` is
    set, or when there is no response at all. Transport errors raised by the
    handler (e.g. a read timeout while streaming the body) become a failed
    status; any other exception propagates. Releasing the response is left to
    the caller.
    """
    if response is None or (not status.success and only_on_success):
        return RequestResult(status=status)

    try:
        value = await handler(response)
    except Exception as e:
        logger.error("Object conversion failed", uri=uri, error=repr(e))
        if not is_transport_error(e):
            raise
        log_transport_error(logger, e, uri)
        return RequestResult(status=RequestStatus.transport_failure(e, reason_phrase=str(e)))

    return RequestResult(status=status, value=value)
