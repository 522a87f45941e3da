"""
Classification of recoverable transport errors.
"""

import asyncio
from typing import Any

import httpx

from shared.errors import RequestCancelledError

TIMEOUT_ERRORS = (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)

# Failures of the exchange itself; these become data, everything else propagates.
TRANSPORT_ERRORS = (
    *TIMEOUT_ERRORS,
    RequestCancelledError,
    httpx.RequestError,
)


def is_transport_error(error: BaseException) -> bool:
    return isinstance(error, TRANSPORT_ERRORS)


def log_transport_error(logger: Any, error: BaseException, uri: str) -> None:
    """Log a recoverable transport error with the kind it was classified as."""
    if isinstance(error, TIMEOUT_ERRORS):
        logger.warning("Request timed out", uri=uri, error=repr(error))
    elif isinstance(error, RequestCancelledError):
        logger.warning("Request was canceled", uri=uri, error=repr(error))
    else:
        logger.warning("Request failed with transport error", uri=uri, error=repr(error))
