"""
Request executor, result models and response materialization.
"""

from .client_factory import HTTPClientFactory, create_http_client
from .executor import HttpRequest
from .materializer import materialize, parse_json, read_text
from .models import RequestOutcome, RequestResult, RequestStatus
from .transport import TRANSPORT_ERRORS, is_transport_error
from .uri import resolve_uri

__all__ = [
    "HTTPClientFactory",
    "HttpRequest",
    "RequestOutcome",
    "RequestResult",
    "RequestStatus",
    "TRANSPORT_ERRORS",
    "create_http_client",
    "is_transport_error",
    "materialize",
    "parse_json",
    "read_text",
    "resolve_uri",
]
