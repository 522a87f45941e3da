"""
Shared error handling for the light HTTP request layer.
"""

from typing import Dict, Any, Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from light_http.request.models import RequestStatus


class LightHttpError(Exception):
    """Base exception for the light HTTP request layer."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class UriResolutionError(LightHttpError):
    """The request URI cannot be turned into an absolute URI."""

    def __init__(self, message: str = "Request URI must be absolute", details: Optional[Dict[str, Any]] = None):
        super().__init__("URI_RESOLUTION_ERROR", message, details)


class RequestCancelledError(LightHttpError):
    """The caller's cancellation event fired before the exchange completed."""

    def __init__(self, message: str = "The operation was canceled", details: Optional[Dict[str, Any]] = None):
        super().__init__("REQUEST_CANCELLED", message, details)


class RequestFailedError(LightHttpError):
    """Raised on demand for a failed request status."""

    def __init__(self, status: "RequestStatus", details: Optional[Dict[str, Any]] = None):
        self.status = status
        merged = {"status_code": status.status_code}
        if status.transport_error is not None:
            merged["transport_error"] = repr(status.transport_error)
        merged.update(details or {})
        super().__init__("REQUEST_FAILED", str(status) or "Request failed", merged)
