"""
Result data models for the request executor.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from shared.errors import RequestFailedError

T = TypeVar("T")


class RequestOutcome(str, Enum):
    """How a single exchange ended."""
    SUCCESS = "success"
    TRANSPORT_FAILURE = "transport_failure"
    STATUS_FAILURE = "status_failure"


@dataclass
class RequestStatus:
    """Outcome of one HTTP exchange.

    On failure exactly one of ``transport_error`` (the exchange did not
    complete) or a failing ``status_code`` (the server answered non-2xx) is
    set. ``reason_phrase`` describes the failure; for status failures it holds
    the server's error body when one was sent.
    """
    success: bool = False
    transport_error: Optional[BaseException] = None
    status_code: Optional[int] = None
    reason_phrase: Optional[str] = None

    @classmethod
    def succeeded(cls, status_code: Optional[int] = None) -> "RequestStatus":
        return cls(success=True, status_code=status_code)

    @classmethod
    def transport_failure(cls, error: BaseException, reason_phrase: Optional[str] = None) -> "RequestStatus":
        return cls(success=False, transport_error=error, reason_phrase=reason_phrase)

    @classmethod
    def status_failure(cls, status_code: int, reason_phrase: Optional[str] = None) -> "RequestStatus":
        return cls(success=False, status_code=status_code, reason_phrase=reason_phrase)

    @property
    def outcome(self) -> RequestOutcome:
        if self.success:
            return RequestOutcome.SUCCESS
        if self.transport_error is not None:
            return RequestOutcome.TRANSPORT_FAILURE
        return RequestOutcome.STATUS_FAILURE

    def raise_for_failure(self) -> "RequestStatus":
        """Raise ``RequestFailedError`` unless the request succeeded."""
        if not self.success:
            raise RequestFailedError(self)
        return self

    def __str__(self) -> str:
        return "Success" if self.success else (self.reason_phrase or "")


@dataclass
class RequestResult(Generic[T]):
    """A status plus the converted value, available when the status succeeded."""
    status: RequestStatus
    value: Optional[T] = None

    @property
    def success(self) -> bool:
        return self.status.success
