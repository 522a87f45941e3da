"""
Cache backend capability shared by the local and distributed caches.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Tuple


@dataclass(frozen=True)
class CacheExpiration:
    """Time-based expiry for one cache entry.

    ``ttl`` is relative to the moment the entry is written, ``expires_at`` is
    an absolute point in time. When both are given the earlier one wins; when
    neither is given the entry does not expire on its own.
    """
    ttl: Optional[timedelta] = None
    expires_at: Optional[datetime] = None

    def seconds_remaining(self, now: Optional[datetime] = None) -> Optional[float]:
        """Remaining lifetime in seconds, or None for no time-based expiry."""
        candidates = []
        if self.ttl is not None:
            candidates.append(self.ttl.total_seconds())
        if self.expires_at is not None:
            now = now or datetime.now(timezone.utc)
            expires_at = self.expires_at
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
            candidates.append((expires_at - now).total_seconds())

        if not candidates:
            return None
        return max(0.0, min(candidates))


class CacheBackend(ABC):
    """Key/value store consulted before, and written after, a request."""

    @abstractmethod
    async def try_get(self, key: str, response_type: Any = Any) -> Tuple[bool, Any]:
        """Return ``(True, value)`` on a hit and ``(False, None)`` on a miss."""

    @abstractmethod
    async def set(
        self,
        key: str,
        value: Any,
        response_type: Any = Any,
        expiration: Optional[CacheExpiration] = None
    ) -> None:
        """Store ``value`` under ``key`` with the given expiry."""
