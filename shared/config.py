"""
Shared configuration management for the light HTTP request layer.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Optional, TYPE_CHECKING

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from light_http.caching.backend import CacheExpiration


class LightHttpConfig(BaseSettings):
    """Settings for building clients and caches, read from LIGHT_HTTP_* variables."""

    model_config = SettingsConfigDict(
        env_prefix="LIGHT_HTTP_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # HTTP client
    base_address: Optional[str] = Field(default=None)
    timeout_seconds: float = Field(default=20.0, gt=0)
    max_connections: int = Field(default=50, ge=1)
    max_keepalive_connections: int = Field(default=10, ge=0)

    # Distributed cache
    redis_url: str = Field(default="redis://localhost:6379/0")
    redis_key_prefix: str = Field(default="")

    # Local cache
    memory_cache_maxsize: int = Field(default=1024, ge=1)

    # Expiry applied when a cached call passes none; unset means no expiry
    default_cache_ttl_seconds: Optional[int] = Field(default=300, ge=0)

    def default_expiration(self) -> Optional["CacheExpiration"]:
        """Build the default cache expiration policy from settings."""
        from light_http.caching.backend import CacheExpiration

        if self.default_cache_ttl_seconds is None:
            return None
        return CacheExpiration(ttl=timedelta(seconds=self.default_cache_ttl_seconds))


@lru_cache(maxsize=1)
def get_config() -> LightHttpConfig:
    """Get cached configuration instance."""
    return LightHttpConfig()
