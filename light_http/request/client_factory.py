"""HTTP client factory with settings-driven defaults."""

from typing import Optional

from httpx import AsyncClient, Limits, Timeout

from shared.config import LightHttpConfig, get_config


class HTTPClientFactory:
    """Factory for creating HTTP clients with consistent configuration."""

    @staticmethod
    def create(
        base_address: Optional[str] = None,
        timeout_seconds: float = 20.0,
        max_connections: int = 50,
        max_keepalive_connections: int = 10,
    ) -> AsyncClient:
        """Create a new AsyncClient.

        Args:
            base_address: Base address relative request URIs resolve against.
            timeout_seconds: Request timeout in seconds.
            max_connections: Connection pool size.
            max_keepalive_connections: Idle connections kept alive.

        Returns:
            Configured AsyncClient instance.
        """
        timeout = Timeout(timeout_seconds)
        limits = Limits(
            max_keepalive_connections=max_keepalive_connections,
            max_connections=max_connections,
        )
        return AsyncClient(base_url=base_address or "", timeout=timeout, limits=limits)


def create_http_client(config: Optional[LightHttpConfig] = None) -> AsyncClient:
    """Create an AsyncClient from settings.

    Note:
        The caller owns the client; call ``aclose()`` at shutdown.
    """
    config = config or get_config()
    return HTTPClientFactory.create(
        base_address=config.base_address,
        timeout_seconds=config.timeout_seconds,
        max_connections=config.max_connections,
        max_keepalive_connections=config.max_keepalive_connections,
    )
