"""
Request URI resolution against a client's base address.
"""

from typing import Optional, Union

import httpx

from shared.errors import UriResolutionError


def resolve_uri(base_url: Union[httpx.URL, str, None], uri: Optional[str] = None) -> httpx.URL:
    """Combine a base address with a possibly-relative URI.

    With a base address, ``uri`` is resolved against it per RFC 3986 and an
    empty ``uri`` yields the base itself. Without one, ``uri`` must already be
    absolute.
    """
    base = httpx.URL(base_url) if base_url else None

    if base is not None and str(base):
        if not base.is_absolute_url:
            raise UriResolutionError(
                "Base address must be absolute",
                details={"base_address": str(base)}
            )
        return base.join(uri) if uri else base

    if not uri:
        raise UriResolutionError("A request URI is required when no base address is configured")

    try:
        full_uri = httpx.URL(uri)
    except httpx.InvalidURL as e:
        raise UriResolutionError(f"Invalid request URI: {e}", details={"uri": uri}) from e

    if not full_uri.is_absolute_url:
        raise UriResolutionError(details={"uri": uri})
    return full_uri
