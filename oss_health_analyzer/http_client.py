"""Shared HTTP client handling."""

import httpx

from oss_health_analyzer.config import get_verify_ssl

USER_AGENT = "oss-health-analyzer/1.0"

_async_http_client: httpx.AsyncClient | None = None
_async_http_client_verify_ssl: bool | None = None
# Clients replaced after an SSL setting change, closed on shutdown
_retired_http_clients: list[httpx.AsyncClient] = []


def _get_async_http_client() -> httpx.AsyncClient:
    """Get or create a global async HTTP client with connection pooling.

    Recreates the client if SSL verification setting has changed.
    """
    global _async_http_client, _async_http_client_verify_ssl
    current_verify_ssl = get_verify_ssl()

    if (
        _async_http_client is None
        or _async_http_client.is_closed
        or _async_http_client_verify_ssl != current_verify_ssl
    ):
        # An async client cannot be closed from this sync accessor
        if _async_http_client is not None and not _async_http_client.is_closed:
            _retired_http_clients.append(_async_http_client)

        _async_http_client = httpx.AsyncClient(
            verify=current_verify_ssl,
            timeout=10,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
            limits=httpx.Limits(
                max_connections=20,
                max_keepalive_connections=10,
                keepalive_expiry=30.0,
            ),
        )
        _async_http_client_verify_ssl = current_verify_ssl
    return _async_http_client


async def close_http_client() -> None:
    """Close the global HTTP client. Call this when shutting down."""
    global _async_http_client, _async_http_client_verify_ssl
    while _retired_http_clients:
        retired = _retired_http_clients.pop()
        if not retired.is_closed:
            await retired.aclose()
    if _async_http_client is not None and not _async_http_client.is_closed:
        await _async_http_client.aclose()
    _async_http_client = None
    _async_http_client_verify_ssl = None
