"""
Tests for the shared HTTP client.
"""

import pytest

from oss_health_analyzer import http_client
from oss_health_analyzer.config import set_verify_ssl


@pytest.mark.asyncio
async def test_client_is_reused_while_settings_are_unchanged():
    first = http_client._get_async_http_client()
    try:
        assert http_client._get_async_http_client() is first
    finally:
        await http_client.close_http_client()
    assert first.is_closed


@pytest.mark.asyncio
async def test_ssl_change_retires_and_closes_previous_client():
    set_verify_ssl(True)
    verified = http_client._get_async_http_client()
    set_verify_ssl(False)
    insecure = http_client._get_async_http_client()

    assert insecure is not verified
    assert verified in http_client._retired_http_clients

    await http_client.close_http_client()

    assert verified.is_closed
    assert insecure.is_closed
    assert http_client._retired_http_clients == []
    assert http_client._async_http_client is None
