"""Precise unit tests for HTTPClient.

Tests focus on session management, URL resolution and turning aiohttp
outcomes into responses or transport errors.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from lazyhal.client.core import HTTPMethod, TransportError
from lazyhal.client.runtime.rest import HTTPClient, RestRequest


def mock_session_with(response=None, error=None):
    mock_session = MagicMock()
    mock_session.closed = False  # Important: session property checks this
    if error is not None:
        mock_session.request = MagicMock(side_effect=error)
    else:
        mock_session.request = MagicMock(return_value=response)
    return mock_session


def mock_response(status=200, headers=None, body=b"{}"):
    response = AsyncMock()
    response.status = status
    response.headers = headers or {}
    response.read = AsyncMock(return_value=body)
    response.__aenter__ = AsyncMock(return_value=response)
    response.__aexit__ = AsyncMock(return_value=None)
    return response


class TestHTTPClientSessionManagement:
    """Test HTTPClient session management."""

    def test_init(self):
        """Test HTTPClient initialization."""
        client = HTTPClient(timeout=10.0)
        assert client.timeout.total == 10.0
        assert client._session is None
        assert client.headers == {}

    def test_init_with_base_url(self):
        """Test HTTPClient with base_url."""
        client = HTTPClient(base_url="https://api.example.com/v2/", timeout=30.0)
        assert client.base_url == "https://api.example.com/v2/"

    @pytest.mark.asyncio
    async def test_session_property_creates_session(self):
        """Test session property creates session when needed."""
        client = HTTPClient(headers={"Accept": "application/hal+json"})
        assert client._session is None

        session = client.session
        assert isinstance(session, aiohttp.ClientSession)
        assert client._session is session
        assert session.headers["Accept"] == "application/hal+json"
        await client.close()

    @pytest.mark.asyncio
    async def test_session_property_recreates_closed_session(self):
        """Test session property recreates closed session."""
        client = HTTPClient()
        session1 = client.session
        await session1.close()

        session2 = client.session
        assert session1 is not session2
        assert not session2.closed
        await client.close()

    @pytest.mark.asyncio
    async def test_close_idempotent(self):
        """Test close() can be called multiple times."""
        client = HTTPClient()
        await client.close()
        await client.close()  # Should not raise

    @pytest.mark.asyncio
    async def test_context_manager(self):
        """Test HTTPClient as async context manager."""
        async with HTTPClient() as client:
            assert client.session is not None

        # Session should be closed after context exit
        assert client._session is None or client._session.closed


class TestHTTPClientURLs:
    """Test URL resolution."""

    def test_relative_path_joined_to_base(self):
        client = HTTPClient(base_url="https://api.example.com/v2/")
        assert client.resolve_url("payments") == "https://api.example.com/v2/payments"
        assert client.resolve_url("/payments/tr_1") == "https://api.example.com/v2/payments/tr_1"

    def test_absolute_link_used_as_is(self):
        client = HTTPClient(base_url="https://api.example.com/v2/")
        link = "https://api.example.com/v2/payments?from=tr_5&limit=5"
        assert client.resolve_url(link) == link


class TestHTTPClientSend:
    """Test send() outcomes."""

    @pytest.mark.asyncio
    async def test_send_returns_response(self):
        client = HTTPClient(base_url="https://api.example.com/v2/")
        response = mock_response(200, {"Content-Type": "application/hal+json", "Retry-After": "3"}, b'{"id": "tr_1"}')
        client._session = mock_session_with(response)

        result = await client.send(
            RestRequest(HTTPMethod.GET, "payments/tr_1", params={"testmode": True, "limit": 5})
        )

        assert result.status == 200
        assert result.header("retry-after") == "3"
        assert result.json() == {"id": "tr_1"}
        client._session.request.assert_called_once_with(
            "GET",
            "https://api.example.com/v2/payments/tr_1",
            params={"testmode": "true", "limit": "5"},
            json=None,
            headers=None,
        )

    @pytest.mark.asyncio
    async def test_send_passes_body_and_headers(self):
        client = HTTPClient(base_url="https://api.example.com/v2/")
        client._session = mock_session_with(mock_response(201, body=b'{"id": "cst_1"}'))

        await client.send(
            RestRequest(
                HTTPMethod.POST,
                "customers",
                json_body={"name": "Customer A"},
                headers={"Idempotency-Key": "abc"},
            )
        )

        _, kwargs = client._session.request.call_args
        assert kwargs["json"] == {"name": "Customer A"}
        assert kwargs["headers"] == {"Idempotency-Key": "abc"}

    @pytest.mark.asyncio
    async def test_error_status_is_a_response_not_an_exception(self):
        client = HTTPClient()
        client._session = mock_session_with(mock_response(503, body=b""))

        result = await client.send(RestRequest(HTTPMethod.GET, "https://api.example.com/v2/payments"))

        assert result.status == 503
        assert not result.ok

    @pytest.mark.asyncio
    async def test_connection_error_becomes_transport_error(self):
        client = HTTPClient()
        client._session = mock_session_with(error=aiohttp.ClientConnectionError("Connection reset by peer"))

        with pytest.raises(TransportError, match="Connection reset by peer") as exc_info:
            await client.send(RestRequest(HTTPMethod.GET, "https://api.example.com/v2/payments"))
        assert isinstance(exc_info.value.__cause__, aiohttp.ClientConnectionError)

    @pytest.mark.asyncio
    async def test_timeout_becomes_transport_error(self):
        client = HTTPClient()
        client._session = mock_session_with(error=asyncio.TimeoutError())

        with pytest.raises(TransportError, match="timed out"):
            await client.send(RestRequest(HTTPMethod.GET, "https://api.example.com/v2/payments"))
