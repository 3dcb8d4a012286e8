"""HTTP client helper."""

from __future__ import annotations

import asyncio
import ssl
from collections.abc import Mapping
from typing import Optional

import aiohttp

from ...core.exceptions import TransportError
from .request import RestRequest, RestResponse


class HTTPClient:
    """Async HTTP client wrapper.

    Owns the aiohttp session (and with it the connection pool), which is shared
    by every request and every sequence built on top of this client.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        headers: Optional[Mapping[str, str]] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.headers = dict(headers or {})
        self._ssl_context = ssl_context
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(ssl=self._ssl_context) if self._ssl_context else None
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers=self.headers,
                connector=connector,
            )
        return self._session

    def resolve_url(self, path: str) -> str:
        # Continuation links are absolute; resource paths are relative to base_url
        if self.base_url and not path.startswith("http"):
            return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
        return path

    async def send(self, request: RestRequest) -> RestResponse:
        """Perform one attempt of ``request``.

        Any status is returned as a response; only failures to obtain a
        response at all raise, as ``TransportError``.
        """
        url = self.resolve_url(request.path)
        params = {k: _query_value(v) for k, v in request.params.items()} if request.params else None
        try:
            async with self.session.request(
                request.method.value,
                url,
                params=params,
                json=request.json_body,
                headers=dict(request.headers) or None,
            ) as response:
                body = await response.read()
                return RestResponse(
                    status=response.status,
                    headers={name.lower(): value for name, value in response.headers.items()},
                    body=body,
                )
        except asyncio.TimeoutError as exc:
            raise TransportError(f"Request to {url} timed out") from exc
        except aiohttp.ClientError as exc:
            raise TransportError(str(exc) or type(exc).__name__) from exc

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "HTTPClient":
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()


def _query_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
