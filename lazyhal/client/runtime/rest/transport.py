"""REST transport: authenticated verbs on top of the sender stack."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from ...core.enums import HTTPMethod
from ...core.exceptions import ApiError
from .http_client import HTTPClient
from .request import RestRequest, RestResponse, Sender
from .retrying import IdempotencySender, RetryingSender, RetryPolicy


class RESTTransport:
    """Issues requests and turns responses into decoded bodies or ``ApiError``.

    The sender stack is ``IdempotencySender(RetryingSender(send))`` where
    ``send`` defaults to the aiohttp-backed ``HTTPClient.send``. Tests and
    callers may inject another ``send`` (a fake server, a recorder, ...).

    A 204 response maps to ``True`` rather than a decoded body.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float = 30.0,
        retry_policy: RetryPolicy | None = None,
        send: Sender | None = None,
        http: HTTPClient | None = None,
    ) -> None:
        self._http = http or HTTPClient(base_url=base_url, timeout=timeout, headers=headers)
        self._retrying = RetryingSender(send or self._http.send, retry_policy)
        self._send: Sender = IdempotencySender(self._retrying)

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retrying.policy

    async def request(
        self,
        method: HTTPMethod | str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> RestResponse:
        """Send one logical request and raise ``ApiError`` unless it succeeded."""
        request = RestRequest(
            method=HTTPMethod.from_str(method),
            path=path,
            params=params,
            json_body=json_body,
            headers=dict(headers or {}),
        )
        response = await self._send(request)
        if not response.ok:
            raise ApiError.from_response(response.status, response.body)
        return response

    async def get(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        response = await self.request(HTTPMethod.GET, path, params=params, headers=headers)
        return _decode(response)

    async def post(
        self,
        path: str,
        json_body: Any = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any | Literal[True]:
        response = await self.request(
            HTTPMethod.POST, path, params=params, json_body=json_body, headers=headers
        )
        return _decode(response)

    async def patch(
        self,
        path: str,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any | Literal[True]:
        response = await self.request(HTTPMethod.PATCH, path, json_body=json_body, headers=headers)
        return _decode(response)

    async def delete(
        self,
        path: str,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any | Literal[True]:
        response = await self.request(HTTPMethod.DELETE, path, json_body=json_body, headers=headers)
        return _decode(response)

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> "RESTTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def _decode(response: RestResponse) -> Any:
    if response.status == 204:
        return True
    try:
        return response.json()
    except ValueError as exc:
        raise ApiError(
            "Received unexpected response from the server", response.status, body=response.body
        ) from exc
