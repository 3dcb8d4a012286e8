"""Request/response value types passed between transport layers.

Every layer of the REST runtime (HTTP client, retry and idempotency
middleware) shares one shape: a ``Sender`` is an async callable turning a
``RestRequest`` into a ``RestResponse``. Middleware wraps a sender and is itself
a sender, so layers compose without touching a shared client instance.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from ...core.enums import HTTPMethod


@dataclass(frozen=True)
class RestRequest:
    """A single logical request.

    Attributes:
        method: HTTP verb
        path: Path relative to the API endpoint, or an absolute URL (continuation links)
        params: Query parameters
        json_body: JSON body for write requests
        headers: Per-request headers, merged over the client defaults
        attempt: Zero-based attempt index, bumped on every retry of this request
    """

    method: HTTPMethod
    path: str
    params: Mapping[str, Any] | None = None
    json_body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)
    attempt: int = 0

    def with_headers(self, headers: Mapping[str, str]) -> RestRequest:
        return replace(self, headers={**self.headers, **headers})

    def next_attempt(self) -> RestRequest:
        return replace(self, attempt=self.attempt + 1)


@dataclass(frozen=True)
class RestResponse:
    """Status, headers and raw body of a received response.

    Header names are stored lower-cased.
    """

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    @classmethod
    def build(cls, status: int, headers: Mapping[str, str] | None = None, body: Any = b"") -> RestResponse:
        """Convenience constructor normalizing header case and encoding JSON bodies."""
        if not isinstance(body, (bytes, bytearray)):
            body = b"" if body is None else json.dumps(body).encode("utf-8")
        normalized = {name.lower(): value for name, value in (headers or {}).items()}
        return cls(status=status, headers=normalized, body=bytes(body))

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    def json(self) -> Any:
        """Decode the body; an empty body decodes to ``None``."""
        if not self.body:
            return None
        return json.loads(self.body)


Sender = Callable[[RestRequest], Awaitable[RestResponse]]
