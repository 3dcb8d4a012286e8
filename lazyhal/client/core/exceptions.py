"""Custom exception hierarchy."""

from __future__ import annotations

import json
from typing import Any


class ClientError(Exception):
    """Base exception for all library errors."""

    pass


class TransportError(ClientError):
    """No response was obtained (DNS failure, connection reset, timeout).

    The underlying cause is chained as ``__cause__``.
    """

    pass


class ApiError(ClientError):
    """The API answered with a non-2xx status.

    Carries the resolved HTTP status and whatever the server put in its error
    body (``title``, ``detail``, ``field`` and ``_links`` for HAL error documents).
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        *,
        title: str | None = None,
        field: str | None = None,
        links: dict[str, Any] | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.title = title
        self.field = field
        self.links = links or {}
        self.body = body

    @classmethod
    def from_response(cls, status_code: int, body: bytes | str | None) -> ApiError:
        """Build an error from a raw response status and body."""
        text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
        payload: Any = text
        if text:
            try:
                payload = json.loads(text)
            except ValueError:
                payload = text

        if isinstance(payload, dict):
            detail = payload.get("detail")
            title = payload.get("title")
            message = str(detail or title or f"HTTP {status_code}")
            links = payload.get("_links") if isinstance(payload.get("_links"), dict) else None
            return cls(
                message,
                status_code,
                title=title,
                field=payload.get("field"),
                links=links,
                body=payload,
            )

        message = text.strip() if isinstance(text, str) and text.strip() else f"HTTP {status_code}"
        return cls(message, status_code, body=payload)


class EnvelopeError(ApiError):
    """A 2xx response whose body is not the expected paginated envelope."""

    pass


class UsageError(ClientError, ValueError):
    """Invalid argument supplied by the caller, detected before any network access."""

    pass
