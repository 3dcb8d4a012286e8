"""Core enumerations."""

from enum import Enum

from .exceptions import UsageError


class HTTPMethod(str, Enum):
    """HTTP verbs used against the API.

    ``POST`` and ``DELETE`` are not idempotent at the server, so every logical
    request made with them carries an idempotency key.
    """

    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def idempotent(self) -> bool:
        return self not in (HTTPMethod.POST, HTTPMethod.DELETE)

    @classmethod
    def from_str(cls, value: "str | HTTPMethod") -> "HTTPMethod":
        if isinstance(value, HTTPMethod):
            return value
        try:
            return cls(value.upper())
        except ValueError as exc:
            raise UsageError(f"Unsupported HTTP method: {value!r}") from exc
