"""Core components."""

from .enums import HTTPMethod
from .exceptions import ApiError, ClientError, EnvelopeError, TransportError, UsageError

__all__ = [
    "HTTPMethod",
    "ClientError",
    "TransportError",
    "ApiError",
    "EnvelopeError",
    "UsageError",
]
