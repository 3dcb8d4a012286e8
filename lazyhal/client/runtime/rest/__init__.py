"""REST runtime abstractions."""

from .http_client import HTTPClient
from .request import RestRequest, RestResponse, Sender
from .retrying import (
    ATTEMPT_LIMIT,
    IDEMPOTENCY_HEADER,
    RETRY_DELAY,
    IdempotencySender,
    RetryingSender,
    RetryPolicy,
    generate_idempotency_key,
    parse_retry_after,
)
from .transport import RESTTransport

__all__ = [
    "HTTPClient",
    "RESTTransport",
    "RestRequest",
    "RestResponse",
    "Sender",
    "RetryPolicy",
    "RetryingSender",
    "IdempotencySender",
    "generate_idempotency_key",
    "parse_retry_after",
    "ATTEMPT_LIMIT",
    "RETRY_DELAY",
    "IDEMPOTENCY_HEADER",
]
