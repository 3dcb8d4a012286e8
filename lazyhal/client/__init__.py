"""LazyHal client - lazy, composable iteration over HAL REST APIs."""

from .api import ApiClient, ResourceBinder, create_client
from .config import ClientOptions, compose_user_agent
from .core import ApiError, ClientError, EnvelopeError, HTTPMethod, TransportError, UsageError
from .models import Page
from .runtime.paging import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    Demand,
    DemandPlanner,
    LazySequence,
    PagedSource,
)
from .runtime.rest import (
    HTTPClient,
    IdempotencySender,
    RESTTransport,
    RestRequest,
    RestResponse,
    RetryingSender,
    RetryPolicy,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "ApiClient",
    "ResourceBinder",
    "create_client",
    "ClientOptions",
    "compose_user_agent",
    # Models
    "Page",
    # Paging
    "Demand",
    "DemandPlanner",
    "LazySequence",
    "PagedSource",
    "MAX_PAGE_SIZE",
    "DEFAULT_PAGE_SIZE",
    # Transport
    "HTTPClient",
    "RESTTransport",
    "RestRequest",
    "RestResponse",
    "RetryPolicy",
    "RetryingSender",
    "IdempotencySender",
    # Exceptions
    "ClientError",
    "TransportError",
    "ApiError",
    "EnvelopeError",
    "UsageError",
    "HTTPMethod",
]
