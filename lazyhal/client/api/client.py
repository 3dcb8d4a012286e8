"""High-level API client."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ..config import ClientOptions, default_headers
from ..core.exceptions import UsageError
from ..runtime.paging import DemandPlanner
from ..runtime.rest import HTTPClient, RESTTransport, RetryPolicy, Sender
from .binder import ResourceBinder

logger = logging.getLogger(__name__)


class ApiClient:
    """Entry point: owns one transport shared by every resource binder.

    Example:
        async with create_client(api_endpoint="https://api.example.com/v2/", api_key="test_x") as client:
            payments = client.resource("payments", "payments")
            async for payment in payments.iterate().take(10):
                ...
    """

    def __init__(self, options: ClientOptions, *, send: Sender | None = None) -> None:
        from .. import __version__

        self.options = options
        http = HTTPClient(
            base_url=options.api_endpoint,
            timeout=options.timeout,
            headers=default_headers(options, __version__),
            ssl_context=options.ssl_context(),
        )
        self._transport = RESTTransport(
            http=http,
            send=send,
            retry_policy=RetryPolicy(
                attempt_limit=options.attempt_limit,
                retry_delay=options.retry_delay,
            ),
        )
        self._planner = DemandPlanner(
            max_page_size=options.max_page_size,
            default_page_size=options.default_page_size,
        )
        logger.debug(
            "api_client_created",
            extra={"api_endpoint": options.api_endpoint, "oauth": options.uses_oauth},
        )

    @property
    def transport(self) -> RESTTransport:
        return self._transport

    def resource(self, path: str, resource_key: str | None = None) -> ResourceBinder:
        """Binder for ``path``; ``resource_key`` defaults to its last segment."""
        key = resource_key or path.strip("/").rsplit("/", 1)[-1]
        return ResourceBinder(
            self._transport,
            path,
            key,
            planner=self._planner,
            low_water_mark=self.options.low_water_mark,
        )

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def create_client(*, send: Sender | None = None, **options: Any) -> ApiClient:
    """Create a client from keyword options.

    Raises:
        UsageError: If the options are invalid (e.g. no credentials)
    """
    try:
        parsed = ClientOptions(**options)
    except ValidationError as exc:
        raise UsageError(str(exc)) from exc
    return ApiClient(parsed, send=send)
