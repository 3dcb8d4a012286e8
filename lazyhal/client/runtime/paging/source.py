"""Single-page access to a paginated resource."""

from __future__ import annotations

from collections.abc import Mapping
from time import perf_counter
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from ...models import Page
from ..rest.transport import RESTTransport
from .envelope import parse_envelope
from .telemetry import log_page_fetched


class PagedSource:
    """Fetches pages of one list resource.

    Args:
        transport: Transport used for the requests
        path: Resource path, e.g. ``"customers/cst_8wmqcHMN4U/payments"``
        resource_key: Key under ``_embedded`` holding the items
        params: Extra query parameters sent with the first page request
    """

    def __init__(
        self,
        transport: RESTTransport,
        path: str,
        resource_key: str,
        params: Mapping[str, Any] | None = None,
    ) -> None:
        self._transport = transport
        self.path = path
        self.resource_key = resource_key
        self.params = dict(params or {})

    async def fetch(self, limit: int | None = None, *, page_index: int = 0) -> Page:
        """GET the first page, asking for ``limit`` items."""
        query = dict(self.params)
        if limit is not None:
            query["limit"] = limit
        return await self._fetch(self.path, query or None, page_index)

    async def fetch_next(
        self, continuation: str, limit: int | None = None, *, page_index: int = 0
    ) -> Page:
        """GET the page a continuation link points at.

        The link is used verbatim except for its ``limit`` parameter, which is
        replaced when ``limit`` is given.
        """
        target = continuation if limit is None else with_limit(continuation, limit)
        return await self._fetch(target, None, page_index)

    async def _fetch(self, target: str, query: dict[str, Any] | None, page_index: int) -> Page:
        start = perf_counter()
        payload = await self._transport.get(target, params=query)
        page = parse_envelope(payload, self.resource_key)
        log_page_fetched(
            path=target,
            page_index=page_index,
            items=len(page.items),
            has_next=page.continuation is not None,
            latency_ms=(perf_counter() - start) * 1000.0,
        )
        return page


def with_limit(link: str, limit: int) -> str:
    """Return ``link`` with its ``limit`` query parameter set to ``limit``."""
    parts = urlsplit(link)
    query = [(key, value) for key, value in parse_qsl(parts.query, keep_blank_values=True) if key != "limit"]
    query.append(("limit", str(limit)))
    return urlunsplit(parts._replace(query=urlencode(query)))
