"""Resource binder: verbs and iteration on one list resource."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal
from urllib.parse import quote

from ..core.exceptions import UsageError
from ..models import Page
from ..runtime.paging import DemandPlanner, LazySequence, PagedSource, extract_embedded
from ..runtime.paging.definitions import LOW_WATER_MARK
from ..runtime.rest import RESTTransport


class ResourceBinder:
    """Binds a transport to one resource path.

    ``path`` is the collection path (``"payments"``,
    ``"customers/cst_8wmqcHMN4U/mandates"``) and ``resource_key`` the key under
    ``_embedded`` holding its items in list responses. Item shapes are opaque:
    everything is returned as decoded JSON.
    """

    def __init__(
        self,
        transport: RESTTransport,
        path: str,
        resource_key: str,
        *,
        planner: DemandPlanner | None = None,
        low_water_mark: int = LOW_WATER_MARK,
    ) -> None:
        if not path:
            raise UsageError("Resource path cannot be empty")
        self._transport = transport
        self.path = path.strip("/")
        self.resource_key = resource_key
        self._planner = planner or DemandPlanner()
        self._low_water_mark = low_water_mark

    def _item_path(self, resource_id: str) -> str:
        if not resource_id:
            raise UsageError("Resource id cannot be empty")
        return f"{self.path}/{quote(resource_id, safe='')}"

    async def get(self, resource_id: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self._transport.get(self._item_path(resource_id), params=params)

    async def create(
        self, data: Any, params: Mapping[str, Any] | None = None
    ) -> Any | Literal[True]:
        return await self._transport.post(self.path, json_body=data, params=params)

    async def update(self, resource_id: str, data: Any) -> Any | Literal[True]:
        return await self._transport.patch(self._item_path(resource_id), json_body=data)

    async def delete(self, resource_id: str, data: Any = None) -> Any | Literal[True]:
        return await self._transport.delete(self._item_path(resource_id), json_body=data)

    async def page(self, limit: int | None = None, **params: Any) -> Page:
        """Fetch a single page; ``limit`` defaults to the server's choice."""
        if limit is not None and not 1 <= limit <= self._planner.max_page_size:
            raise UsageError(f"limit must be between 1 and {self._planner.max_page_size}")
        return await self._source(params).fetch(limit)

    async def next_page(self, page: Page) -> Page | None:
        """Fetch the page following ``page``, or ``None`` if it was the last."""
        if page.continuation is None:
            return None
        return await self._source({}).fetch_next(page.continuation)

    async def list_plain(self, **params: Any) -> list[Any]:
        """Items of a list endpoint that is not paginated."""
        payload = await self._transport.get(self.path, params=params or None)
        return extract_embedded(payload, self.resource_key)

    def iterate(self, *, values_per_minute: float | None = None, **params: Any) -> LazySequence[Any]:
        """Lazy sequence over every item of the resource.

        Args:
            values_per_minute: Optional cap on the rate at which items are drawn
            **params: Extra query parameters (``limit`` is planned, not passed)
        """
        if "limit" in params:
            raise UsageError("iterate() plans page sizes itself; use take() to bound it")
        return LazySequence(
            self._source(params),
            planner=self._planner,
            low_water_mark=self._low_water_mark,
            values_per_minute=values_per_minute,
        )

    def _source(self, params: Mapping[str, Any]) -> PagedSource:
        return PagedSource(self._transport, self.path, self.resource_key, params)
