"""Shared fixtures: an in-memory HAL API standing in for the network."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from urllib.parse import parse_qsl, urlsplit

import pytest

from lazyhal.client.runtime.paging import DemandPlanner, LazySequence, PagedSource
from lazyhal.client.runtime.rest import RESTTransport, RestRequest, RestResponse, RetryPolicy

BASE_URL = "https://api.example.com/v2/"


def request_query(request: RestRequest) -> dict[str, str]:
    """Query of a recorded request, merging link query and params."""
    query = dict(parse_qsl(urlsplit(request.path).query))
    query.update({key: str(value) for key, value in (request.params or {}).items()})
    return query


class FakeHalServer:
    """Serves ``total`` items of one resource as HAL pages.

    Every attempt reaching the server is recorded in ``requests``. Pages
    listed in ``gates`` block until their event is set; ``overrides`` maps a
    page index to a canned response.
    """

    def __init__(self, total: int, resource_key: str = "payments", path: str = "payments") -> None:
        self.total = total
        self.resource_key = resource_key
        self.path = path
        self.requests: list[RestRequest] = []
        self.gates: dict[int, asyncio.Event] = {}
        self.overrides: dict[int, RestResponse] = {}

    @property
    def limits(self) -> list[int]:
        return [int(request_query(request)["limit"]) for request in self.requests]

    async def __call__(self, request: RestRequest) -> RestResponse:
        page_index = len(self.requests)
        self.requests.append(request)
        if page_index in self.gates:
            await self.gates[page_index].wait()
        if page_index in self.overrides:
            return self.overrides[page_index]

        query = request_query(request)
        start = int(query.get("from", 0))
        limit = int(query.get("limit", 50))
        end = min(start + limit, self.total)
        items = [{"resource": "payment", "id": f"tr_{index}", "index": index} for index in range(start, end)]
        links: dict[str, object] = {"self": {"href": f"{BASE_URL}{self.path}?from={start}&limit={limit}"}}
        links["next"] = (
            {"href": f"{BASE_URL}{self.path}?from={end}&limit={limit}"} if end < self.total else None
        )
        return RestResponse.build(
            200,
            {"Content-Type": "application/hal+json"},
            {"count": len(items), "_embedded": {self.resource_key: items}, "_links": links},
        )


@pytest.fixture
def make_server() -> Callable[..., FakeHalServer]:
    return FakeHalServer


@pytest.fixture
def make_sequence() -> Callable[..., LazySequence]:
    """Build a sequence over a fake server without retries."""

    def factory(
        server: FakeHalServer,
        *,
        default_page_size: int = 128,
        max_page_size: int = 250,
        low_water_mark: int = 5,
        values_per_minute: float | None = None,
    ) -> LazySequence:
        transport = RESTTransport(
            base_url=BASE_URL, send=server, retry_policy=RetryPolicy(attempt_limit=1)
        )
        source = PagedSource(transport, server.path, server.resource_key)
        return LazySequence(
            source,
            planner=DemandPlanner(max_page_size=max_page_size, default_page_size=default_page_size),
            low_water_mark=low_water_mark,
            values_per_minute=values_per_minute,
        )

    return factory
