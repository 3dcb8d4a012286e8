"""Buffered, prefetching cursor over the items of a paged source."""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Any

from ...models import Page
from .definitions import LOW_WATER_MARK, Demand
from .planners import DemandPlanner
from .source import PagedSource
from .telemetry import log_prefetch_discarded, log_prefetch_started


class PageCursor:
    """Pull-based iterator over the raw items of a source.

    Holds the items of the current page that have not been handed out yet and
    at most one pending page request. When a pull finds the buffer at or
    below the low-water mark and the current page has a continuation, the
    next page is requested as a task and consumption of the buffer goes on
    while it is in flight. A pull on an empty buffer waits for that task.

    The check runs at the start of a pull rather than after handing out an
    item, so a consumer that stops after an item never triggers a request.

    Once the items received cover a bounded ``demand``, no further page is
    requested.

    A cursor belongs to one iteration pass; ``aclose`` discards the buffer and
    any pending request without surfacing its outcome.
    """

    def __init__(
        self,
        source: PagedSource,
        demand: Demand,
        *,
        planner: DemandPlanner | None = None,
        low_water_mark: int = LOW_WATER_MARK,
        values_per_minute: float | None = None,
    ) -> None:
        if values_per_minute is not None and values_per_minute <= 0:
            raise ValueError("values_per_minute must be positive")
        self._source = source
        self._demand = demand
        self._planner = planner or DemandPlanner()
        self._low_water_mark = low_water_mark
        self._interval = 60.0 / values_per_minute if values_per_minute else None

        self._buffer: deque[Any] = deque()
        self._continuation: str | None = None
        self._pending: asyncio.Task[Page] | None = None
        self._started = False
        self._closed = False
        self._received = 0
        self._pages = 0
        self._last_emit: float | None = None

    @property
    def pending(self) -> bool:
        """Whether a page request is in flight."""
        return self._pending is not None

    @property
    def buffered(self) -> int:
        return len(self._buffer)

    def __aiter__(self) -> PageCursor:
        return self

    async def __anext__(self) -> Any:
        if self._closed:
            raise StopAsyncIteration
        if not self._started:
            self._started = True
            self._load(await self._source.fetch(self._planner.page_size(self._demand)))
        else:
            await self._maybe_prefetch()

        while not self._buffer:
            if self._pending is None:
                # Empty page that still has a continuation
                await self._maybe_prefetch(force=True)
            if self._pending is None:
                raise StopAsyncIteration
            pending = self._pending
            try:
                page = await pending
            finally:
                self._pending = None
            self._load(page)

        item = self._buffer.popleft()
        await self._throttle()
        return item

    async def aclose(self) -> None:
        """Drop buffered items and release any in-flight request."""
        self._closed = True
        self._buffer.clear()
        self._continuation = None
        pending, self._pending = self._pending, None
        if pending is not None:
            if not pending.done():
                pending.cancel()
            log_prefetch_discarded(page_index=self._pages)

    def _load(self, page: Page) -> None:
        self._pages += 1
        self._received += len(page.items)
        self._buffer.extend(page.items)
        self._continuation = page.continuation

    def _remaining_limit(self) -> int | None:
        return self._planner.next_page_size(self._demand, self._received)

    async def _maybe_prefetch(self, *, force: bool = False) -> None:
        if self._pending is not None or self._continuation is None:
            return
        if not force and len(self._buffer) > self._low_water_mark:
            return
        limit = self._remaining_limit()
        if limit == 0:
            return

        log_prefetch_started(page_index=self._pages, buffered=len(self._buffer), limit=limit)
        task = asyncio.create_task(
            self._source.fetch_next(self._continuation, limit, page_index=self._pages)
        )
        task.add_done_callback(_retrieve_outcome)
        self._pending = task
        # Tasks start lazily; yield once so the request is sent before more
        # buffered items are handed out.
        await asyncio.sleep(0)

    async def _throttle(self) -> None:
        if self._interval is None:
            return
        loop = asyncio.get_running_loop()
        if self._last_emit is not None:
            wait = self._last_emit + self._interval - loop.time()
            if wait > 0:
                await asyncio.sleep(wait)
        self._last_emit = loop.time()


def _retrieve_outcome(task: asyncio.Task[Page]) -> None:
    # Marks the exception retrieved so an abandoned prefetch never reports it;
    # an awaited task still raises it to the consumer.
    if not task.cancelled():
        task.exception()
