"""Lazy, composable sequences over paginated resources."""

from __future__ import annotations

import inspect
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from functools import cached_property
from typing import Any, Generic, TypeVar

from .cursor import PageCursor
from .definitions import (
    LOW_WATER_MARK,
    ChainNode,
    Demand,
    DropNode,
    FilterNode,
    MapNode,
    SourceNode,
    TakeNode,
)
from .planners import DemandPlanner
from .source import PagedSource
from .telemetry import log_demand_planned

T = TypeVar("T")


class LazySequence(Generic[T]):
    """Asynchronous sequence of the items of a paginated resource.

    Each combinator returns a new sequence wrapping this one; nothing is
    fetched until the sequence is iterated with ``async for``::

        async for payment in client.resource("payments", "payments").iterate().drop(10).take(80):
            ...

    On first iteration the chain is folded by the ``DemandPlanner`` to size the
    first page request. Every iteration pass gets its own ``PageCursor``.
    Wrap the iteration in ``contextlib.aclosing`` to release an unfinished
    pass deterministically when breaking out early.
    """

    def __init__(
        self,
        source: PagedSource,
        node: ChainNode | None = None,
        *,
        planner: DemandPlanner | None = None,
        low_water_mark: int = LOW_WATER_MARK,
        values_per_minute: float | None = None,
    ) -> None:
        self._source = source
        self._node: ChainNode = node if node is not None else SourceNode()
        self._planner = planner or DemandPlanner()
        self._low_water_mark = low_water_mark
        self._values_per_minute = values_per_minute

    @property
    def node(self) -> ChainNode:
        return self._node

    @cached_property
    def demand(self) -> Demand:
        """Items this chain draws from its source when drained, computed once."""
        return self._planner.plan(self._node)

    def take(self, count: int) -> LazySequence[T]:
        """Yield at most ``count`` items."""
        return self._wrap(TakeNode(self._node, count))

    def drop(self, count: int) -> LazySequence[T]:
        """Skip the first ``count`` items."""
        return self._wrap(DropNode(self._node, count))

    def filter(self, predicate: Callable[[T], Any]) -> LazySequence[T]:
        """Yield only items for which ``predicate`` (sync or async) holds."""
        return self._wrap(FilterNode(self._node, predicate))

    def map(self, transform: Callable[[T], Any]) -> LazySequence[Any]:
        """Yield ``transform(item)`` (sync or async) for every item."""
        return self._wrap(MapNode(self._node, transform))

    async def to_list(self) -> list[T]:
        async with aclosing(self._iterate()) as items:
            return [item async for item in items]

    def __aiter__(self) -> AsyncIterator[T]:
        return self._iterate()

    def _wrap(self, node: ChainNode) -> LazySequence[Any]:
        return LazySequence(
            self._source,
            node,
            planner=self._planner,
            low_water_mark=self._low_water_mark,
            values_per_minute=self._values_per_minute,
        )

    async def _iterate(self) -> AsyncIterator[T]:
        demand = self.demand
        page_size = self._planner.page_size(demand)
        log_demand_planned(path=self._source.path, demand=demand, page_size=page_size)
        if page_size == 0:
            return

        cursor = PageCursor(
            self._source,
            demand,
            planner=self._planner,
            low_water_mark=self._low_water_mark,
            values_per_minute=self._values_per_minute,
        )
        try:
            async with aclosing(_pull(self._node, cursor)) as items:
                async for item in items:
                    yield item
        finally:
            await cursor.aclose()


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def _pull(node: ChainNode, cursor: PageCursor) -> AsyncIterator[Any]:
    """Yield the items produced by ``node``, pulling from ``cursor`` on demand."""
    if isinstance(node, SourceNode):
        async for item in cursor:
            yield item
        return

    async with aclosing(_pull(node.upstream, cursor)) as upstream:
        if isinstance(node, TakeNode):
            if node.count == 0:
                return
            taken = 0
            async for item in upstream:
                yield item
                taken += 1
                if taken >= node.count:
                    return
        elif isinstance(node, DropNode):
            skipped = 0
            async for item in upstream:
                if skipped < node.count:
                    skipped += 1
                    continue
                yield item
        elif isinstance(node, FilterNode):
            async for item in upstream:
                if await _resolve(node.predicate(item)):
                    yield item
        elif isinstance(node, MapNode):
            async for item in upstream:
                yield await _resolve(node.transform(item))
        else:
            raise TypeError(f"Unknown chain node: {node!r}")
