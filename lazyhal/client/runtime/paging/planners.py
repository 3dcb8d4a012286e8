"""Demand planning for combinator chains.

This module provides the DemandPlanner class that decides, before the first
request is made, how many items a chain will draw from its source and hence
how large the first page should be.
"""

from __future__ import annotations

from .definitions import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    UNBOUNDED,
    ChainNode,
    Demand,
    DropNode,
    FilterNode,
    MapNode,
    SourceNode,
    TakeNode,
)


def transform_demand(node: ChainNode, downstream: Demand) -> Demand:
    """Translate what is required of ``node`` into what it requires of its upstream.

    Args:
        node: A combinator node
        downstream: Demand placed on ``node`` by whatever consumes it

    Returns:
        Demand placed on ``node.upstream``
    """
    if isinstance(node, TakeNode):
        return Demand.bounded(node.count).min(downstream)
    if isinstance(node, DropNode):
        return downstream + Demand.bounded(node.count)
    if isinstance(node, FilterNode):
        # Selectivity is unknown; any finite bound could starve a needed item
        return UNBOUNDED
    if isinstance(node, MapNode):
        return downstream
    raise TypeError(f"Not a combinator node: {node!r}")


def fold_demand(node: ChainNode) -> Demand:
    """Fold a chain from its outermost combinator down to the source.

    Starts from an unbounded demand, modelling a consumer that drains the chain.
    """
    demand = UNBOUNDED
    while not isinstance(node, SourceNode):
        demand = transform_demand(node, demand)
        node = node.upstream
    return demand


class DemandPlanner:
    """Sizes page requests from chain demand.

    Attributes:
        max_page_size: Largest page the API serves
        default_page_size: Page size used when the demand is unbounded
    """

    def __init__(
        self,
        max_page_size: int = MAX_PAGE_SIZE,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if max_page_size < 1:
            raise ValueError("max_page_size must be positive")
        if not 1 <= default_page_size <= max_page_size:
            raise ValueError("default_page_size must be between 1 and max_page_size")
        self.max_page_size = max_page_size
        self.default_page_size = default_page_size

    def plan(self, node: ChainNode) -> Demand:
        return fold_demand(node)

    def page_size(self, demand: Demand) -> int:
        """First-page request size for ``demand``."""
        if demand.limit is None:
            return self.default_page_size
        return min(demand.limit, self.max_page_size)

    def next_page_size(self, demand: Demand, received: int) -> int | None:
        """Size of a follow-up page once ``received`` items have arrived.

        Returns ``None`` when the continuation link should be used as given
        (unbounded demand), otherwise the remaining demand capped at the
        maximum page size (which may be 0 when nothing more is needed).
        """
        if demand.limit is None:
            return None
        return min(max(demand.limit - received, 0), self.max_page_size)
