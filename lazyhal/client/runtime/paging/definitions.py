"""Demand values and combinator chain nodes.

A chain is an immutable, singly linked tree of nodes: every combinator node
holds the node it was applied to as ``upstream``, ending in ``SourceNode``.
The outermost node is the most recently applied combinator.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union

from ...core.exceptions import UsageError

# Largest page the API will serve
MAX_PAGE_SIZE = 250
# Page size requested when the demand of a chain cannot be bounded
DEFAULT_PAGE_SIZE = 128
# Buffered items at or below which the next page is prefetched
LOW_WATER_MARK = 5


@dataclass(frozen=True)
class Demand:
    """How many items must ultimately be pulled from the source.

    ``limit`` is the bound, or ``None`` for an unbounded demand.
    """

    limit: int | None = None

    def __post_init__(self) -> None:
        if self.limit is not None and self.limit < 0:
            raise ValueError("Demand cannot be negative")

    @classmethod
    def bounded(cls, limit: int) -> Demand:
        return cls(limit)

    @classmethod
    def unbounded(cls) -> Demand:
        return UNBOUNDED

    @property
    def is_bounded(self) -> bool:
        return self.limit is not None

    def __add__(self, other: Demand) -> Demand:
        if self.limit is None or other.limit is None:
            return UNBOUNDED
        return Demand(self.limit + other.limit)

    def min(self, other: Demand) -> Demand:
        if self.limit is None:
            return other
        if other.limit is None:
            return self
        return Demand(min(self.limit, other.limit))

    def __repr__(self) -> str:
        return "Unbounded" if self.limit is None else f"Bounded({self.limit})"


UNBOUNDED = Demand(None)


def _check_count(count: Any, combinator: str) -> None:
    if isinstance(count, bool) or not isinstance(count, int):
        raise UsageError(f"{combinator}() expects an integer, got {count!r}")
    if count < 0:
        raise UsageError(f"{combinator}() expects a non-negative count, got {count}")


def _check_callable(func: Any, combinator: str) -> None:
    if not callable(func):
        raise UsageError(f"{combinator}() expects a callable, got {func!r}")


@dataclass(frozen=True)
class SourceNode:
    """The remote list itself."""


@dataclass(frozen=True)
class TakeNode:
    upstream: ChainNode
    count: int

    def __post_init__(self) -> None:
        _check_count(self.count, "take")


@dataclass(frozen=True)
class DropNode:
    upstream: ChainNode
    count: int

    def __post_init__(self) -> None:
        _check_count(self.count, "drop")


@dataclass(frozen=True)
class FilterNode:
    upstream: ChainNode
    predicate: Callable[[Any], Any]

    def __post_init__(self) -> None:
        _check_callable(self.predicate, "filter")


@dataclass(frozen=True)
class MapNode:
    upstream: ChainNode
    transform: Callable[[Any], Any]

    def __post_init__(self) -> None:
        _check_callable(self.transform, "map")


ChainNode = Union[SourceNode, TakeNode, DropNode, FilterNode, MapNode]
