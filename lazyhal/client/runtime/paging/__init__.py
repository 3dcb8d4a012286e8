"""Lazy pagination layer.

Architecture:
    - definitions.py: Demand values, chain node variants and paging constants
    - planners.py: Demand folding and page sizing (no I/O)
    - envelope.py: HAL list envelope parsing
    - source.py: One-page-at-a-time access to a list resource
    - cursor.py: Buffer with low-water-mark prefetch
    - sequence.py: User-facing combinator chain
    - telemetry.py: Structured logging
"""

from __future__ import annotations

from .cursor import PageCursor
from .definitions import (
    DEFAULT_PAGE_SIZE,
    LOW_WATER_MARK,
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
from .envelope import extract_embedded, parse_envelope
from .planners import DemandPlanner, fold_demand, transform_demand
from .sequence import LazySequence
from .source import PagedSource, with_limit

__all__ = [
    "Demand",
    "UNBOUNDED",
    "ChainNode",
    "SourceNode",
    "TakeNode",
    "DropNode",
    "FilterNode",
    "MapNode",
    "MAX_PAGE_SIZE",
    "DEFAULT_PAGE_SIZE",
    "LOW_WATER_MARK",
    "DemandPlanner",
    "fold_demand",
    "transform_demand",
    "parse_envelope",
    "extract_embedded",
    "PagedSource",
    "with_limit",
    "PageCursor",
    "LazySequence",
]
