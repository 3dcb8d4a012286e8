"""Structured logging for paging operations.

This module provides telemetry hooks for lazy sequences, emitting
structured log records with event names as messages.
"""

from __future__ import annotations

import logging

from .definitions import Demand

logger = logging.getLogger(__name__)


def log_demand_planned(*, path: str, demand: Demand, page_size: int) -> None:
    """Log the demand computed for a chain on first iteration.

    Args:
        path: Resource path of the source
        demand: Folded chain demand
        page_size: Size requested for the first page
    """
    logger.info(
        "demand_planned",
        extra={
            "path": path,
            "demand": demand.limit,
            "bounded": demand.is_bounded,
            "page_size": page_size,
        },
    )


def log_page_fetched(
    *,
    path: str,
    page_index: int,
    items: int,
    has_next: bool,
    latency_ms: float | None = None,
) -> None:
    """Log arrival of a page.

    Args:
        path: Resource path (first page) or continuation link
        page_index: Zero-based index of the page within the iteration
        items: Number of items in the page
        has_next: Whether the page carries a continuation
        latency_ms: Latency in milliseconds (optional)
    """
    logger.info(
        "page_fetched",
        extra={
            "path": path,
            "page_index": page_index,
            "items": items,
            "has_next": has_next,
            "latency_ms": latency_ms,
        },
    )


def log_prefetch_started(*, page_index: int, buffered: int, limit: int | None) -> None:
    logger.debug(
        "prefetch_started",
        extra={"page_index": page_index, "buffered": buffered, "limit": limit},
    )


def log_prefetch_discarded(*, page_index: int) -> None:
    logger.debug("prefetch_discarded", extra={"page_index": page_index})
