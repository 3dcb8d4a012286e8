"""Parsing of HAL list envelopes."""

from __future__ import annotations

from typing import Any

from ...core.exceptions import EnvelopeError
from ...models import Page

_UNEXPECTED = "Received unexpected response from the server"


def extract_embedded(payload: Any, resource_key: str) -> list[Any]:
    """Return ``_embedded.<resource_key>`` of a list response."""
    if not isinstance(payload, dict):
        raise EnvelopeError(_UNEXPECTED, body=payload)
    embedded = payload.get("_embedded")
    if not isinstance(embedded, dict):
        raise EnvelopeError(_UNEXPECTED, body=payload)
    items = embedded.get(resource_key)
    if not isinstance(items, list):
        raise EnvelopeError(
            f"{_UNEXPECTED}: no embedded {resource_key!r} list", body=payload
        )
    return items


def parse_envelope(payload: Any, resource_key: str) -> Page:
    """Parse ``{"_embedded": {key: [...]}, "_links": {"next": {"href": ...}}, "count": n}``.

    A missing or null ``_links.next`` marks the last page.

    Raises:
        EnvelopeError: If the payload does not have the envelope shape
    """
    items = extract_embedded(payload, resource_key)

    links = payload.get("_links") or {}
    if not isinstance(links, dict):
        raise EnvelopeError(_UNEXPECTED, body=payload)
    next_link = links.get("next")
    continuation: str | None = None
    if next_link is not None:
        href = next_link.get("href") if isinstance(next_link, dict) else None
        if not isinstance(href, str) or not href:
            raise EnvelopeError(f"{_UNEXPECTED}: malformed next link", body=payload)
        continuation = href

    count = payload.get("count", len(items))
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise EnvelopeError(f"{_UNEXPECTED}: malformed count", body=payload)

    return Page(items=items, continuation=continuation, count=count)
