"""Data models.

All models are immutable pydantic v2 models. Resource items themselves stay
opaque (plain decoded JSON); mapping them to domain objects is up to callers.
"""

from .page import Page

__all__ = ["Page"]
