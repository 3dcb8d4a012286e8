"""Page data model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Page(BaseModel):
    """One page of a paginated list response.

    ``continuation`` is the ``_links.next.href`` of the envelope; it is ``None``
    exactly when this is the last page. ``count`` is informational only.
    """

    items: list[Any] = Field(default_factory=list)
    continuation: str | None = None
    count: int = Field(default=0, ge=0)

    @property
    def is_last(self) -> bool:
        return self.continuation is None

    def __len__(self) -> int:
        return len(self.items)

    model_config = ConfigDict(frozen=True)
