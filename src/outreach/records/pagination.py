"""Pagination over the filtered view.

Navigation never fails: out-of-range page numbers are clamped.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from outreach.domain.models import Record

DEFAULT_PAGE_SIZE = 10


class Page(BaseModel):
    """The visible slice of the filtered view."""

    model_config = ConfigDict(frozen=True)

    number: int
    page_count: int
    page_size: int
    total_items: int
    items: list[Record]

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.page_count


def page_count(total_items: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    """Number of pages for *total_items*; never less than 1."""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return max(1, math.ceil(total_items / page_size))


def clamp_page(page: int, total_items: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    """Clamp *page* into ``[1, page_count]``."""
    return min(max(page, 1), page_count(total_items, page_size))


def paginate(
    view: Sequence[Record], page: int, page_size: int = DEFAULT_PAGE_SIZE
) -> Page:
    """Return the (clamped) *page* of *view*.

    Args:
        view: The filtered view.
        page: Requested 1-based page number.
        page_size: Records per page.

    Returns:
        A ``Page`` holding the visible records and page bookkeeping.
    """
    count = page_count(len(view), page_size)
    number = clamp_page(page, len(view), page_size)
    start = (number - 1) * page_size
    return Page(
        number=number,
        page_count=count,
        page_size=page_size,
        total_items=len(view),
        items=list(view[start : start + page_size]),
    )
