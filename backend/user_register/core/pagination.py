"""Offset pagination for list endpoints.

``?limit=`` defaults to 10 and is capped at 100; ``?offset=`` defaults to 0.
Out-of-range values are rejected with the usual 400 validation envelope.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Query

from user_register.core.responses import PaginationMeta

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class PageWindow:
    """Validated limit/offset pair."""

    limit: int
    offset: int

    def meta(self, count: int) -> PaginationMeta:
        """Build the ``meta`` block for a page holding ``count`` items."""
        return PaginationMeta(limit=self.limit, offset=self.offset, count=count)


def page_window(
    limit: Annotated[
        int,
        Query(ge=1, le=MAX_LIMIT, description=f"Items per page (max {MAX_LIMIT})"),
    ] = DEFAULT_LIMIT,
    offset: Annotated[int, Query(ge=0, description="Items to skip")] = 0,
) -> PageWindow:
    return PageWindow(limit=limit, offset=offset)


Pagination = Annotated[PageWindow, Depends(page_window)]
