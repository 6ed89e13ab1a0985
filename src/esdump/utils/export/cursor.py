"""
Forward cursor bookkeeping for ``search_after`` pagination.
"""

from typing import Any, List, Optional

from .results import Page


def next_cursor(page: Page) -> Optional[Any]:
    """
    Cursor for the request following ``page``.

    The first sort value of the page's last document, passed back verbatim.
    None for an empty page or when the last document carries no sort key.
    """
    if page.is_empty:
        return None
    sort = page.documents[-1].sort
    if not sort:
        return None
    return sort[0]


def is_sort_anomaly(page: Page) -> bool:
    """True when a non-empty page ends in a document without a sort key"""
    return not page.is_empty and not page.documents[-1].sort


class CursorTracker:
    """Current cursor of one index plus every cursor requested so far"""

    def __init__(self):
        self.current: Optional[Any] = None
        self.history: List[Optional[Any]] = []

    def mark_requested(self) -> Optional[Any]:
        self.history.append(self.current)
        return self.current

    def advance(self, page: Page) -> Optional[Any]:
        self.current = next_cursor(page)
        return self.current
