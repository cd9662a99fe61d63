import math
from dataclasses import dataclass


@dataclass(frozen=True)
class PageWindow:
    offset: int
    limit: int


def paginate(page: int, page_size: int) -> PageWindow:
    """
    Row window for a 1-based page number.

    Raises:
        ValueError: page < 1 or page_size < 1
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be > 0, got {page_size}")
    return PageWindow(offset=(page - 1) * page_size, limit=page_size)


def total_pages(row_count: int, page_size: int) -> int:
    if row_count < 0:
        raise ValueError(f"row_count must be >= 0, got {row_count}")
    if page_size < 1:
        raise ValueError(f"page_size must be > 0, got {page_size}")
    return math.ceil(row_count / page_size)


class Pager:
    """Fixed page size, taken from settings.items_per_page."""

    def __init__(self, page_size: int = 6):
        if page_size < 1:
            raise ValueError(f"page_size must be > 0, got {page_size}")
        self.page_size = page_size

    def window(self, page: int) -> PageWindow:
        return paginate(page, self.page_size)

    def total_pages(self, row_count: int) -> int:
        return total_pages(row_count, self.page_size)
