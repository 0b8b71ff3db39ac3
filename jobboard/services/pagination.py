import math
from typing import List

from jobboard.constants import PAGE_WINDOW
from jobboard.schemas.jobs import Pagination, PaginationOut
from jobboard.services.errors import InvalidFilter


def total_pages_for(total: int, page_size: int) -> int:
    """ceil(total / page_size), but never less than 1 (no results = one empty page)."""
    return max(math.ceil(total / page_size), 1)


def clamp_page(requested: int, total_pages: int) -> int:
    return min(max(1, int(requested)), max(total_pages, 1))


def paginate(total: int, requested_page: int, page_size: int) -> Pagination:
    """
    Paging metadata for ``total`` rows.

    The returned ``current_page`` is always inside [1, total_pages] even when
    ``requested_page`` is stale (e.g. filters shrank the result set); fetch
    with it, not with the requested page.
    """
    if page_size < 1:
        raise InvalidFilter(f"page size must be >= 1 (got {page_size})")
    if total < 0:
        raise InvalidFilter(f"total must be >= 0 (got {total})")

    pages = total_pages_for(total, page_size)
    current = clamp_page(requested_page, pages)
    return Pagination(
        current_page=current,
        items_per_page=page_size,
        total_items=total,
        total_pages=pages,
        offset=(current - 1) * page_size,
        limit=page_size,
    )


def page_window(current: int, total_pages: int, size: int = PAGE_WINDOW) -> List[int]:
    """Page numbers for the pager buttons, centred on ``current`` where possible."""
    total_pages = max(total_pages, 1)
    start = max(1, min(total_pages - size + 1, current - size // 2))
    return list(range(start, min(start + size, total_pages + 1)))


def to_out(p: Pagination) -> PaginationOut:
    return PaginationOut(
        current_page=p.current_page,
        items_per_page=p.items_per_page,
        total_items=p.total_items,
        total_pages=p.total_pages,
        has_previous=p.has_previous,
        has_next=p.has_next,
        start_item=p.start_item,
        end_item=p.end_item,
        pages=page_window(p.current_page, p.total_pages),
    )
