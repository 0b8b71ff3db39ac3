"""
Translate a set of filters plus a page request into a store query.

Pure functions only: no I/O, no clock, no logging. The resulting ``JobQuery``
is what ``JobStore.query`` executes.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple

from jobboard.config import MAX_PAGE_SIZE
from jobboard.constants import JOB_TYPE_OPTIONS, SEARCH_FIELDS
from jobboard.schemas.jobs import JobFilters
from jobboard.services.errors import InvalidFilter

ConditionOp = Literal["ilike", "ilike_any", "overlaps"]

# created_at alone is not unique; id keeps page boundaries stable
DEFAULT_ORDER: Tuple[Tuple[str, str], ...] = (("created_at", "desc"), ("id", "desc"))


@dataclass(frozen=True)
class Condition:
    """
    One predicate of the WHERE clause.

    - ilike:     case-insensitive substring of ``value`` in ``fields[0]``
    - ilike_any: same, OR-ed across all ``fields``
    - overlaps:  the tag list in ``fields[0]`` shares at least one tag with ``value``
    """
    op: ConditionOp
    fields: Tuple[str, ...]
    value: object


@dataclass(frozen=True)
class JobQuery:
    conditions: Tuple[Condition, ...] = ()          # AND-ed
    order_by: Tuple[Tuple[str, str], ...] = DEFAULT_ORDER
    offset: int = 0
    limit: int = 10
    page: int = 1
    filters: Optional[JobFilters] = field(default=None, compare=False)


def validate_page_request(page: int, page_size: int) -> None:
    if not isinstance(page, int) or page < 1:
        raise InvalidFilter(f"page must be >= 1 (got {page!r})")
    if not isinstance(page_size, int) or page_size < 1:
        raise InvalidFilter(f"page size must be >= 1 (got {page_size!r})")
    if page_size > MAX_PAGE_SIZE:
        raise InvalidFilter(f"page size must be <= {MAX_PAGE_SIZE} (got {page_size})")


def build_conditions(filters: Optional[JobFilters]) -> Tuple[Condition, ...]:
    if filters is None:
        return ()

    unknown = [t for t in filters.job_type if t not in JOB_TYPE_OPTIONS]
    if unknown:
        raise InvalidFilter(f"Unknown job type: {', '.join(unknown)}")

    conds = []
    if filters.search:
        conds.append(Condition("ilike_any", SEARCH_FIELDS, filters.search))
    if filters.job_type:
        conds.append(Condition("overlaps", ("job_type",), tuple(filters.job_type)))
    if filters.location:
        conds.append(Condition("ilike", ("location",), filters.location))
    if filters.company:
        conds.append(Condition("ilike", ("company_name",), filters.company))
    return tuple(conds)


def build_job_query(filters: Optional[JobFilters], page: int, page_size: int) -> JobQuery:
    """Filters + page request -> JobQuery. Raises InvalidFilter on bad input."""
    validate_page_request(page, page_size)
    return JobQuery(
        conditions=build_conditions(filters),
        offset=(page - 1) * page_size,
        limit=page_size,
        page=page,
        filters=filters,
    )
