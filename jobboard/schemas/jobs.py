from datetime import datetime
from typing import Annotated, Optional, List

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _blank_to_none(v):
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


def _dedupe_tags(v):
    """Drop blanks and repeats, keep first-seen order."""
    if v is None:
        return []
    if isinstance(v, str):
        v = [v]
    out: List[str] = []
    for tag in v:
        tag = (tag or "").strip()
        if tag and tag not in out:
            out.append(tag)
    return out


OptionalText = Annotated[Optional[str], BeforeValidator(_blank_to_none)]
Tags = Annotated[List[str], BeforeValidator(_dedupe_tags)]


# ----- Filters -----
class JobFilters(BaseModel):
    """Closed set of filters; every field optional, combined with AND."""
    search: OptionalText = None           # OR across title/company/description/location
    job_type: Tags = Field(default_factory=list)   # overlap with job.job_type
    location: OptionalText = None         # substring, case-insensitive
    company: OptionalText = None          # substring on company_name

    model_config = ConfigDict(extra="ignore")

    def is_empty(self) -> bool:
        return not (self.search or self.job_type or self.location or self.company)


# ----- Job payloads -----
class JobDraft(BaseModel):
    """Create payload. id/timestamps/owner are assigned server-side."""
    title: str = ""
    company_name: str = ""
    description: str = ""
    location: str = ""
    job_type: Tags = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class JobUpdate(BaseModel):
    # Partial fields for PATCH; id/created_at/updated_at/user_id are ignored
    title: Optional[str] = None
    company_name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[Tags] = None

    model_config = ConfigDict(extra="ignore")


class Job(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    company_name: str
    description: str
    location: str
    job_type: List[str]
    user_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class JobOut(Job):
    posted_ago: Optional[str] = None      # "Today", "3 days ago", ...


# ----- Listing metadata -----
class Pagination(BaseModel):
    current_page: int = Field(..., ge=1)
    items_per_page: int = Field(..., ge=1)
    total_items: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=1)
    offset: int = Field(..., ge=0)
    limit: int = Field(..., ge=1)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def start_item(self) -> int:
        return self.offset + 1 if self.total_items else 0

    @property
    def end_item(self) -> int:
        return min(self.offset + self.items_per_page, self.total_items)


class PaginationOut(BaseModel):
    current_page: int
    items_per_page: int
    total_items: int
    total_pages: int
    has_previous: bool
    has_next: bool
    start_item: int
    end_item: int
    pages: List[int]


class JobStats(BaseModel):
    """Counters over the loaded page only, not the whole table."""
    total_jobs: int = 0
    active_jobs: int = 0      # created within the last 30 days
    remote_jobs: int = 0      # job_type contains "Remote"
    recent_jobs: int = 0      # created within the last 7 days


class JobListResponse(BaseModel):
    items: List[JobOut]
    pagination: PaginationOut
    stats: JobStats = Field(
        ...,
        description="Computed over the returned page only; approximations, not global totals.",
    )
