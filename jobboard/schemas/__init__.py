from jobboard.schemas.jobs import (
    Job,
    JobDraft,
    JobFilters,
    JobListResponse,
    JobOut,
    JobStats,
    JobUpdate,
    Pagination,
    PaginationOut,
)

__all__ = [
    "Job", "JobDraft", "JobFilters", "JobListResponse", "JobOut",
    "JobStats", "JobUpdate", "Pagination", "PaginationOut",
]
