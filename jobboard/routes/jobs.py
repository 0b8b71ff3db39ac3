# jobboard/routes/jobs.py
import logging

from fastapi import APIRouter, Depends, Query

from jobboard.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from jobboard.constants import JOB_TYPE_OPTIONS, PAGE_SIZE_OPTIONS
from jobboard.deps import get_repository, job_filters
from jobboard.schemas.jobs import Job, JobFilters, JobListResponse, JobOut
from jobboard.services import pagination
from jobboard.services.job_repository import JobRepository
from jobboard.services.normalize import time_ago

log = logging.getLogger("routes.jobs")

# NOTE: Do NOT set a prefix here since main.py already includes this router with prefix="/api/v1"
router = APIRouter(tags=["Jobs"])


def to_out(job: Job) -> JobOut:
    return JobOut(**job.model_dump(), posted_ago=time_ago(job.created_at))


def list_response(repo: JobRepository) -> JobListResponse:
    return JobListResponse(
        items=[to_out(j) for j in repo.jobs],
        pagination=pagination.to_out(repo.pagination),
        stats=repo.stats,
    )


@router.get("/jobs", response_model=JobListResponse)
async def list_jobs(
    filters: JobFilters = Depends(job_filters),
    page: int = Query(1, ge=1, description="1-based page index"),
    per_page: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="items per page"),
    repo: JobRepository = Depends(get_repository),
):
    """
    Public search/browse:
    - filters combine with AND; `search` matches any of title/company/description/location
    - newest first; a page past the end is clamped to the last page
    """
    await repo.list(filters, page, per_page)
    log.info("list_jobs page=%d/%d total=%d", repo.page, repo.pagination.total_pages, repo.total)
    return list_response(repo)


@router.get("/job-options")
def job_options():
    """Choices for the filter and pager controls."""
    return {
        "job_types": list(JOB_TYPE_OPTIONS),
        "page_sizes": list(PAGE_SIZE_OPTIONS),
        "default_page_size": DEFAULT_PAGE_SIZE,
    }


@router.get("/jobs/{job_id}", response_model=JobOut)
async def get_job(job_id: str, repo: JobRepository = Depends(get_repository)):
    return to_out(await repo.get(job_id))
