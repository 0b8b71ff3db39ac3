# jobboard/routes/admin_jobs.py
from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from jobboard.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from jobboard.deps import get_repository, job_filters
from jobboard.middleware.auth_middleware import require_claims
from jobboard.routes.jobs import list_response, to_out
from jobboard.schemas.jobs import JobDraft, JobFilters, JobListResponse, JobOut, JobUpdate
from jobboard.services.job_repository import JobRepository

# Every admin route needs a valid bearer token (401 otherwise)
router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_claims)])


@router.get("/me")
def me(claims: Dict[str, Any] = Depends(require_claims)):
    return {"user_id": str(claims["sub"]), "email": claims.get("email")}


@router.get("/jobs", response_model=JobListResponse)
async def admin_list_jobs(
    filters: JobFilters = Depends(job_filters),
    page: int = Query(1, ge=1),
    per_page: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    repo: JobRepository = Depends(get_repository),
):
    await repo.list(filters, page, per_page)
    return list_response(repo)


@router.get("/jobs/{job_id}", response_model=JobOut)
async def admin_get_job(job_id: str, repo: JobRepository = Depends(get_repository)):
    return to_out(await repo.get(job_id))


@router.post("/jobs", response_model=JobOut, status_code=201)
async def admin_create_job(body: JobDraft, repo: JobRepository = Depends(get_repository)):
    return to_out(await repo.create(body))


@router.patch("/jobs/{job_id}", response_model=JobOut)
async def admin_update_job(job_id: str, body: JobUpdate, repo: JobRepository = Depends(get_repository)):
    return to_out(await repo.update(job_id, body))


@router.delete("/jobs/{job_id}")
async def admin_delete_job(job_id: str, repo: JobRepository = Depends(get_repository)):
    await repo.delete(job_id)
    return {"ok": True}
