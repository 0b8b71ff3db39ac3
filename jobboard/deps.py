# jobboard/deps.py
from typing import List, Optional

from fastapi import Depends, Query

from jobboard.middleware.auth_middleware import TokenAuth, get_auth
from jobboard.schemas.jobs import JobFilters
from jobboard.services.job_repository import JobRepository
from jobboard.services.job_store import JobStore, SqlJobStore

# One store per process; it opens a fresh session per call
_store = SqlJobStore()


def get_store() -> JobStore:
    """Override in tests via app.dependency_overrides[get_store]."""
    return _store


def get_repository(
    store: JobStore = Depends(get_store),
    auth: TokenAuth = Depends(get_auth),
) -> JobRepository:
    """
    A repository per request (= per view). HTTP call sites reconcile writes
    locally; there is no long-lived list to re-fetch.
    """
    return JobRepository(store, auth, auto_refresh=False)


def job_filters(
    search: Optional[str] = Query(None, description="Matches title, company, description or location"),
    job_type: List[str] = Query([], description="Repeatable; any overlap matches, e.g. job_type=Remote&job_type=Contract"),
    location: Optional[str] = Query(None, description="Substring of location"),
    company: Optional[str] = Query(None, description="Substring of company name"),
) -> JobFilters:
    return JobFilters(search=search, job_type=job_type, location=location, company=company)
