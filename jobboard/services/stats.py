"""
Display counters for the admin dashboard.

These are computed over the *loaded* collection (normally one page), not the
whole table: "total" is the number of rows on screen, and active/remote/recent
are counted among those rows only. They are approximations of what is locally
materialized, not global totals. This is a known scoping limitation.
"""
from datetime import datetime
from typing import Iterable, Optional

from jobboard.constants import ACTIVE_WINDOW_DAYS, RECENT_WINDOW_DAYS, REMOTE_TAG
from jobboard.schemas.jobs import Job, JobStats
from jobboard.services.normalize import utcnow, within_days


def compute_stats(jobs: Iterable[Job], now: Optional[datetime] = None) -> JobStats:
    now = now or utcnow()
    jobs = list(jobs)
    return JobStats(
        total_jobs=len(jobs),
        active_jobs=sum(1 for j in jobs if within_days(j.created_at, ACTIVE_WINDOW_DAYS, now)),
        remote_jobs=sum(1 for j in jobs if REMOTE_TAG in (j.job_type or [])),
        recent_jobs=sum(1 for j in jobs if within_days(j.created_at, RECENT_WINDOW_DAYS, now)),
    )
