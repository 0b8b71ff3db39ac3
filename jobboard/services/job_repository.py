# jobboard/services/job_repository.py
"""
Job repository: the single owner of one view's job collection.

It composes the query builder, the store and the pagination calculator,
and keeps ``jobs`` / ``total`` / ``loading`` / ``error`` consistent:

- ``list`` calls are numbered; a response that is not the latest issued is
  dropped, so a slow old request can never overwrite a newer result.
- Writes reconcile in one of two ways, fixed per instance:
  ``auto_refresh=True`` re-runs ``list``; ``auto_refresh=False`` patches the
  local collection (prepend / replace by id / remove by id). If the re-list
  after a committed write fails, the local patch is applied instead so the
  cache never serves a deleted or outdated row.
- Failures leave the collection untouched, put a readable message in
  ``error`` and re-raise.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Union

from jobboard.config import DEFAULT_PAGE_SIZE
from jobboard.middleware.auth_middleware import ActingUser, AuthProvider
from jobboard.schemas.jobs import Job, JobDraft, JobFilters, JobStats, JobUpdate, Pagination
from jobboard.services.errors import (
    InvalidFilter, JobBoardError, NotFound, RemoteFailure, Unauthenticated,
)
from jobboard.services.job_store import JobStore
from jobboard.services.pagination import paginate
from jobboard.services.query_builder import build_job_query, validate_page_request
from jobboard.services.stats import compute_stats
from jobboard.services.validation import validate_draft, validate_update

log = logging.getLogger("jobs.repository")

FiltersLike = Union[JobFilters, Dict[str, Any], None]


def _as_filters(filters: FiltersLike) -> JobFilters:
    if filters is None:
        return JobFilters()
    if isinstance(filters, JobFilters):
        return filters
    try:
        return JobFilters.model_validate(filters)
    except (TypeError, ValueError) as e:
        raise InvalidFilter(f"Invalid filters: {e}") from e


class JobRepository:
    def __init__(
        self,
        store: JobStore,
        auth: AuthProvider,
        *,
        auto_refresh: bool = False,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        validate_page_request(1, page_size)
        self.store = store
        self.auth = auth
        self.auto_refresh = auto_refresh

        self.jobs: List[Job] = []
        self.total = 0
        self.error: Optional[str] = None
        self.filters = JobFilters()
        self.page = 1
        self.page_size = page_size

        self._seq = 0          # last list() request number issued
        self._inflight = 0     # outstanding remote operations

    # ---------- derived state ----------
    @property
    def loading(self) -> bool:
        return self._inflight > 0

    @property
    def pagination(self) -> Pagination:
        return paginate(self.total, self.page, self.page_size)

    @property
    def stats(self) -> JobStats:
        # loaded collection only, see jobboard.services.stats
        return compute_stats(self.jobs)

    # ---------- helpers ----------
    @asynccontextmanager
    async def _guard(self, fallback: str, seq: Optional[int] = None):
        """
        Wrap one remote operation: loading on for its duration, error cleared
        then populated on failure. Foreign exceptions become RemoteFailure.
        For list() calls (``seq`` given) only the latest request touches ``error``.
        """
        owns_state = lambda: seq is None or seq == self._seq  # noqa: E731
        self._inflight += 1
        if owns_state():
            self.error = None
        try:
            yield
        except JobBoardError as e:
            if owns_state():
                self.error = e.message
            raise
        except Exception as e:
            log.exception(fallback)
            err = RemoteFailure(str(e) or fallback)
            if owns_state():
                self.error = err.message
            raise err from e
        finally:
            self._inflight -= 1

    async def _require_user(self) -> ActingUser:
        user = await self.auth.get_user()
        if user is None:
            raise Unauthenticated("User not authenticated")
        return user

    async def _actor(self) -> str:
        user = await self.auth.get_user()
        return user.id if user else "anonymous"

    async def _reconcile(self, page: Optional[int] = None) -> bool:
        """
        Re-list after a successful write. A failed re-list is logged, not
        raised; the caller then patches the local collection instead.
        """
        try:
            await self.list(self.filters, page or self.page, self.page_size)
            return True
        except JobBoardError as e:
            log.warning("re-list after write failed: %s", e)
            return False

    # ---------- reads ----------
    async def list(
        self,
        filters: FiltersLike = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> List[Job]:
        """
        Fetch one page and make it the current state.

        Out-of-range pages are clamped against the returned total and the
        clamped page is fetched instead. Returns the visible collection.
        """
        page = self.page if page is None else page
        page_size = self.page_size if page_size is None else page_size
        try:
            filters = self.filters if filters is None else _as_filters(filters)
            q = build_job_query(filters, page, page_size)
        except JobBoardError as e:
            self.error = e.message
            raise

        self._seq += 1
        seq = self._seq

        async with self._guard("Failed to fetch jobs", seq=seq):
            rows, total = await self.store.query(q)
            meta = paginate(total, page, page_size)
            if meta.current_page != page and seq == self._seq:
                log.info("page %d out of range (total=%d), fetching page %d", page, total, meta.current_page)
                rows, total = await self.store.query(build_job_query(filters, meta.current_page, page_size))
                meta = paginate(total, meta.current_page, page_size)

        if seq != self._seq:
            log.debug("discarding superseded list response seq=%d latest=%d", seq, self._seq)
            return self.jobs

        self.jobs = list(rows)
        self.total = total
        self.filters = filters
        self.page = meta.current_page
        self.page_size = page_size
        return self.jobs

    async def get(self, job_id: str) -> Job:
        """Loaded collection first (no store access), then a single-row fetch."""
        for job in self.jobs:
            if job.id == job_id:
                return job

        async with self._guard("Failed to fetch job"):
            job = await self.store.fetch(job_id)
            if job is None:
                raise NotFound(job_id)
        return job

    async def refresh(self) -> List[Job]:
        return await self.list(self.filters, self.page, self.page_size)

    # ---------- writes ----------
    async def create(self, draft: Union[JobDraft, Dict[str, Any]]) -> Job:
        if not isinstance(draft, JobDraft):
            draft = JobDraft.model_validate(draft)
        try:
            data = validate_draft(draft)
        except JobBoardError as e:
            self.error = e.message
            raise

        async with self._guard("Failed to create job"):
            user = await self._require_user()
            job = await self.store.insert(data, user.id)
            log.info("job %s created by %s", job.id, user.id)

            if not (self.auto_refresh and await self._reconcile(page=1)):
                self.jobs = [job] + [j for j in self.jobs if j.id != job.id]
                self.total += 1
        return job

    async def update(self, job_id: str, fields: Union[JobUpdate, Dict[str, Any]]) -> Job:
        if not isinstance(fields, JobUpdate):
            fields = JobUpdate.model_validate(fields)
        try:
            data = validate_update(fields)
        except JobBoardError as e:
            self.error = e.message
            raise

        # no user check: callers gate the admin surface, the store reports NotFound
        async with self._guard("Failed to update job"):
            job = await self.store.update(job_id, data)
            log.info("job %s updated by %s (%s)", job_id, await self._actor(), ", ".join(sorted(data)) or "no fields")

            if not (self.auto_refresh and await self._reconcile()):
                self.jobs = [job if j.id == job_id else j for j in self.jobs]
        return job

    async def delete(self, job_id: str) -> None:
        async with self._guard("Failed to delete job"):
            await self.store.delete(job_id)
            log.info("job %s deleted by %s", job_id, await self._actor())

            if not (self.auto_refresh and await self._reconcile()):
                self.jobs = [j for j in self.jobs if j.id != job_id]
                self.total = max(self.total - 1, 0)

    # ---------- view state changes (re-list in auto-refresh mode) ----------
    async def set_filters(self, filters: FiltersLike) -> List[Job]:
        """New filters always restart at page 1."""
        try:
            filters = _as_filters(filters)
        except JobBoardError as e:
            self.error = e.message
            raise
        if self.auto_refresh:
            return await self.list(filters, 1, self.page_size)
        self.filters = filters
        self.page = 1
        return self.jobs

    async def search(self, text: Optional[str]) -> List[Job]:
        merged = self.filters.model_copy(update={"search": (text or "").strip() or None})
        return await self.set_filters(merged)

    async def clear_filters(self) -> List[Job]:
        return await self.set_filters(JobFilters())

    async def set_page(self, page: int) -> List[Job]:
        page = max(1, min(int(page), self.pagination.total_pages))
        if self.auto_refresh:
            return await self.list(self.filters, page, self.page_size)
        self.page = page
        return self.jobs

    async def set_page_size(self, page_size: int) -> List[Job]:
        try:
            validate_page_request(1, page_size)
        except JobBoardError as e:
            self.error = e.message
            raise
        if self.auto_refresh:
            return await self.list(self.filters, 1, page_size)
        self.page_size = page_size
        self.page = 1
        return self.jobs
