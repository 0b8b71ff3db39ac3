# jobboard/services/job_store.py
"""
Job store: the tabular-query capability the repository runs against.

``JobStore`` is the interface (predicate composition, timestamp sort,
offset/limit, exact count, insert/update/delete by id). ``SqlJobStore`` is
the SQLAlchemy implementation; its sync session work runs in Starlette's
threadpool so callers on the event loop never block.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from sqlalchemy import func, or_, select, type_coerce
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from jobboard.config import STORE_TIMEOUT_SECS
from jobboard.database import SessionLocal
from jobboard.models import Job as JobRow
from jobboard.schemas.jobs import Job
from jobboard.services.errors import NotFound, RemoteFailure
from jobboard.services.normalize import as_utc, utcnow
from jobboard.services.query_builder import Condition, JobQuery

log = logging.getLogger("jobs.store")

# columns a Condition / order_by may reference
QUERYABLE = {"id", "title", "company_name", "description", "location", "job_type", "created_at", "updated_at"}

# ops whose effect may land after a timeout is reported
WRITE_OPS = {"insert", "update", "delete"}


class JobStore(Protocol):
    async def query(self, q: JobQuery) -> Tuple[List[Job], int]: ...

    async def fetch(self, job_id: str) -> Optional[Job]: ...

    async def insert(self, data: Dict[str, Any], owner_id: str) -> Job: ...

    async def update(self, job_id: str, data: Dict[str, Any]) -> Job: ...

    async def delete(self, job_id: str) -> None: ...


def to_job(row: JobRow) -> Job:
    return Job(
        id=row.id,
        title=row.title,
        company_name=row.company_name,
        description=row.description,
        location=row.location,
        job_type=list(row.job_type or []),
        user_id=row.user_id,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def _column(name: str):
    if name not in QUERYABLE:
        raise ValueError(f"not a queryable column: {name}")
    return getattr(JobRow, name)


def compile_condition(cond: Condition, dialect: str):
    """Condition -> SQLAlchemy boolean clause for the given dialect name."""
    if cond.op == "ilike":
        return _column(cond.fields[0]).icontains(str(cond.value), autoescape=True)

    if cond.op == "ilike_any":
        return or_(*[_column(f).icontains(str(cond.value), autoescape=True) for f in cond.fields])

    if cond.op == "overlaps":
        col = _column(cond.fields[0])
        tags = list(cond.value)
        if dialect == "postgresql":
            # jsonb ?| text[]
            return type_coerce(col, postgresql.JSONB).has_any(postgresql.array(tags))
        # SQLite & friends: correlated json_each over the row's tag array
        each = func.json_each(col).table_valued("value")
        return select(each.c.value).where(each.c.value.in_(tags)).exists()

    raise ValueError(f"unsupported condition: {cond.op}")


def _log_late(op: str, task: "asyncio.Future") -> None:
    """Outcome of a store call whose caller already gave up on it."""
    if task.cancelled():
        return
    err = task.exception()
    if err is not None:
        log.warning("store %s finished after its timeout with %s", op, err.__class__.__name__)
    else:
        log.warning("store %s completed after its timeout", op)


class SqlJobStore:
    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        timeout: Optional[float] = STORE_TIMEOUT_SECS,
    ):
        self.session_factory = session_factory
        self.timeout = timeout

    # ---------- async surface ----------
    async def query(self, q: JobQuery) -> Tuple[List[Job], int]:
        return await self._run("query", self._query_sync, q)

    async def fetch(self, job_id: str) -> Optional[Job]:
        return await self._run("fetch", self._fetch_sync, job_id)

    async def insert(self, data: Dict[str, Any], owner_id: str) -> Job:
        return await self._run("insert", self._insert_sync, data, owner_id)

    async def update(self, job_id: str, data: Dict[str, Any]) -> Job:
        return await self._run("update", self._update_sync, job_id, data)

    async def delete(self, job_id: str) -> None:
        await self._run("delete", self._delete_sync, job_id)

    async def _run(self, op: str, fn, *args):
        # a timeout abandons the wait, not the worker thread
        task = asyncio.ensure_future(run_in_threadpool(fn, *args))
        if self.timeout:
            done, _ = await asyncio.wait({task}, timeout=self.timeout)
            if not done:
                log.warning("store %s timed out after %ss", op, self.timeout)
                task.add_done_callback(lambda t: _log_late(op, t))
                message = "The job store did not respond in time"
                if op in WRITE_OPS:
                    message += f"; the {op} may still have been applied"
                raise RemoteFailure(message)
        try:
            return await task
        except SQLAlchemyError as e:
            log.warning("store %s failed: %s", op, e)
            raise RemoteFailure(f"Job store error while trying to {op}: {e.__class__.__name__}") from e

    # ---------- sync session work (threadpool) ----------
    def _query_sync(self, q: JobQuery) -> Tuple[List[Job], int]:
        with self.session_factory() as db:
            dialect = db.get_bind().dialect.name

            stmt = select(JobRow)
            for cond in q.conditions:
                stmt = stmt.where(compile_condition(cond, dialect))

            total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()

            order = [
                _column(name).desc() if direction == "desc" else _column(name).asc()
                for name, direction in q.order_by
            ]
            rows = db.execute(stmt.order_by(*order).offset(q.offset).limit(q.limit)).scalars().all()
            log.debug("query offset=%d limit=%d -> %d rows (total=%d)", q.offset, q.limit, len(rows), total)
            return [to_job(r) for r in rows], total

    def _fetch_sync(self, job_id: str) -> Optional[Job]:
        with self.session_factory() as db:
            row = db.get(JobRow, job_id)
            return to_job(row) if row else None

    def _insert_sync(self, data: Dict[str, Any], owner_id: str) -> Job:
        with self.session_factory() as db:
            now = utcnow()
            row = JobRow(**data, user_id=owner_id, created_at=now, updated_at=now)
            db.add(row)
            db.commit()
            db.refresh(row)
            return to_job(row)

    def _update_sync(self, job_id: str, data: Dict[str, Any]) -> Job:
        with self.session_factory() as db:
            row = db.get(JobRow, job_id)
            if not row:
                raise NotFound(job_id)

            for key, value in data.items():
                setattr(row, key, value)

            # updated_at must move forward even within one clock tick
            prev = as_utc(row.updated_at)
            now = utcnow()
            if prev and now <= prev:
                now = prev + timedelta(microseconds=1)
            row.updated_at = now

            db.commit()
            db.refresh(row)
            return to_job(row)

    def _delete_sync(self, job_id: str) -> None:
        with self.session_factory() as db:
            row = db.get(JobRow, job_id)
            if not row:
                raise NotFound(job_id)
            db.delete(row)
            db.commit()
