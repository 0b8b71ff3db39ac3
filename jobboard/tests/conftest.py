import asyncio
import os
from datetime import datetime, timedelta, timezone

# Must be set before any jobboard module reads its config
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from sqlalchemy.orm import sessionmaker

from jobboard.database import Base, make_engine
from jobboard.middleware.auth_middleware import TokenAuth, create_access_token
from jobboard.models import Job as JobRow
from jobboard.services.job_store import SqlJobStore

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# DATABASE
# =============================================================================


@pytest.fixture
def session_factory():
    """Fresh in-memory SQLite per test."""
    engine = make_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def sql_store(session_factory):
    return SqlJobStore(session_factory, timeout=None)


def add_jobs(session_factory, rows, start=NOW):
    """
    Insert rows directly, newest first: rows[0] is created at ``start``,
    each following one a minute earlier. Returns the ids in that order.
    """
    ids = []
    with session_factory() as db:
        for i, fields in enumerate(rows):
            created = start - timedelta(minutes=i)
            row = JobRow(
                title=fields.get("title", f"Job {i}"),
                company_name=fields.get("company_name", "Acme"),
                description=fields.get("description", "Build things."),
                location=fields.get("location", "Berlin"),
                job_type=fields.get("job_type", ["Full-time"]),
                user_id=fields.get("user_id", "owner-1"),
                created_at=fields.get("created_at", created),
                updated_at=fields.get("created_at", created),
            )
            db.add(row)
            db.flush()
            ids.append(row.id)
        db.commit()
    return ids


@pytest.fixture
def seed(session_factory):
    def _seed(rows_or_count, **kwargs):
        rows = [{} for _ in range(rows_or_count)] if isinstance(rows_or_count, int) else rows_or_count
        return add_jobs(session_factory, rows, **kwargs)
    return _seed


# =============================================================================
# AUTH
# =============================================================================


@pytest.fixture
def user_auth():
    return TokenAuth(create_access_token("user-1", extra={"email": "admin@example.com"}))


@pytest.fixture
def anon_auth():
    return TokenAuth(None)


@pytest.fixture
def auth_header():
    return {"Authorization": f"Bearer {create_access_token('user-1')}"}


# =============================================================================
# STORE SPY
# =============================================================================


class SpyStore:
    """
    Wraps a real store: records every call and can hold a given query()
    response (1-based call number) until its gate is released.
    """

    def __init__(self, inner):
        self.inner = inner
        self.calls = []
        self.gates = {}
        self.parked = set()
        self.fail_next = None
        self.fail_queries = None   # every query() raises this while set

    def hold(self, call_number):
        gate = asyncio.Event()
        self.gates[call_number] = gate
        return gate

    def count(self, name):
        return sum(1 for c in self.calls if c[0] == name)

    def _record(self, name, *args):
        self.calls.append((name, *args))
        if name == "query" and self.fail_queries:
            raise self.fail_queries
        if self.fail_next:
            err, self.fail_next = self.fail_next, None
            raise err

    async def query(self, q):
        self._record("query", q)
        n = self.count("query")
        result = await self.inner.query(q)
        if n in self.gates:
            self.parked.add(n)
            await self.gates[n].wait()
        return result

    async def fetch(self, job_id):
        self._record("fetch", job_id)
        return await self.inner.fetch(job_id)

    async def insert(self, data, owner_id):
        self._record("insert", data, owner_id)
        return await self.inner.insert(data, owner_id)

    async def update(self, job_id, data):
        self._record("update", job_id, data)
        return await self.inner.update(job_id, data)

    async def delete(self, job_id):
        self._record("delete", job_id)
        return await self.inner.delete(job_id)


@pytest.fixture
def spy_store(sql_store):
    return SpyStore(sql_store)
