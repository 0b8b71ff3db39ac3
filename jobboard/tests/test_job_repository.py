"""
JobRepository against the real SQL store (in-memory SQLite), wrapped in a
SpyStore to count calls and control response ordering.
"""
import asyncio
from datetime import datetime, timezone

import pytest

from jobboard.schemas.jobs import JobFilters
from jobboard.services.errors import (
    InvalidFilter, JobValidationError, NotFound, RemoteFailure, Unauthenticated,
)
from jobboard.services.job_repository import JobRepository

# older than any wall-clock "now" a new row can get
LONG_AGO = datetime(2020, 1, 1, tzinfo=timezone.utc)

DRAFT = {
    "title": "Data Engineer",
    "company_name": "Initech",
    "description": "Pipelines.",
    "location": "Austin, TX",
    "job_type": ["Full-time", "Hybrid"],
}


@pytest.fixture
def repo(spy_store, user_auth):
    return JobRepository(spy_store, user_auth)


@pytest.fixture
def live_repo(spy_store, user_auth):
    return JobRepository(spy_store, user_auth, auto_refresh=True)


# =============================================================================
# list
# =============================================================================


@pytest.mark.asyncio
async def test_list_first_page_of_23(repo, seed):
    seed(23)
    jobs = await repo.list({}, page=1, page_size=10)
    assert len(jobs) == 10
    assert repo.total == 23
    assert repo.pagination.total_pages == 3
    assert not repo.loading and repo.error is None


@pytest.mark.asyncio
async def test_list_out_of_range_page_clamps(repo, seed, spy_store):
    ids = seed(23)
    jobs = await repo.list({}, page=5, page_size=10)
    assert repo.page == 3
    assert repo.pagination.current_page == 3
    assert [j.id for j in jobs] == ids[20:]
    # one query for page 5, one for the clamped page
    assert spy_store.count("query") == 2


@pytest.mark.asyncio
async def test_list_is_repeatable(repo, seed):
    seed(12)
    first = [j.id for j in await repo.list({}, 2, 5)]
    total = repo.total
    second = [j.id for j in await repo.list({}, 2, 5)]
    assert first == second and repo.total == total


@pytest.mark.asyncio
async def test_later_list_wins_even_if_earlier_finishes_last(repo, seed, spy_store):
    seed([{"location": "Berlin"}] * 3 + [{"location": "Paris"}] * 2)
    gate_a = spy_store.hold(1)

    task_a = asyncio.create_task(repo.list({"location": "berlin"}))
    while 1 not in spy_store.parked:
        await asyncio.sleep(0.001)
    jobs_b = await repo.list({"location": "paris"})
    assert len(jobs_b) == 2

    gate_a.set()
    await task_a

    assert repo.total == 2
    assert {j.location for j in repo.jobs} == {"Paris"}
    assert repo.filters.location == "paris"
    assert not repo.loading


@pytest.mark.asyncio
async def test_list_rejects_bad_page_without_remote_call(repo, spy_store):
    with pytest.raises(InvalidFilter):
        await repo.list({}, page=0)
    assert spy_store.calls == []
    assert repo.error and not repo.loading


@pytest.mark.asyncio
@pytest.mark.parametrize("filters", [{"job_type": 5}, {"search": ["a", "b"]}])
async def test_malformed_filters_are_invalid_filter(repo, spy_store, filters):
    with pytest.raises(InvalidFilter):
        await repo.list(filters)
    assert repo.error.startswith("Invalid filters")
    assert spy_store.calls == []

    with pytest.raises(InvalidFilter):
        await repo.set_filters(filters)
    assert repo.filters.is_empty()


@pytest.mark.asyncio
async def test_list_failure_keeps_previous_rows(repo, seed, spy_store):
    seed(4)
    await repo.list()
    before = list(repo.jobs)

    spy_store.fail_next = ConnectionError("network is unreachable")
    with pytest.raises(RemoteFailure):
        await repo.list({"search": "x"})

    assert repo.jobs == before
    assert repo.error == "network is unreachable"
    assert not repo.loading

    await repo.refresh()
    assert repo.error is None


# =============================================================================
# get
# =============================================================================


@pytest.mark.asyncio
async def test_get_uses_loaded_collection(repo, seed, spy_store):
    ids = seed(3)
    await repo.list()
    job = await repo.get(ids[1])
    assert job.id == ids[1]
    assert spy_store.count("fetch") == 0


@pytest.mark.asyncio
async def test_get_falls_back_to_store(repo, seed, spy_store):
    ids = seed(3)
    job = await repo.get(ids[2])
    assert job.id == ids[2]
    assert spy_store.count("fetch") == 1


@pytest.mark.asyncio
async def test_get_missing(repo):
    with pytest.raises(NotFound):
        await repo.get("does-not-exist")
    assert repo.error == "Job not found"


# =============================================================================
# create
# =============================================================================


@pytest.mark.asyncio
async def test_create_without_user(spy_store, anon_auth):
    repo = JobRepository(spy_store, anon_auth)
    with pytest.raises(Unauthenticated):
        await repo.create(DRAFT)
    assert spy_store.count("insert") == 0
    assert repo.error == "User not authenticated"
    assert not repo.loading


@pytest.mark.asyncio
async def test_create_with_no_job_type_fails_before_remote(repo, spy_store):
    with pytest.raises(JobValidationError, match="At least one job type must be selected"):
        await repo.create({**DRAFT, "job_type": []})
    assert spy_store.calls == []
    assert not repo.loading


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "field,message",
    [
        ("title", "Job title is required"),
        ("company_name", "Company name is required"),
        ("description", "Job description is required"),
        ("location", "Location is required"),
    ],
)
async def test_create_requires_text_fields(repo, spy_store, field, message):
    with pytest.raises(JobValidationError, match=message):
        await repo.create({**DRAFT, field: "   "})
    assert spy_store.calls == []


@pytest.mark.asyncio
async def test_create_manual_mode_prepends(repo, seed, spy_store):
    seed(2)
    await repo.list()
    job = await repo.create({**DRAFT, "title": "  Data Engineer  ", "id": "forged", "user_id": "someone-else"})

    assert job.id != "forged"
    assert job.user_id == "user-1"
    assert job.title == "Data Engineer"
    assert repo.jobs[0].id == job.id
    assert len(repo.jobs) == 3 and repo.total == 3
    assert spy_store.count("query") == 1


@pytest.mark.asyncio
async def test_create_auto_refresh_relists_page_one(live_repo, seed, spy_store):
    seed(15, start=LONG_AGO)
    await live_repo.list({}, page=2, page_size=10)
    job = await live_repo.create(DRAFT)

    assert live_repo.page == 1
    assert live_repo.jobs[0].id == job.id
    assert live_repo.total == 16
    assert spy_store.count("query") == 2


# =============================================================================
# update / delete
# =============================================================================


@pytest.mark.asyncio
async def test_update_replaces_row_in_place(repo, seed):
    ids = seed(3)
    await repo.list()
    old = await repo.get(ids[1])

    job = await repo.update(ids[1], {"location": "Lisbon", "created_at": "2000-01-01T00:00:00Z"})

    assert job.location == "Lisbon"
    assert job.updated_at > old.updated_at
    assert job.created_at == old.created_at
    assert [j.id for j in repo.jobs] == ids
    assert repo.jobs[1].location == "Lisbon"


@pytest.mark.asyncio
async def test_update_missing_job(repo):
    with pytest.raises(NotFound):
        await repo.update("missing", {"title": "x"})
    assert repo.error == "Job not found"
    assert not repo.loading


@pytest.mark.asyncio
async def test_update_cannot_blank_fields(repo, seed, spy_store):
    ids = seed(1)
    with pytest.raises(JobValidationError):
        await repo.update(ids[0], {"job_type": []})
    with pytest.raises(JobValidationError):
        await repo.update(ids[0], {"title": ""})
    assert spy_store.count("update") == 0


@pytest.mark.asyncio
async def test_update_and_delete_do_not_check_the_user(spy_store, anon_auth, seed):
    ids = seed(1)
    repo = JobRepository(spy_store, anon_auth)

    with pytest.raises(NotFound):
        await repo.update("missing", {"title": "x"})
    job = await repo.update(ids[0], {"title": "Renamed"})
    assert job.title == "Renamed"

    await repo.delete(ids[0])
    with pytest.raises(NotFound):
        await repo.delete(ids[0])
    assert spy_store.count("update") == 2 and spy_store.count("delete") == 2


@pytest.mark.asyncio
async def test_delete_with_failed_relist_drops_cached_row(live_repo, seed, spy_store):
    ids = seed(3)
    await live_repo.list()

    spy_store.fail_queries = RemoteFailure("store unavailable")
    await live_repo.delete(ids[0])

    assert [j.id for j in live_repo.jobs] == ids[1:]
    assert live_repo.total == 2
    assert not live_repo.loading
    spy_store.fail_queries = None
    with pytest.raises(NotFound):
        await live_repo.get(ids[0])


@pytest.mark.asyncio
async def test_update_with_failed_relist_replaces_cached_row(live_repo, seed, spy_store):
    ids = seed(3)
    await live_repo.list()

    spy_store.fail_queries = RemoteFailure("store unavailable")
    await live_repo.update(ids[1], {"location": "Lisbon"})

    assert (await live_repo.get(ids[1])).location == "Lisbon"
    assert spy_store.count("fetch") == 0


@pytest.mark.asyncio
async def test_delete_then_get_is_not_found(repo, seed):
    ids = seed(3)
    await repo.list()
    await repo.delete(ids[0])

    assert [j.id for j in repo.jobs] == ids[1:]
    assert repo.total == 2
    with pytest.raises(NotFound):
        await repo.get(ids[0])


@pytest.mark.asyncio
async def test_delete_missing_is_not_idempotent(repo, seed):
    ids = seed(1)
    await repo.delete(ids[0])
    with pytest.raises(NotFound):
        await repo.delete(ids[0])


@pytest.mark.asyncio
async def test_failed_write_leaves_collection_untouched(repo, seed, spy_store):
    ids = seed(2)
    await repo.list()
    before = list(repo.jobs)

    spy_store.fail_next = RuntimeError("")
    with pytest.raises(RemoteFailure, match="Failed to delete job"):
        await repo.delete(ids[0])

    assert repo.jobs == before
    assert repo.error == "Failed to delete job"
    assert not repo.loading


# =============================================================================
# view state
# =============================================================================


@pytest.mark.asyncio
async def test_set_filters_resets_page_and_relists(live_repo, seed):
    seed([{"job_type": ["Remote"]}] * 2 + [{"job_type": ["Contract"]}] * 12)
    await live_repo.list({}, page=2, page_size=10)
    assert live_repo.page == 2

    await live_repo.set_filters(JobFilters(job_type=["Remote"]))
    assert live_repo.page == 1
    assert live_repo.total == 2
    assert live_repo.stats.remote_jobs == 2


@pytest.mark.asyncio
async def test_search_and_clear(live_repo, seed):
    seed([{"title": "Rust dev"}, {"title": "Go dev"}, {"title": "Rust lead"}])
    await live_repo.search("rust")
    assert live_repo.total == 2
    await live_repo.clear_filters()
    assert live_repo.total == 3 and live_repo.filters.is_empty()


@pytest.mark.asyncio
async def test_page_controls(live_repo, seed):
    seed(23)
    await live_repo.list({}, 1, 10)
    await live_repo.set_page(99)
    assert live_repo.page == 3 and len(live_repo.jobs) == 3

    await live_repo.set_page_size(20)
    assert live_repo.page == 1 and len(live_repo.jobs) == 20
    with pytest.raises(InvalidFilter):
        await live_repo.set_page_size(0)


@pytest.mark.asyncio
async def test_manual_mode_page_controls_do_not_fetch(repo, spy_store):
    await repo.set_filters({"search": "x"})
    await repo.set_page_size(5)
    assert spy_store.calls == []
    assert repo.filters.search == "x" and repo.page_size == 5
