import pytest

from jobboard.schemas.jobs import JobFilters
from jobboard.services.errors import InvalidFilter
from jobboard.services.query_builder import Condition, build_job_query


def test_empty_filters_have_no_predicates_and_sort_newest_first():
    for filters in (None, JobFilters(), JobFilters(search="  ", job_type=[], location="", company=None)):
        q = build_job_query(filters, 1, 10)
        assert q.conditions == ()
        assert q.order_by[0] == ("created_at", "desc")
        # tie-break keeps page boundaries stable
        assert q.order_by[1] == ("id", "desc")


def test_offset_and_limit_from_page():
    q = build_job_query(JobFilters(), 3, 20)
    assert (q.offset, q.limit, q.page) == (40, 20, 3)


def test_all_filters_are_anded_in_order():
    filters = JobFilters(search="python", job_type=["Remote", "Contract"], location="berlin", company="acme")
    q = build_job_query(filters, 1, 10)
    assert q.conditions == (
        Condition("ilike_any", ("title", "company_name", "description", "location"), "python"),
        Condition("overlaps", ("job_type",), ("Remote", "Contract")),
        Condition("ilike", ("location",), "berlin"),
        Condition("ilike", ("company_name",), "acme"),
    )


def test_filter_values_are_trimmed_and_tags_deduped():
    filters = JobFilters(search="  dev ", job_type=["Remote", "Remote", " "], company=" ")
    q = build_job_query(filters, 1, 10)
    assert q.conditions == (
        Condition("ilike_any", ("title", "company_name", "description", "location"), "dev"),
        Condition("overlaps", ("job_type",), ("Remote",)),
    )


def test_same_input_same_query():
    filters = JobFilters(search="x", job_type=["Hybrid"])
    assert build_job_query(filters, 2, 5) == build_job_query(filters, 2, 5)


@pytest.mark.parametrize("page,size", [(0, 10), (-1, 10), (1, 0), (1, -5), (1, 101)])
def test_bad_page_request(page, size):
    with pytest.raises(InvalidFilter):
        build_job_query(JobFilters(), page, size)


def test_unknown_job_type_rejected():
    with pytest.raises(InvalidFilter, match="Freelance"):
        build_job_query(JobFilters(job_type=["Freelance"]), 1, 10)
