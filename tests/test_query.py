"""
Unit tests for the query engine: search, filters and sorting.
"""

import itertools

import pytest

from jobtracker.models import FilterState
from jobtracker.query import (
    all_countries,
    all_tags,
    apply_filters,
    filter_by_country,
    filter_by_date_range,
    filter_by_status,
    filter_by_tags,
    matches,
    search,
    sort_jobs,
)


# ===== search =====

def test_search_empty_term_returns_input(sample_jobs):
    assert search(sample_jobs, "") is sample_jobs


def test_search_by_company(sample_jobs):
    result = search(sample_jobs, "TechCorp")
    assert [j.company for j in result] == ["TechCorp Solutions"]


def test_search_by_position(sample_jobs):
    result = search(sample_jobs, "Frontend")
    assert [j.position for j in result] == ["Frontend Developer"]


def test_search_by_tags_and_case_insensitive(sample_jobs):
    assert len(search(sample_jobs, "react")) == 2
    assert len(search(sample_jobs, "TECHCORP")) == 1


def test_search_notes_and_country(sample_jobs):
    assert [j.id for j in search(sample_jobs, "ecosystem")] == ["test-job-2"]
    assert [j.id for j in search(sample_jobs, "canada")] == ["test-job-2"]


# ===== simple filters =====

@pytest.mark.parametrize("status", ["", "all"])
def test_status_filter_empty_or_all_is_identity(sample_jobs, status):
    assert filter_by_status(sample_jobs, status) is sample_jobs


def test_status_filter_exact(sample_jobs):
    result = filter_by_status(sample_jobs, "Applied")
    assert [j.status for j in result] == ["Applied"]
    assert filter_by_status(sample_jobs, "applied") == []


def test_tags_filter_requires_every_tag(sample_jobs):
    assert len(filter_by_tags(sample_jobs, ["react"])) == 2
    result = filter_by_tags(sample_jobs, ["react", "nodejs"])
    assert [j.id for j in result] == ["test-job-1"]
    assert filter_by_tags(sample_jobs, []) is sample_jobs


def test_tags_filter_ignores_duplicate_tags(make_job):
    job = make_job(tags=["react", "react"])
    assert filter_by_tags([job], ["react", "react"]) == [job]


def test_more_tags_never_widen_the_result(make_job):
    jobs = [
        make_job(id="a", tags=["x", "y"]),
        make_job(id="b", tags=["x"]),
        make_job(id="c", tags=["y", "z"]),
        make_job(id="d", tags=["x", "y", "z"]),
    ]
    t1, t2 = ["x"], ["y", "z"]
    both = {j.id for j in filter_by_tags(jobs, t1 + t2)}
    each = {j.id for j in filter_by_tags(jobs, t1)} & {j.id for j in filter_by_tags(jobs, t2)}
    assert both <= each
    assert both == {"d"}


def test_country_filter(sample_jobs):
    assert filter_by_country(sample_jobs, "") is sample_jobs
    assert [j.id for j in filter_by_country(sample_jobs, "Canada")] == ["test-job-2"]
    assert filter_by_country(sample_jobs, "canada") == []


# ===== date range =====

def test_date_range_inclusive(sample_jobs):
    result = filter_by_date_range(sample_jobs, "2024-12-14", "2024-12-16")
    assert [j.application_date for j in result] == ["2024-12-15"]


def test_date_range_bounds_are_inclusive(sample_jobs):
    result = filter_by_date_range(sample_jobs, "2024-12-15", "2024-12-18")
    assert len(result) == 2


def test_date_range_empty_returns_input(sample_jobs):
    assert filter_by_date_range(sample_jobs, "", "") is sample_jobs


def test_date_range_open_ends(sample_jobs):
    assert [j.id for j in filter_by_date_range(sample_jobs, "2024-12-16", "")] == ["test-job-2"]
    assert [j.id for j in filter_by_date_range(sample_jobs, "", "2024-12-16")] == ["test-job-1"]


def test_date_range_skips_undated_records(make_job):
    undated = make_job(id="2024-12-15")
    assert filter_by_date_range([undated], "2024-01-01", "") == []


def test_date_range_unparsable_bound_matches_nothing(sample_jobs):
    assert filter_by_date_range(sample_jobs, "not-a-date", "") == []


def test_date_range_accepts_timestamps(make_job):
    job = make_job(applicationDate="2024-12-15T10:30:00Z")
    assert filter_by_date_range([job], "2024-12-15", "2024-12-16") == [job]
    assert filter_by_date_range([job], "2024-12-14", "2024-12-15") == []


# ===== composite =====

def test_empty_filter_state_matches_everything(sample_jobs):
    assert list(apply_filters(sample_jobs, FilterState())) == sample_jobs
    assert not FilterState().is_active()


def test_composite_filter_is_conjunctive(sample_jobs):
    state = FilterState(search="react", status="Interview", country="Canada")
    assert [j.id for j in apply_filters(sample_jobs, state)] == ["test-job-2"]
    assert matches(sample_jobs[1], state)
    assert not matches(sample_jobs[0], state)


def test_composite_filter_order_independent(make_job):
    jobs = [
        make_job(id="a", status="Applied", tags=["py"], country="DE", notes="remote", applicationDate="2024-03-01"),
        make_job(id="b", status="Applied", tags=["py", "go"], country="DE", notes="remote", applicationDate="2024-05-01"),
        make_job(id="c", status="Offer", tags=["py"], country="DE", notes="remote", applicationDate="2024-03-10"),
        make_job(id="d", status="Applied", tags=["py"], country="FR", notes="onsite", applicationDate="2024-03-05"),
        make_job(id="e", status="Applied", tags=["py"], country="DE", notes="remote"),
    ]
    steps = [
        lambda r: search(r, "remote"),
        lambda r: filter_by_status(r, "Applied"),
        lambda r: filter_by_country(r, "DE"),
        lambda r: filter_by_tags(r, ["py"]),
        lambda r: filter_by_date_range(r, "2024-02-01", "2024-04-01"),
    ]
    results = set()
    for order in itertools.permutations(steps):
        out = jobs
        for step in order:
            out = step(out)
        results.add(tuple(j.id for j in out))
    assert results == {("a",)}


# ===== sorting =====

def test_sort_by_company_ascending_and_descending(make_job):
    jobs = [make_job(id="1", company="beta"), make_job(id="2", company="Alpha"), make_job(id="3", company="Émile")]
    assert [j.company for j in sort_jobs(jobs, "company", "asc")] == ["Alpha", "beta", "Émile"]
    assert [j.company for j in sort_jobs(jobs, "company", "desc")] == ["Émile", "beta", "Alpha"]


def test_sort_by_status_uses_enum_order(make_job):
    jobs = [make_job(id=s, status=s) for s in ("Withdrawn", "Offer", "Applied", "Rejected", "Interview")]
    result = sort_jobs(jobs, "status", "asc")
    assert [j.status for j in result] == ["Applied", "Interview", "Offer", "Rejected", "Withdrawn"]


def test_sort_is_stable_both_directions(make_job):
    jobs = [make_job(id=str(i), country="DE" if i % 2 else "AT") for i in range(6)]
    asc = sort_jobs(jobs, "country", "asc")
    desc = sort_jobs(jobs, "country", "desc")
    assert [j.id for j in asc] == ["0", "2", "4", "1", "3", "5"]
    assert [j.id for j in desc] == ["1", "3", "5", "0", "2", "4"]


def test_sort_by_date(sample_jobs):
    assert [j.id for j in sort_jobs(sample_jobs, "date", "desc")] == ["test-job-2", "test-job-1"]
    assert [j.id for j in sort_jobs(sample_jobs, "date", "asc")] == ["test-job-1", "test-job-2"]


def test_sort_by_date_falls_back_to_id(make_job):
    # ids are rarely dates; when one parses it is used in place of applicationDate
    jobs = [make_job(id="2024-06-01"), make_job(id="x", applicationDate="2024-01-01")]
    assert [j.id for j in sort_jobs(jobs, "date", "asc")] == ["x", "2024-06-01"]


def test_sort_by_date_puts_unparsable_last(make_job):
    jobs = [
        make_job(id="acme-dev-2024-01-01"),
        make_job(id="a", applicationDate="2024-01-01"),
        make_job(id="acme-ops-2024-01-02"),
        make_job(id="b", applicationDate="2024-02-01"),
    ]
    assert [j.id for j in sort_jobs(jobs, "date", "asc")] == ["a", "b", "acme-dev-2024-01-01", "acme-ops-2024-01-02"]
    assert [j.id for j in sort_jobs(jobs, "date", "desc")] == ["b", "a", "acme-dev-2024-01-01", "acme-ops-2024-01-02"]


def test_sort_does_not_mutate_input(sample_jobs):
    before = list(sample_jobs)
    sort_jobs(sample_jobs, "company", "asc")
    assert sample_jobs == before


# ===== pickers =====

def test_all_tags_and_countries_first_seen_order(sample_jobs, make_job):
    jobs = sample_jobs + [make_job(id="z", tags=["", "go"], country="")]
    assert all_tags(jobs) == ["react", "nodejs", "full-stack", "frontend", "go"]
    assert all_countries(jobs) == ["United States", "Canada"]
