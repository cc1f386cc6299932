"""Search, filter and sort over in-memory job records.

Every function is pure: inputs are never mutated, and a filter given its
"empty" value hands back the very list it was called with.
"""
from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from jobtracker.log import get_logger
from jobtracker.models import JOB_STATUSES, FilterState, JobRecord
from jobtracker.utils import EPOCH, collation_key, now_utc, parse_date

log = get_logger(__name__)

SORT_KEYS: tuple[str, ...] = ("date", "company", "position", "status", "country")
ALL_STATUSES = "all"


def _matches_search(job: JobRecord, term: str) -> bool:
    return (
        term in job.company.lower()
        or term in job.position.lower()
        or term in job.notes.lower()
        or any(term in tag.lower() for tag in job.tags)
        or term in job.country.lower()
    )


def search(records: Sequence[JobRecord], term: str) -> Sequence[JobRecord]:
    if not term:
        return records
    needle = term.lower()
    return [job for job in records if _matches_search(job, needle)]


def filter_by_status(records: Sequence[JobRecord], status: str) -> Sequence[JobRecord]:
    if not status or status == ALL_STATUSES:
        return records
    return [job for job in records if job.status == status]


def filter_by_tags(records: Sequence[JobRecord], tags: Sequence[str]) -> Sequence[JobRecord]:
    """AND semantics: a record must carry every requested tag."""
    if not tags:
        return records
    wanted = set(tags)
    return [job for job in records if wanted.issubset(job.tags)]


def filter_by_country(records: Sequence[JobRecord], country: str) -> Sequence[JobRecord]:
    if not country:
        return records
    return [job for job in records if job.country == country]


def _date_bounds(start: str, end: str) -> tuple[datetime | None, datetime | None]:
    lo = parse_date(start) if start else EPOCH
    hi = parse_date(end) if end else now_utc()
    if lo is None or hi is None:
        log.warning("Unparsable date range %r..%r matches nothing", start, end)
    return lo, hi


def _in_range(job: JobRecord, lo: datetime | None, hi: datetime | None) -> bool:
    if lo is None or hi is None or not job.application_date:
        return False
    applied = parse_date(job.application_date)
    return applied is not None and lo <= applied <= hi


def filter_by_date_range(
    records: Sequence[JobRecord], start: str, end: str
) -> Sequence[JobRecord]:
    """Inclusive range on application date; undated records never match."""
    if not start and not end:
        return records
    lo, hi = _date_bounds(start, end)
    return [job for job in records if _in_range(job, lo, hi)]


def matches(job: JobRecord, state: FilterState) -> bool:
    """Single-record form of apply_filters."""
    return bool(apply_filters([job], state))


def apply_filters(records: Sequence[JobRecord], state: FilterState) -> Sequence[JobRecord]:
    """Conjunction of every active constraint in ``state``."""
    out = search(records, state.search)
    out = filter_by_status(out, state.status)
    out = filter_by_country(out, state.country)
    out = filter_by_tags(out, state.tags)
    out = filter_by_date_range(out, state.date_range.start, state.date_range.end)
    return out


def _status_rank(status: str) -> int:
    try:
        return JOB_STATUSES.index(status)
    except ValueError:
        return len(JOB_STATUSES)


def record_date(job: JobRecord) -> datetime | None:
    """Application date, else whatever the id parses to (often nothing)."""
    return parse_date(job.application_date or job.id)


def sort_jobs(
    records: Sequence[JobRecord], key: str = "date", order: str = "desc"
) -> list[JobRecord]:
    """Stable sort by one of SORT_KEYS; ties keep their input order."""
    descending = order == "desc"

    if key == "company":
        return sorted(records, key=lambda j: collation_key(j.company), reverse=descending)
    if key == "position":
        return sorted(records, key=lambda j: collation_key(j.position), reverse=descending)
    if key == "country":
        return sorted(records, key=lambda j: collation_key(j.country), reverse=descending)
    if key == "status":
        return sorted(records, key=lambda j: _status_rank(j.status), reverse=descending)

    if key != "date":
        log.debug("Unknown sort key %r, sorting by date", key)

    dated: list[tuple[datetime, JobRecord]] = []
    undated: list[JobRecord] = []
    for job in records:
        when = record_date(job)
        if when is None:
            undated.append(job)
        else:
            dated.append((when, job))
    dated.sort(key=lambda pair: pair[0], reverse=descending)
    return [job for _, job in dated] + undated


def all_tags(records: Sequence[JobRecord]) -> list[str]:
    seen: dict[str, None] = {}
    for job in records:
        for tag in job.tags:
            if tag:
                seen.setdefault(tag)
    return list(seen)


def all_countries(records: Sequence[JobRecord]) -> list[str]:
    seen: dict[str, None] = {}
    for job in records:
        if job.country:
            seen.setdefault(job.country)
    return list(seen)
