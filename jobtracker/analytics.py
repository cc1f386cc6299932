"""Aggregate statistics and groupings over job records."""
from __future__ import annotations

import re
from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from datetime import date

from jobtracker.log import get_logger
from jobtracker.models import JOB_STATUSES, AnalyticsSummary, JobRecord
from jobtracker.query import record_date
from jobtracker.utils import round_half_up

log = get_logger(__name__)

UNDATED_LABEL = "Undated"
RESPONSE_STATUSES: frozenset[str] = frozenset({"Interview", "Offer"})

_FIRST_NUMBER = re.compile(r"\d+")


def status_breakdown(records: Sequence[JobRecord]) -> list[int]:
    """Counts per status in JOB_STATUSES order, zero-filled."""
    counts = Counter(job.status for job in records)
    return [counts.get(status, 0) for status in JOB_STATUSES]


def _percent(part: int, total: int) -> int:
    if not total:
        return 0
    return round_half_up(part / total * 100)


def offer_rate(records: Sequence[JobRecord]) -> int:
    return _percent(sum(1 for job in records if job.status == "Offer"), len(records))


def response_rate(records: Sequence[JobRecord]) -> int:
    """Share of records that reached Interview or Offer."""
    return _percent(sum(1 for job in records if job.status in RESPONSE_STATUSES), len(records))


def group_by_month(records: Sequence[JobRecord], months: int = 6) -> list[tuple[str, int]]:
    """Counts per ``YYYY-MM`` for the latest ``months`` months that have records.

    Empty months are not filled in, so six buckets may span more than six
    calendar months. Records without a usable date are left out.
    """
    counts: Counter[str] = Counter()
    for job in records:
        when = record_date(job)
        if when is None:
            continue
        counts[f"{when.year:04d}-{when.month:02d}"] += 1
    keys = sorted(counts)[-months:] if months > 0 else []
    return [(k, counts[k]) for k in keys]


def top_entities(
    records: Sequence[JobRecord],
    selector: Callable[[JobRecord], Iterable[str]],
    limit: int,
) -> list[tuple[str, int]]:
    """Most frequent keys; equal counts keep first-seen order."""
    counts: Counter[str] = Counter()
    for job in records:
        for key in selector(job):
            if key:
                counts[key] += 1
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return ranked[:max(limit, 0)]


def top_countries(records: Sequence[JobRecord], limit: int = 5) -> list[tuple[str, int]]:
    return top_entities(records, lambda job: [job.country], limit)


def top_tags(records: Sequence[JobRecord], limit: int = 8) -> list[tuple[str, int]]:
    return top_entities(records, lambda job: job.tags, limit)


def top_companies(records: Sequence[JobRecord], limit: int = 5) -> list[tuple[str, int]]:
    return top_entities(records, lambda job: [job.company], limit)


def group_by_date(
    records: Sequence[JobRecord], date_format: str | None = None
) -> list[tuple[str, list[JobRecord]]]:
    """Timeline buckets, newest day first; undated records go last."""
    buckets: dict[date, list[JobRecord]] = {}
    undated: list[JobRecord] = []
    for job in records:
        when = record_date(job)
        if when is None:
            undated.append(job)
            continue
        buckets.setdefault(when.date(), []).append(job)

    fmt = date_format or "%x"
    groups = [(day.strftime(fmt), jobs) for day, jobs in sorted(buckets.items(), reverse=True)]
    if undated:
        groups.append((UNDATED_LABEL, undated))
    return groups


def parse_salary(text: str | None) -> int:
    """First integer in the text, times 1000 when a k/K marker appears; 0 if none."""
    if not text:
        return 0
    match = _FIRST_NUMBER.search(text)
    if not match:
        return 0
    multiplier = 1000 if ("k" in text or "K" in text) else 1
    return int(match.group(0)) * multiplier


def _salaries(records: Sequence[JobRecord]) -> list[int]:
    values = (parse_salary(job.salary_expectation) for job in records)
    return [v for v in values if v > 0]


def average_salary(records: Sequence[JobRecord]) -> int:
    salaries = _salaries(records)
    if not salaries:
        return 0
    return round_half_up(sum(salaries) / len(salaries))


def salary_sample_size(records: Sequence[JobRecord]) -> int:
    return len(_salaries(records))


def compute_analytics(
    records: Sequence[JobRecord], settings: dict | None = None
) -> AnalyticsSummary:
    settings = settings or {}
    breakdown = status_breakdown(records)
    summary = AnalyticsSummary(
        total=len(records),
        status_breakdown=dict(zip(JOB_STATUSES, breakdown)),
        offer_rate=offer_rate(records),
        response_rate=response_rate(records),
        monthly=group_by_month(records, settings.get("months", 6)),
        top_companies=top_companies(records, settings.get("top_companies", 5)),
        top_countries=top_countries(records, settings.get("top_countries", 5)),
        top_tags=top_tags(records, settings.get("top_tags", 8)),
        average_salary=average_salary(records),
        salary_sample_size=salary_sample_size(records),
    )
    log.debug("Computed analytics over %d record(s)", summary.total)
    return summary
