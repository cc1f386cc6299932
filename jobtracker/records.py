"""Record validation and id generation."""
from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from jobtracker.log import get_logger
from jobtracker.models import JobRecord
from jobtracker.utils import today_iso

log = get_logger(__name__)

_SLUG_MAX = 50
_NOT_SLUG = re.compile(r"[^a-z0-9\s]")
_SPACES = re.compile(r"\s+")


def generate_job_id(company: str, position: str, today: date | None = None) -> str:
    """Slug of company + position with the creation date appended.

    ``generate_job_id("Tech@Corp!", "Senior/Developer")`` on 2024-01-01 gives
    ``techcorpseniordeveloper-2024-01-01``.
    """
    slug = f"{company}-{position}".lower()
    slug = _NOT_SLUG.sub("", slug)
    slug = _SPACES.sub("-", slug.strip())
    slug = slug[:_SLUG_MAX].rstrip("-")
    return f"{slug}-{today_iso(today)}"


def validate_record(candidate: Any) -> bool:
    """True when every required field is present and well-typed."""
    if isinstance(candidate, JobRecord):
        data: Mapping[str, Any] = {**candidate.to_dict(), "tags": candidate.tags}
    elif isinstance(candidate, Mapping):
        data = candidate
    else:
        return False
    for key in ("id", "company", "position", "status", "country"):
        value = data.get(key)
        if not isinstance(value, str) or not value:
            return False
    return isinstance(data.get("notes"), str) and isinstance(data.get("tags"), list)


def is_importable(item: Any) -> bool:
    """Looser guard used on import: an object with id, company and position."""
    return isinstance(item, Mapping) and all(item.get(k) for k in ("id", "company", "position"))


def records_from_data(items: Iterable[Any]) -> list[JobRecord]:
    """Convert decoded JSON items, silently skipping ones that cannot be records."""
    records: list[JobRecord] = []
    skipped = 0
    for item in items:
        if not is_importable(item):
            skipped += 1
            continue
        records.append(JobRecord.from_dict(dict(item)))
    if skipped:
        log.debug("Skipped %d invalid record(s)", skipped)
    return records
