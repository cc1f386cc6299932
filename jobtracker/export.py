"""JSON / CSV export and JSON import of job records."""
from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any, Union

from jobtracker.log import get_logger
from jobtracker.models import ExportOptions, JobRecord
from jobtracker.records import records_from_data, validate_record
from jobtracker.utils import today_iso

log = get_logger(__name__)

__all__ = [
    "EXPORT_FORMATS", "FIELD_GROUPS", "export_filename", "from_json",
    "select_fields", "to_csv", "to_json", "validate_record",
]

Exportable = Union[JobRecord, Mapping[str, Any]]

EXPORT_FORMATS: tuple[str, ...] = ("json", "csv")

FIELD_GROUPS: dict[str, tuple[str, ...]] = {
    "basic": ("id", "company", "position", "status", "country"),
    "dates": ("applicationDate", "reminder"),
    "application": ("salaryExpectation", "applicationMethod", "jobPosting"),
    "documents": ("cvUsed", "coverLetterUsed"),
    "content": ("notes", "requirements"),
    "tags": ("tags",),
}


def _as_dict(item: Exportable) -> dict[str, Any]:
    if isinstance(item, JobRecord):
        return item.to_dict()
    return dict(item)


def to_json(records: Sequence[Exportable]) -> str:
    return json.dumps([_as_dict(r) for r in records], indent=2, ensure_ascii=False)


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def _csv_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return _quote("; ".join(str(v) for v in value))
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value)
    if any(ch in text for ch in (",", '"', "\n", "\r")):
        return _quote(text)
    return text


def to_csv(records: Sequence[Exportable]) -> str:
    """Header from every key seen (first appearance order), one row per record."""
    if not records:
        return ""
    rows = [_as_dict(r) for r in records]
    headers: dict[str, None] = {}
    for row in rows:
        for key in row:
            headers.setdefault(key)
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(_csv_cell(row.get(h)) for h in headers))
    return "\n".join(lines)


def from_json(text: str) -> list[JobRecord]:
    """Parse an exported array; anything malformed yields fewer records, never an error."""
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError, RecursionError) as exc:
        log.warning("Import failed, not valid JSON: %s", exc)
        return []
    if not isinstance(parsed, list):
        log.warning("Import failed, expected a JSON array")
        return []
    return records_from_data(parsed)


def select_fields(
    records: Sequence[JobRecord], options: ExportOptions | None = None
) -> list[dict[str, Any]]:
    """Prune each record to the enabled field groups.

    Basic fields are copied as-is; optional ones only when they hold a value.
    """
    options = options or ExportOptions()
    pruned: list[dict[str, Any]] = []
    for job in records:
        data = job.to_dict()
        out: dict[str, Any] = {}
        if options.basic:
            for key in FIELD_GROUPS["basic"]:
                out[key] = data.get(key)
        for group in ("dates", "application", "documents", "content"):
            if not getattr(options, group):
                continue
            for key in FIELD_GROUPS[group]:
                if data.get(key):
                    out[key] = data[key]
        if options.tags:
            out["tags"] = list(job.tags)
        if options.custom_fields:
            for key, value in job.custom.items():
                if key not in out and value:
                    out[key] = value
        pruned.append(out)
    return pruned


def export_filename(fmt: str, today: date | None = None) -> str:
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")
    return f"jobtracker-export-{today_iso(today)}.{fmt}"
