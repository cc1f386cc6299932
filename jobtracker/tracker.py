"""Track applications: the app state plus the store it persists to."""
from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any

from jobtracker import state as slots
from jobtracker.analytics import compute_analytics, group_by_date
from jobtracker.config import DEFAULT_SETTINGS
from jobtracker.export import export_filename, from_json, select_fields, to_csv, to_json
from jobtracker.log import get_logger
from jobtracker.models import (
    OPTIONAL_FIELDS,
    AnalyticsSummary,
    AppState,
    CustomField,
    ExportOptions,
    FilterState,
    JobRecord,
)
from jobtracker.query import apply_filters, sort_jobs
from jobtracker.records import generate_job_id, validate_record
from jobtracker.sample import sample_jobs
from jobtracker.store import KeyValueStore

log = get_logger(__name__)

_EDITABLE: frozenset[str] = frozenset(
    {"company", "position", "status", "notes", "tags", "country", "custom"} | set(OPTIONAL_FIELDS)
)


class JobTracker:
    def __init__(
        self,
        store: KeyValueStore,
        state: AppState | None = None,
        settings: dict[str, Any] | None = None,
    ) -> None:
        self.store = store
        self.state = state if state is not None else AppState()
        self.settings = {**DEFAULT_SETTINGS, **(settings or {})}
        # sample jobs live only in memory until the first save
        self.sample_loaded = False

    @classmethod
    def open(
        cls,
        store: KeyValueStore,
        settings: dict[str, Any] | None = None,
        *,
        use_sample: bool = True,
    ) -> JobTracker:
        """Load state from ``store``; an empty store starts with the sample jobs."""
        app_state = slots.load_state(store)
        from_sample = not app_state.jobs and use_sample
        if from_sample:
            app_state.jobs = sample_jobs()
        log.info("Opened tracker with %d job(s)", len(app_state.jobs))
        tracker = cls(store, app_state, settings)
        tracker.sample_loaded = from_sample
        return tracker

    @property
    def jobs(self) -> list[JobRecord]:
        return self.state.jobs

    def save(self) -> None:
        slots.save_state(self.store, self.state)
        self.sample_loaded = False

    def _save_jobs(self) -> None:
        slots.save_jobs(self.store, self.state.jobs)
        self.sample_loaded = False

    def _index(self, job_id: str) -> int:
        for i, job in enumerate(self.state.jobs):
            if job.id == job_id:
                return i
        raise KeyError(job_id)

    def get_job(self, job_id: str) -> JobRecord:
        return self.state.jobs[self._index(job_id)]

    def add_job(
        self,
        company: str,
        position: str,
        *,
        today: date | None = None,
        **fields: Any,
    ) -> JobRecord:
        unknown = set(fields) - _EDITABLE
        if unknown:
            raise ValueError(f"Unknown job field(s): {', '.join(sorted(unknown))}")
        job = JobRecord(
            id=generate_job_id(company, position, today),
            company=company,
            position=position,
            **fields,
        )
        if not validate_record(job):
            raise ValueError(f"Invalid job record for {company!r} / {position!r}")
        if any(existing.id == job.id for existing in self.state.jobs):
            raise ValueError(f"Job {job.id} already exists")
        self.state.jobs.append(job)
        self._save_jobs()
        log.info("Added %s @ %s [%s]", position, company, job.status)
        return job

    def update_job(self, job_id: str, **changes: Any) -> JobRecord:
        """Edit a record in place (ids never change)."""
        unknown = set(changes) - _EDITABLE
        if unknown:
            raise ValueError(f"Unknown job field(s): {', '.join(sorted(unknown))}")
        i = self._index(job_id)
        updated = replace(self.state.jobs[i], **changes)
        if not validate_record(updated):
            raise ValueError(f"Update would make {job_id} invalid")
        self.state.jobs[i] = updated
        self._save_jobs()
        log.debug("Updated %s: %s", job_id, ", ".join(sorted(changes)))
        return updated

    def remove_job(self, job_id: str) -> JobRecord:
        removed = self.state.jobs.pop(self._index(job_id))
        self._save_jobs()
        log.info("Removed %s", job_id)
        return removed

    def view(
        self,
        filters: FilterState | None = None,
        sort_key: str = "date",
        order: str = "desc",
    ) -> list[JobRecord]:
        filtered = apply_filters(self.state.jobs, filters or FilterState())
        return sort_jobs(filtered, sort_key, order)

    def timeline(self, filters: FilterState | None = None) -> list[tuple[str, list[JobRecord]]]:
        filtered = apply_filters(self.state.jobs, filters or FilterState())
        return group_by_date(filtered, self.settings.get("date_format"))

    def analytics(self, filters: FilterState | None = None) -> AnalyticsSummary:
        """Summary of the (filtered) jobs; the unfiltered one goes through the cache."""
        if filters is not None and filters.is_active():
            return compute_analytics(apply_filters(self.state.jobs, filters), self.settings)

        if self.sample_loaded:
            return compute_analytics(self.state.jobs, self.settings)

        ttl = int(self.settings.get("analytics_cache_ttl", slots.DEFAULT_CACHE_TTL))
        cached = slots.get_cached_analytics(self.store, ttl=ttl)
        if cached is not None:
            log.debug("Analytics served from cache")
            return cached
        summary = compute_analytics(self.state.jobs, self.settings)
        slots.save_analytics_cache(self.store, summary)
        return summary

    def export(
        self,
        fmt: str,
        filters: FilterState | None = None,
        options: ExportOptions | None = None,
        today: date | None = None,
    ) -> tuple[str, str]:
        """Return ``(filename, text)`` for the filtered jobs in ``fmt``."""
        filename = export_filename(fmt, today)
        records = apply_filters(self.state.jobs, filters or FilterState())
        pruned = select_fields(records, options)
        text = to_json(pruned) if fmt == "json" else to_csv(pruned)
        log.info("Exported %d job(s) as %s", len(pruned), fmt.upper())
        return filename, text

    def import_json(self, text: str) -> int:
        """Merge imported records by id (imported wins); returns how many were read."""
        imported = from_json(text)
        if not imported:
            log.warning("Nothing imported")
            return 0
        by_id = {job.id: i for i, job in enumerate(self.state.jobs)}
        for job in imported:
            if job.id in by_id:
                self.state.jobs[by_id[job.id]] = job
            else:
                by_id[job.id] = len(self.state.jobs)
                self.state.jobs.append(job)
        self._save_jobs()
        log.info("Imported %d job(s)", len(imported))
        return len(imported)

    def set_dark_mode(self, is_dark: bool) -> None:
        self.state.dark_mode = is_dark
        slots.save_dark_mode(self.store, is_dark)

    def dismiss_intro(self) -> None:
        self.state.seen_intro = True
        slots.mark_intro_seen(self.store)

    def add_custom_field(self, name: str, key: str) -> CustomField:
        descriptor = CustomField(name=name, key=key)
        self.state.custom_fields.append(descriptor)
        slots.save_custom_fields(self.store, self.state.custom_fields)
        return descriptor
