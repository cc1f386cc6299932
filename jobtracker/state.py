"""Typed load/save helpers for every store slot, plus AppState round trips.

Malformed slot contents are logged and read back as their default; nothing
here raises on bad persisted data.
"""
from __future__ import annotations

import json
import time
from typing import Any

from jobtracker.log import get_logger
from jobtracker.models import AnalyticsSummary, AppState, CustomField, JobRecord, UserSettings
from jobtracker.records import records_from_data
from jobtracker.store import KeyValueStore

log = get_logger(__name__)

STORAGE_KEYS: dict[str, str] = {
    "jobs": "jobtracker-jobs",
    "dark_mode": "jobtracker-dark",
    "custom_fields": "jobtracker-custom-fields",
    "settings": "jobtracker-settings",
    "analytics_cache": "jobtracker-analytics-cache",
    "seen_intro": "jobtracker-seen-intro",
}

DEFAULT_CACHE_TTL = 3600


def _load_json(store: KeyValueStore, slot: str) -> Any:
    raw = store.get(STORAGE_KEYS[slot])
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (ValueError, RecursionError) as exc:
        log.error("Error parsing stored %s: %s", slot, exc)
        return None


def load_jobs(store: KeyValueStore) -> list[JobRecord]:
    data = _load_json(store, "jobs")
    if not isinstance(data, list):
        if data is not None:
            log.error("Stored jobs are not a list, ignoring")
        return []
    return records_from_data(data)


def save_jobs(store: KeyValueStore, jobs: list[JobRecord]) -> None:
    """Replace the whole collection; drops the analytics cache."""
    payload = json.dumps([job.to_dict() for job in jobs], ensure_ascii=False)
    store.set(STORAGE_KEYS["jobs"], payload)
    store.remove(STORAGE_KEYS["analytics_cache"])
    log.debug("Saved %d job(s)", len(jobs))


def load_dark_mode(store: KeyValueStore, default: bool = False) -> bool:
    raw = store.get(STORAGE_KEYS["dark_mode"])
    if raw is None:
        return default
    return raw == "true"


def save_dark_mode(store: KeyValueStore, is_dark: bool) -> None:
    store.set(STORAGE_KEYS["dark_mode"], "true" if is_dark else "false")


def load_seen_intro(store: KeyValueStore) -> bool:
    return bool(store.get(STORAGE_KEYS["seen_intro"]))


def mark_intro_seen(store: KeyValueStore) -> None:
    store.set(STORAGE_KEYS["seen_intro"], "1")


def load_custom_fields(store: KeyValueStore) -> list[CustomField]:
    data = _load_json(store, "custom_fields")
    if not isinstance(data, list):
        return []
    return [CustomField.from_dict(item) for item in data if isinstance(item, dict)]


def save_custom_fields(store: KeyValueStore, fields: list[CustomField]) -> None:
    store.set(STORAGE_KEYS["custom_fields"], json.dumps([f.to_dict() for f in fields]))


def load_user_settings(store: KeyValueStore) -> UserSettings | None:
    data = _load_json(store, "settings")
    if not isinstance(data, dict):
        return None
    return UserSettings.from_dict(data)


def save_user_settings(store: KeyValueStore, settings: UserSettings) -> None:
    store.set(STORAGE_KEYS["settings"], json.dumps(settings.to_dict()))


def _now_ms() -> int:
    return int(time.time() * 1000)


def get_cached_analytics(
    store: KeyValueStore, ttl: int = DEFAULT_CACHE_TTL, now_ms: int | None = None
) -> AnalyticsSummary | None:
    """Cached summary, or None when missing, malformed or older than ``ttl`` seconds."""
    entry = _load_json(store, "analytics_cache")
    if not isinstance(entry, dict):
        return None
    now_ms = _now_ms() if now_ms is None else now_ms
    timestamp = entry.get("timestamp")
    if not isinstance(timestamp, (int, float)) or now_ms - timestamp >= ttl * 1000:
        log.debug("Analytics cache stale or missing timestamp")
        return None
    try:
        return AnalyticsSummary.from_dict(entry["data"])
    except (KeyError, TypeError, ValueError) as exc:
        log.error("Error parsing cached analytics: %s", exc)
        return None


def save_analytics_cache(
    store: KeyValueStore, summary: AnalyticsSummary, now_ms: int | None = None
) -> None:
    entry = {
        "data": summary.to_dict(),
        "timestamp": _now_ms() if now_ms is None else now_ms,
    }
    store.set(STORAGE_KEYS["analytics_cache"], json.dumps(entry))


def load_state(store: KeyValueStore, default_dark: bool = False) -> AppState:
    return AppState(
        jobs=load_jobs(store),
        dark_mode=load_dark_mode(store, default=default_dark),
        seen_intro=load_seen_intro(store),
        custom_fields=load_custom_fields(store),
        settings=load_user_settings(store),
    )


def save_state(store: KeyValueStore, state: AppState) -> None:
    save_jobs(store, state.jobs)
    save_dark_mode(store, state.dark_mode)
    save_custom_fields(store, state.custom_fields)
    if state.settings is not None:
        save_user_settings(store, state.settings)
    if state.seen_intro:
        mark_intro_seen(store)
