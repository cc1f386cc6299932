"""Load tracker settings and env configuration."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobtracker.log import get_logger

log = get_logger(__name__)

load_dotenv()

SETTINGS_FILE = Path("config") / "settings.yaml"

DEFAULT_SETTINGS: dict[str, Any] = {
    # Seconds before a cached analytics entry is ignored
    "analytics_cache_ttl": 3600,
    # strftime pattern for timeline bucket labels; %x follows the locale
    "date_format": "%x",
    "top_countries": 5,
    "top_tags": 8,
    "top_companies": 5,
    "months": 6,
}


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def home_dir() -> Path:
    """Base for data/, reports/ and config/: JOBTRACKER_HOME, else the working dir."""
    override = get_env("JOBTRACKER_HOME")
    return Path(override).expanduser() if override else Path.cwd()


def data_dir() -> Path:
    return home_dir() / "data"


def reports_dir() -> Path:
    return home_dir() / "reports"


def get_store_path() -> Path:
    """Store file location; JOBTRACKER_STORE overrides the data dir default."""
    override = get_env("JOBTRACKER_STORE")
    if override:
        return Path(override).expanduser()
    return data_dir() / "store.json"


def load_settings(path: Path | None = None) -> dict[str, Any]:
    """Defaults merged with settings.yaml; a broken file leaves the defaults."""
    path = path or home_dir() / SETTINGS_FILE
    settings = dict(DEFAULT_SETTINGS)
    for key, value in _read_yaml(path).items():
        if key not in DEFAULT_SETTINGS:
            log.debug("Unknown setting %r ignored", key)
            continue
        settings[key] = value

    ttl = get_env("JOBTRACKER_CACHE_TTL")
    if ttl.isdigit():
        settings["analytics_cache_ttl"] = int(ttl)
    return settings


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        log.error("Could not read settings %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        log.warning("Ignoring settings %s: expected a mapping", path.name)
        return {}
    return data
