"""Logging setup for the tracker — stdlib only.

Console output goes to stdout at LOG_LEVEL (INFO by default). A DEBUG log file
per day is written under JOBTRACKER_LOG_DIR (default ``logs/`` under
JOBTRACKER_HOME or the working directory) unless
JOBTRACKER_NO_LOG_FILE is set.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_configured = False


def _log_dir() -> Path:
    override = os.environ.get("JOBTRACKER_LOG_DIR", "").strip()
    if override:
        return Path(override).expanduser()
    home = os.environ.get("JOBTRACKER_HOME", "").strip()
    return (Path(home).expanduser() if home else Path.cwd()) / "logs"


def get_logger(name: str) -> logging.Logger:
    """Return a named logger; configures root handlers on first call."""
    global _configured
    if not _configured:
        _configure()
        _configured = True
    return logging.getLogger(name)


def set_verbose(verbose: bool) -> None:
    """Switch root and console handlers between DEBUG and LOG_LEVEL."""
    level = logging.DEBUG if verbose else _env_level()
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(level)


def _env_level() -> int:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _configure() -> None:
    level = _env_level()
    root = logging.getLogger()
    root.setLevel(level)

    if root.handlers:
        return

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FMT)
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if os.environ.get("JOBTRACKER_NO_LOG_FILE"):
        return
    try:
        log_dir = _log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_dir / f"tracker_{datetime.now():%Y-%m-%d}.log", encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(formatter)
        root.addHandler(fh)
    except OSError:
        pass
