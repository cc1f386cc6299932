"""Key-value stores the tracker persists through.

The tracker only needs ``get``/``set``/``remove`` on text values. ``FileStore``
keeps every slot in one JSON object on disk, with an advisory lock around
each access.
"""
from __future__ import annotations

import fcntl
import json
from abc import ABC, abstractmethod
from pathlib import Path

from jobtracker.log import get_logger

log = get_logger(__name__)


class KeyValueStore(ABC):
    @abstractmethod
    def get(self, key: str) -> str | None:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass


class MemoryStore(KeyValueStore):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


class FileStore(KeyValueStore):
    """All slots in a single JSON file; an unreadable file counts as empty."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                _lock(f, exclusive=False)
                raw = f.read()
                _unlock(f)
        except (OSError, UnicodeDecodeError) as exc:
            log.error("Store %s is unreadable, treating as empty: %s", self.path.name, exc)
            return {}
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            log.error("Store %s is corrupt, treating as empty: %s", self.path.name, exc)
            return {}
        if not isinstance(data, dict):
            log.error("Store %s is not an object, treating as empty", self.path.name)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            _lock(f)
            json.dump(data, f, indent=2, ensure_ascii=False)
            _unlock(f)

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)
        log.debug("Stored %s (%d chars)", key, len(value))

    def remove(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)
            log.debug("Removed %s", key)
