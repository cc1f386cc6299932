"""Date parsing, collation and rounding helpers shared by the query and analytics code."""
from __future__ import annotations

import math
import unicodedata
from datetime import date, datetime, timezone

EPOCH = datetime(1970, 1, 1)


def now_utc() -> datetime:
    """Naive UTC now, comparable with parse_date results."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_date(value: object) -> datetime | None:
    """Parse an ISO date or timestamp into naive UTC; None when unparsable.

    Date-only strings are midnight UTC. Ids such as ``acme-dev-2024-01-05``
    are not dates and return None.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def today_iso(today: date | None = None) -> str:
    return (today or now_utc().date()).isoformat()


def collation_key(text: str) -> tuple[str, str]:
    """Locale-style sort key: accents folded and case-insensitive first."""
    text = text or ""
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), text


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
