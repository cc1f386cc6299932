"""Data models for tracked job applications, filters and app state."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Union

JOB_STATUSES: tuple[str, ...] = (
    "Applied",
    "Interview",
    "Offer",
    "Rejected",
    "Withdrawn",
)

APPLICATION_METHODS: tuple[str, ...] = (
    "Company Website",
    "Company Career Portal",
    "LinkedIn",
    "Indeed",
    "AngelList",
    "Recruiter",
    "Referral",
    "Job Board",
    "Direct Contact",
    "Other",
)

CustomValue = Union[str, int, float, bool, list]

# attribute name -> wire key, in serialization order
REQUIRED_FIELDS: dict[str, str] = {
    "id": "id",
    "company": "company",
    "position": "position",
    "status": "status",
    "notes": "notes",
    "tags": "tags",
    "country": "country",
}
OPTIONAL_FIELDS: dict[str, str] = {
    "reminder": "reminder",
    "application_date": "applicationDate",
    "application_method": "applicationMethod",
    "salary_expectation": "salaryExpectation",
    "job_posting": "jobPosting",
    "requirements": "requirements",
    "cover_letter_used": "coverLetterUsed",
    "cv_used": "cvUsed",
}
KNOWN_KEYS: frozenset[str] = frozenset(REQUIRED_FIELDS.values()) | frozenset(OPTIONAL_FIELDS.values())


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _tags(value: Any) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [_text(t) for t in value if t is not None]
    if isinstance(value, str) and value:
        return [value]
    return []


@dataclass
class JobRecord:
    id: str
    company: str
    position: str
    status: str = "Applied"
    notes: str = ""
    tags: list[str] = field(default_factory=list)
    country: str = ""
    reminder: str | None = None
    application_date: str | None = None
    application_method: str | None = None
    salary_expectation: str | None = None
    job_posting: str | None = None
    requirements: str | None = None
    cover_letter_used: str | None = None
    cv_used: str | None = None
    custom: dict[str, CustomValue] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JobRecord:
        """Build from a wire dict; unrecognized keys land in ``custom``."""
        kwargs: dict[str, Any] = {
            "id": _text(data.get("id")),
            "company": _text(data.get("company")),
            "position": _text(data.get("position")),
            "status": _text(data.get("status")),
            "notes": _text(data.get("notes")),
            "tags": _tags(data.get("tags")),
            "country": _text(data.get("country")),
        }
        for attr, key in OPTIONAL_FIELDS.items():
            value = data.get(key)
            kwargs[attr] = None if value is None else _text(value)
        kwargs["custom"] = {k: v for k, v in data.items() if k not in KNOWN_KEYS}
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            key: getattr(self, attr) for attr, key in REQUIRED_FIELDS.items()
        }
        out["tags"] = list(self.tags)
        for attr, key in OPTIONAL_FIELDS.items():
            value = getattr(self, attr)
            if value is not None:
                out[key] = value
        for key, value in self.custom.items():
            out.setdefault(key, value)
        return out

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a field by wire key (``applicationDate``) or custom key."""
        for attr, wire in {**REQUIRED_FIELDS, **OPTIONAL_FIELDS}.items():
            if wire == key:
                return getattr(self, attr)
        return self.custom.get(key, default)


@dataclass
class DateRange:
    start: str = ""
    end: str = ""


@dataclass
class FilterState:
    status: str = ""
    tags: list[str] = field(default_factory=list)
    country: str = ""
    search: str = ""
    date_range: DateRange = field(default_factory=DateRange)

    def is_active(self) -> bool:
        return bool(
            self.search or self.status or self.country or self.tags
            or self.date_range.start or self.date_range.end
        )


@dataclass
class CustomField:
    name: str
    key: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CustomField:
        return cls(name=_text(data.get("name")), key=_text(data.get("key")))

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "key": self.key}


@dataclass
class Theme:
    mode: str = "light"
    primary_color: str = "#3b82f6"
    accent_color: str = "#10b981"


@dataclass
class NotificationSettings:
    reminders: bool = True
    email: bool = False
    browser: bool = False


@dataclass
class UserSettings:
    theme: Theme = field(default_factory=Theme)
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    default_fields: list[str] = field(default_factory=list)
    custom_fields: list[CustomField] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserSettings:
        theme = data.get("theme")
        theme = theme if isinstance(theme, dict) else {}
        notes = data.get("notifications")
        notes = notes if isinstance(notes, dict) else {}
        defaults = Theme()
        return cls(
            theme=Theme(
                mode="dark" if theme.get("mode") == "dark" else "light",
                primary_color=_text(theme.get("primaryColor") or defaults.primary_color),
                accent_color=_text(theme.get("accentColor") or defaults.accent_color),
            ),
            notifications=NotificationSettings(
                reminders=bool(notes.get("reminders", True)),
                email=bool(notes.get("email", False)),
                browser=bool(notes.get("browser", False)),
            ),
            default_fields=[_text(f) for f in data.get("defaultFields") or []],
            custom_fields=[
                CustomField.from_dict(c) for c in data.get("customFields") or []
                if isinstance(c, dict)
            ],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "theme": {
                "mode": self.theme.mode,
                "primaryColor": self.theme.primary_color,
                "accentColor": self.theme.accent_color,
            },
            "notifications": {
                "reminders": self.notifications.reminders,
                "email": self.notifications.email,
                "browser": self.notifications.browser,
            },
            "defaultFields": list(self.default_fields),
            "customFields": [c.to_dict() for c in self.custom_fields],
        }


@dataclass
class AnalyticsSummary:
    total: int
    status_breakdown: dict[str, int]
    offer_rate: int
    response_rate: int
    monthly: list[tuple[str, int]]
    top_companies: list[tuple[str, int]]
    top_countries: list[tuple[str, int]]
    top_tags: list[tuple[str, int]]
    average_salary: int
    salary_sample_size: int

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, list):
                value = [list(pair) for pair in value]
            out[f.name] = value
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalyticsSummary:
        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            value = data[f.name]
            if isinstance(value, list):
                value = [(str(k), int(n)) for k, n in value]
            kwargs[f.name] = value
        return cls(**kwargs)


@dataclass
class ExportOptions:
    """Which field groups an export keeps."""

    basic: bool = True
    dates: bool = True
    application: bool = True
    documents: bool = True
    content: bool = True
    tags: bool = True
    custom_fields: bool = True


@dataclass
class AppState:
    jobs: list[JobRecord] = field(default_factory=list)
    dark_mode: bool = False
    seen_intro: bool = False
    custom_fields: list[CustomField] = field(default_factory=list)
    settings: UserSettings | None = None
