"""
Shared fixtures for the tracker tests.

Log files are disabled before any jobtracker import so test runs leave no
logs/ directory behind.
"""

import os

import pytest

os.environ["JOBTRACKER_NO_LOG_FILE"] = "1"

from jobtracker.models import JobRecord  # noqa: E402
from jobtracker.store import MemoryStore  # noqa: E402


def _make_job(**overrides):
    data = {
        "id": "job-1",
        "company": "Acme",
        "position": "Engineer",
        "status": "Applied",
        "notes": "",
        "tags": [],
        "country": "Germany",
    }
    data.update(overrides)
    return JobRecord.from_dict(data)


@pytest.fixture
def make_job():
    """Factory for a minimal valid record with overrides."""
    return _make_job


@pytest.fixture
def sample_jobs():
    """Two applications a few days apart."""
    return [
        JobRecord.from_dict({
            "id": "test-job-1",
            "company": "TechCorp Solutions",
            "position": "Senior Software Engineer",
            "status": "Applied",
            "notes": "Great opportunity for full-stack development",
            "tags": ["react", "nodejs", "full-stack"],
            "country": "United States",
            "applicationDate": "2024-12-15",
        }),
        JobRecord.from_dict({
            "id": "test-job-2",
            "company": "InnovateSoft Inc.",
            "position": "Frontend Developer",
            "status": "Interview",
            "notes": "Specializes in React ecosystem",
            "tags": ["react", "frontend"],
            "country": "Canada",
            "applicationDate": "2024-12-18",
        }),
    ]


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    monkeypatch.delenv("JOBTRACKER_STORE", raising=False)
    monkeypatch.delenv("JOBTRACKER_CACHE_TTL", raising=False)
    monkeypatch.delenv("JOBTRACKER_HOME", raising=False)
