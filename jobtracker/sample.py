"""Bundled sample applications, used when the store holds no jobs yet."""
from __future__ import annotations

from jobtracker.log import get_logger
from jobtracker.models import JobRecord

log = get_logger(__name__)

_SAMPLE: list[dict] = [
    {
        "id": "techcorp-solutions-senior-software-engineer-2024-12-15",
        "company": "TechCorp Solutions",
        "position": "Senior Software Engineer",
        "status": "Applied",
        "notes": "Great opportunity for **full-stack** development.",
        "tags": ["react", "nodejs", "full-stack"],
        "country": "United States",
        "applicationDate": "2024-12-15",
        "applicationMethod": "LinkedIn",
        "salaryExpectation": "$140k",
    },
    {
        "id": "innovatesoft-inc-frontend-developer-2024-12-18",
        "company": "InnovateSoft Inc.",
        "position": "Frontend Developer",
        "status": "Interview",
        "notes": "Specializes in React ecosystem. Second round booked.",
        "tags": ["react", "frontend"],
        "country": "Canada",
        "applicationDate": "2024-12-18",
        "applicationMethod": "Company Website",
        "salaryExpectation": "95k CAD",
        "reminder": "2025-01-08",
    },
    {
        "id": "nordic-data-data-engineer-2024-11-02",
        "company": "Nordic Data",
        "position": "Data Engineer",
        "status": "Offer",
        "notes": "Offer received, negotiating start date.",
        "tags": ["python", "spark"],
        "country": "Sweden",
        "applicationDate": "2024-11-02",
        "applicationMethod": "Referral",
        "salaryExpectation": "60000 EUR",
    },
    {
        "id": "cloudscale-saas-site-reliability-engineer-2024-10-21",
        "company": "CloudScale SaaS",
        "position": "Site Reliability Engineer",
        "status": "Rejected",
        "notes": "Rejected after take-home.",
        "tags": ["kubernetes", "python"],
        "country": "Germany",
        "applicationDate": "2024-10-21",
        "applicationMethod": "Job Board",
    },
]


def sample_jobs() -> list[JobRecord]:
    log.info("No stored jobs — loading %d sample applications", len(_SAMPLE))
    return [JobRecord.from_dict(item) for item in _SAMPLE]
