"""
Unit tests for export/import and record helpers.
"""

import csv
import io
import json
from datetime import date

import pytest

from jobtracker.export import export_filename, from_json, select_fields, to_csv, to_json
from jobtracker.models import ExportOptions, JobRecord
from jobtracker.records import generate_job_id, validate_record


# ===== JSON =====

def test_to_json_is_pretty_printed(sample_jobs):
    text = to_json(sample_jobs)
    assert text == json.dumps([j.to_dict() for j in sample_jobs], indent=2)
    assert text.splitlines()[1] == "  {"


def test_json_round_trip(sample_jobs, make_job):
    jobs = sample_jobs + [make_job(id="x", reminder="2025-01-01", salaryExpectation="", rating=4, remote=True)]
    assert all(validate_record(j) for j in jobs)
    assert from_json(to_json(jobs)) == jobs


def test_from_json_invalid_text_returns_empty():
    assert from_json("invalid json") == []
    assert from_json('{"id": "x"}') == []
    assert from_json("") == []


def test_from_json_drops_invalid_entries(sample_jobs):
    payload = [j.to_dict() for j in sample_jobs] + [
        {"id": "x", "company": "NoPosition"},
        "not an object",
        None,
        {"company": "A", "position": "B"},
    ]
    result = from_json(json.dumps(payload))
    assert [j.id for j in result] == ["test-job-1", "test-job-2"]


def test_from_json_keeps_unknown_fields_as_custom():
    text = json.dumps([{"id": "a", "company": "C", "position": "P", "recruiter": "Sam", "onsiteDays": 2}])
    (job,) = from_json(text)
    assert job.custom == {"recruiter": "Sam", "onsiteDays": 2}
    assert job.to_dict()["recruiter"] == "Sam"
    assert job.get("onsiteDays") == 2


def test_from_json_fills_missing_required_fields():
    (job,) = from_json('[{"id": "a", "company": "C", "position": "P"}]')
    assert job.tags == []
    assert job.notes == ""
    assert not validate_record(job)


# ===== CSV =====

def test_to_csv_empty():
    assert to_csv([]) == ""


def test_to_csv_header_and_rows(sample_jobs):
    text = to_csv(sample_jobs)
    lines = text.split("\n")
    assert lines[0] == "id,company,position,status,notes,tags,country,applicationDate"
    assert len(lines) == len(sample_jobs) + 1
    assert '"react; nodejs; full-stack"' in text
    assert "TechCorp Solutions" in text


def test_to_csv_header_union_in_first_seen_order():
    rows = [{"id": "1", "company": "A"}, {"id": "2", "country": "DE", "company": "B"}]
    lines = to_csv(rows).split("\n")
    assert lines[0] == "id,company,country"
    assert lines[1] == "1,A,"
    assert lines[2] == "2,B,DE"


def test_to_csv_quotes_commas_and_quotes():
    text = to_csv([{"notes": 'Remote, "hybrid" ok', "flag": False, "n": 0}])
    assert text.split("\n")[1] == '"Remote, ""hybrid"" ok",false,0'


def test_to_csv_parses_back_with_csv_module(sample_jobs, make_job):
    jobs = sample_jobs + [make_job(id="n", notes="line one\nline two, more")]
    rows = list(csv.reader(io.StringIO(to_csv(jobs))))
    assert len(rows) == len(jobs) + 1
    assert rows[-1][4] == "line one\nline two, more"


# ===== field selection =====

def test_select_fields_defaults_keep_everything(make_job):
    job = make_job(applicationDate="2024-01-01", cvUsed="cv.pdf", recruiter="Sam")
    (row,) = select_fields([job])
    assert row["applicationDate"] == "2024-01-01"
    assert row["cvUsed"] == "cv.pdf"
    assert row["recruiter"] == "Sam"
    assert row["tags"] == []


def test_select_fields_prunes_groups(make_job):
    job = make_job(notes="hi", applicationDate="2024-01-01", salaryExpectation="10k", recruiter="Sam")
    options = ExportOptions(dates=False, application=False, content=False, custom_fields=False, tags=False)
    (row,) = select_fields([job], options)
    assert row == {
        "id": "job-1", "company": "Acme", "position": "Engineer",
        "status": "Applied", "country": "Germany",
    }


def test_select_fields_skips_empty_optionals(make_job):
    (row,) = select_fields([make_job(notes="", reminder="")])
    assert "notes" not in row
    assert "reminder" not in row


def test_export_filename():
    assert export_filename("csv", date(2024, 3, 9)) == "jobtracker-export-2024-03-09.csv"
    with pytest.raises(ValueError):
        export_filename("pdf")


# ===== records =====

def test_generate_job_id_examples():
    day = date(2024, 1, 1)
    assert generate_job_id("Tech@Corp!", "Senior/Developer", day) == "techcorpseniordeveloper-2024-01-01"
    assert generate_job_id("TechCorp Solutions", "Senior Developer", day) == "techcorp-solutionssenior-developer-2024-01-01"


def test_generate_job_id_collapses_whitespace():
    result = generate_job_id("  Big   Co ", "Dev  Ops", date(2024, 1, 1))
    assert result == "big-co-dev-ops-2024-01-01"
    assert "--" not in result


def test_generate_job_id_truncates():
    result = generate_job_id("A" * 80, "Developer", date(2024, 1, 1))
    slug = result[: -len("-2024-01-01")]
    assert len(slug) <= 50
    assert len(result) <= 61


def test_generate_job_id_no_trailing_hyphen_after_truncation():
    result = generate_job_id("a" * 49 + " b", "x", date(2024, 1, 1))
    assert result == "a" * 49 + "-2024-01-01"


def test_validate_record(sample_jobs):
    assert validate_record(sample_jobs[0])
    assert validate_record(sample_jobs[0].to_dict())
    assert not validate_record({"id": "x", "company": "C"})
    assert not validate_record({**sample_jobs[0].to_dict(), "tags": "react"})
    assert not validate_record({**sample_jobs[0].to_dict(), "notes": None})
    assert not validate_record("nope")
    assert not validate_record(JobRecord(id="x", company="C", position="P", country=""))


def test_from_json_deeply_nested_returns_empty():
    assert from_json("[" * 100000 + "]" * 100000) == []


def test_validate_record_rejects_string_tags(make_job):
    job = make_job()
    job.tags = "react"
    assert not validate_record(job)
