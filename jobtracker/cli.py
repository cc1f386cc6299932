"""
Command-line interface for the job application tracker.

Usage:
    python -m jobtracker list --status Interview --sort company --asc
    python -m jobtracker stats
    python -m jobtracker export csv --out ./exports
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from jobtracker.config import get_store_path, load_settings
from jobtracker.export import EXPORT_FORMATS
from jobtracker.log import get_logger, set_verbose
from jobtracker.models import JOB_STATUSES, DateRange, ExportOptions, FilterState, JobRecord
from jobtracker.query import SORT_KEYS
from jobtracker.report import build_summary_report, write_summary_report
from jobtracker.store import FileStore
from jobtracker.tracker import JobTracker

log = get_logger(__name__)


def split_tags(value: str) -> list[str]:
    return [t.strip() for t in (value or "").split(",") if t.strip()]


def _add_filter_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--search", "-s", default="", help="Free-text search term")
    parser.add_argument("--status", default="", help="Only this status (or 'all')")
    parser.add_argument("--country", "-c", default="", help="Exact country match")
    parser.add_argument(
        "--tags", "-t", default="",
        help="Required tags (comma-separated, AND logic)",
    )
    parser.add_argument("--from", dest="start", default="", help="Applied on/after (YYYY-MM-DD)")
    parser.add_argument("--to", dest="end", default="", help="Applied on/before (YYYY-MM-DD)")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="jobtracker",
        description="Track job applications: search, filter, stats and export",
    )
    parser.add_argument("--store", default="", help="Store file (default: data/store.json)")
    parser.add_argument("--no-sample", action="store_true", help="Start empty instead of sample jobs")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List applications")
    _add_filter_args(p_list)
    p_list.add_argument("--sort", choices=SORT_KEYS, default="date")
    p_list.add_argument("--asc", action="store_true", help="Ascending order (default descending)")

    p_timeline = sub.add_parser("timeline", help="Applications grouped by day")
    _add_filter_args(p_timeline)

    p_stats = sub.add_parser("stats", help="Aggregate statistics")
    _add_filter_args(p_stats)

    p_report = sub.add_parser("report", help="Write a Markdown summary report")
    p_report.add_argument("--out", default="", help="Reports directory")

    p_export = sub.add_parser("export", help="Export applications")
    p_export.add_argument("format", choices=EXPORT_FORMATS)
    _add_filter_args(p_export)
    p_export.add_argument("--out", default=".", help="Output directory")
    for group in ("dates", "application", "documents", "content", "tags", "custom-fields"):
        p_export.add_argument(f"--no-{group}", action="store_true", help=f"Leave out {group} fields")

    p_import = sub.add_parser("import", help="Import applications from a JSON export")
    p_import.add_argument("path")

    p_add = sub.add_parser("add", help="Add an application")
    p_add.add_argument("company")
    p_add.add_argument("position")
    p_add.add_argument("--status", choices=JOB_STATUSES, default="Applied")
    p_add.add_argument("--country", "-c", required=True)
    p_add.add_argument("--tags", "-t", default="")
    p_add.add_argument("--notes", default="")
    p_add.add_argument("--date", default="", help="Application date (YYYY-MM-DD)")
    p_add.add_argument("--salary", default="", help="Salary expectation, e.g. '120k'")

    p_status = sub.add_parser("status", help="Change an application's status")
    p_status.add_argument("job_id")
    p_status.add_argument("status", choices=JOB_STATUSES)

    p_remove = sub.add_parser("remove", help="Remove an application")
    p_remove.add_argument("job_id")

    return parser.parse_args(argv)


def _filters(args: argparse.Namespace) -> FilterState:
    return FilterState(
        status=args.status,
        tags=split_tags(args.tags),
        country=args.country,
        search=args.search,
        date_range=DateRange(start=args.start, end=args.end),
    )


def _print_jobs(jobs: list[JobRecord]) -> None:
    for job in jobs:
        applied = job.application_date or "-"
        tags = ", ".join(job.tags)
        print(f"{applied:<12} {job.status:<10} {job.company} — {job.position} ({job.country}) [{tags}]  {job.id}")


def run_command(args: argparse.Namespace, tracker: JobTracker) -> int:
    cmd = args.command

    if cmd == "list":
        jobs = tracker.view(_filters(args), args.sort, "asc" if args.asc else "desc")
        _print_jobs(jobs)
        print(f"\nShowing {len(jobs)} of {len(tracker.jobs)} applications")
        return 0

    if cmd == "timeline":
        for label, jobs in tracker.timeline(_filters(args)):
            print(f"## {label}")
            _print_jobs(jobs)
            print()
        return 0

    if cmd == "stats":
        summary = tracker.analytics(_filters(args))
        print(f"Total applications: {summary.total}")
        print("Status: " + ", ".join(f"{k} {v}" for k, v in summary.status_breakdown.items()))
        print(f"Offer rate: {summary.offer_rate}%  Response rate: {summary.response_rate}%")
        print("Monthly: " + ", ".join(f"{m} {n}" for m, n in summary.monthly))
        print("Top countries: " + ", ".join(f"{c} {n}" for c, n in summary.top_countries))
        print("Top tags: " + ", ".join(f"{t} {n}" for t, n in summary.top_tags))
        print(f"Average salary: {summary.average_salary or 'N/A'}")
        return 0

    if cmd == "report":
        summary = tracker.analytics()
        content = build_summary_report(summary, tracker.view())
        write_summary_report(content, Path(args.out) if args.out else None)
        return 0

    if cmd == "export":
        options = ExportOptions(
            dates=not args.no_dates,
            application=not args.no_application,
            documents=not args.no_documents,
            content=not args.no_content,
            tags=not args.no_tags,
            custom_fields=not args.no_custom_fields,
        )
        filename, text = tracker.export(args.format, _filters(args), options)
        out_dir = Path(args.out)
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / filename
        path.write_text(text, encoding="utf-8")
        log.info("Export written → %s", path)
        return 0

    if cmd == "import":
        text = Path(args.path).read_text(encoding="utf-8")
        count = tracker.import_json(text)
        print(f"Imported {count} application(s)")
        return 0 if count else 1

    if cmd == "add":
        fields = {
            "status": args.status,
            "country": args.country,
            "tags": split_tags(args.tags),
            "notes": args.notes,
        }
        if args.date:
            fields["application_date"] = args.date
        if args.salary:
            fields["salary_expectation"] = args.salary
        job = tracker.add_job(args.company, args.position, **fields)
        print(job.id)
        return 0

    if cmd == "status":
        tracker.update_job(args.job_id, status=args.status)
        return 0

    if cmd == "remove":
        tracker.remove_job(args.job_id)
        return 0

    log.error("Unknown command %s", cmd)
    return 2


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    set_verbose(args.verbose)

    store = FileStore(Path(args.store) if args.store else get_store_path())
    try:
        tracker = JobTracker.open(store, load_settings(), use_sample=not args.no_sample)
        return run_command(args, tracker)
    except KeyError as exc:
        log.error("No application with id %s", exc)
        return 1
    except (ValueError, OSError) as exc:
        log.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
