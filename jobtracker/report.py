"""Generate a Markdown summary of tracked applications."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from jobtracker.config import reports_dir as default_reports_dir
from jobtracker.log import get_logger
from jobtracker.models import AnalyticsSummary, JobRecord
from jobtracker.utils import round_half_up

log = get_logger(__name__)


def _clip(text: str, width: int) -> str:
    return text[:width] + ("…" if len(text) > width else "")


def _pairs(pairs: list[tuple[str, int]]) -> str:
    return ", ".join(f"{name} ({count})" for name, count in pairs) or "—"


def build_summary_report(
    summary: AnalyticsSummary,
    recent: list[JobRecord],
    *,
    limit: int = 10,
) -> str:
    """Markdown report; ``recent`` should already be sorted newest first."""
    date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    lines: list[str] = [f"# Job Application Summary — {date}", ""]

    lines.append(
        f"**{summary.total}** applications | **{summary.offer_rate}%** offer rate"
        f" | **{summary.response_rate}%** response rate"
    )
    lines.append("")

    lines.append("## Status")
    lines.append("")
    lines.append("| Status | Count |")
    lines.append("|--------|------:|")
    for status, count in summary.status_breakdown.items():
        lines.append(f"| {status} | {count} |")
    lines.append("")

    if summary.monthly:
        lines.append("## Monthly Applications")
        lines.append("")
        for month, count in summary.monthly:
            lines.append(f"- **{month}:** {count}")
        lines.append("")

    lines.append("## Highlights")
    lines.append("")
    lines.append(f"- **Top companies:** {_pairs(summary.top_companies)}")
    lines.append(f"- **Top countries:** {_pairs(summary.top_countries)}")
    lines.append(f"- **Top tags:** {_pairs(summary.top_tags)}")
    if summary.average_salary > 0:
        lines.append(
            f"- **Average salary:** ${round_half_up(summary.average_salary / 1000)}k"
            f" (based on {summary.salary_sample_size} applications)"
        )
    else:
        lines.append("- **Average salary:** N/A")
    lines.append("")

    if recent:
        lines.append("---")
        lines.append("")
        lines.append("## Recent Applications")
        lines.append("")
        lines.append("| # | Role | Company | Country | Status | Applied |")
        lines.append("|--:|------|---------|---------|--------|---------|")
        for i, job in enumerate(recent[:limit], 1):
            country = job.country or "\u2014"
            applied = job.application_date or "\u2014"
            lines.append(
                f"| {i} | {_clip(job.position, 40)} | {_clip(job.company, 22)}"
                f" | {country} | {job.status} | {applied} |"
            )
        lines.append("")

    log.info("Built summary report: %d applications", summary.total)
    return "\n".join(lines)


def write_summary_report(content: str, reports_dir: Path | None = None) -> Path:
    reports_dir = reports_dir or default_reports_dir()
    reports_dir.mkdir(parents=True, exist_ok=True)
    date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    path = reports_dir / f"summary_{date}.md"
    path.write_text(content, encoding="utf-8")
    log.info("Report written → %s", path)
    return path
