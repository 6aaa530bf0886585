"""Report rendering for update runs.

Renders a RunResult as JSON, CSV or a standalone HTML page and writes it
to the report directory. Reports consume only the RunResult data contract.
"""

import csv
import io
import json
import logging
from datetime import datetime
from enum import Enum
from html import escape
from pathlib import Path

from wupctl.models.outcome import UpgradeOutcome
from wupctl.models.package import PackageRecord
from wupctl.models.run_result import RunResult, SourceRun

logger = logging.getLogger(__name__)


class ReportFormat(str, Enum):
    """Supported report formats."""

    JSON = "json"
    CSV = "csv"
    HTML = "html"


class ReportError(Exception):
    """Raised when a report cannot be written."""


CSV_COLUMNS = (
    "source",
    "source_status",
    "package_id",
    "name",
    "current_version",
    "available_version",
    "result",
    "exit_code",
    "duration_seconds",
    "error",
)


def render_json(result: RunResult) -> str:
    """Render a run as indented JSON."""
    return json.dumps(result.to_dict(), indent=2)


def render_csv(result: RunResult) -> str:
    """Render a run as CSV, one row per package.

    Sources without packages get a single row carrying only their status,
    so every source appears in the file.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)

    for run in result.runs:
        rows = _package_rows(run)
        if not rows:
            writer.writerow(
                [run.summary.source.value, run.summary.status.value, "", "", "", "", "", "", "", ""]
            )
            continue
        for record, outcome, label in rows:
            writer.writerow(
                [
                    run.summary.source.value,
                    run.summary.status.value,
                    record.id,
                    record.name,
                    record.current_version,
                    record.available_version,
                    label,
                    "" if outcome is None else outcome.exit_code,
                    "" if outcome is None else f"{outcome.duration_seconds:.1f}",
                    "" if outcome is None or outcome.success else (outcome.error_output or ""),
                ]
            )

    return buffer.getvalue()


def _package_rows(run: SourceRun) -> list[tuple[PackageRecord, UpgradeOutcome | None, str]]:
    """Pair every record of a source with its outcome and a result label."""
    outcomes = {outcome.package_id: outcome for outcome in run.outcomes}
    rows: list[tuple[PackageRecord, UpgradeOutcome | None, str]] = []
    for record in run.records:
        outcome = outcomes.get(record.id)
        if outcome is not None:
            label = "upgraded" if outcome.success else "failed"
        elif record.pinned:
            label = "pinned"
        else:
            label = "pending"
        rows.append((record, outcome, label))
    return rows


_HTML_STYLE = """
body { font-family: Segoe UI, sans-serif; margin: 2em; color: #222; }
table { border-collapse: collapse; margin-bottom: 1.5em; }
th, td { border: 1px solid #ccc; padding: 4px 10px; text-align: left; }
th { background: #29526d; color: #fff; }
.success, .no_updates, .upgraded { color: #03804f; }
.partial, .pinned { color: #a86f00; }
.error, .failed { color: #c0193d; font-weight: bold; }
.unavailable, .disabled, .not_run, .pending { color: #636e72; }
pre { background: #f4f4f4; padding: 0.5em; white-space: pre-wrap; }
"""


def render_html(result: RunResult) -> str:
    """Render a run as a standalone HTML page."""
    meta = result.metadata
    parts: list[str] = [
        "<!DOCTYPE html>",
        '<html lang="en"><head><meta charset="utf-8">',
        f"<title>wupctl report - {escape(meta.hostname)}</title>",
        f"<style>{_HTML_STYLE}</style></head><body>",
        f"<h1>Update report for {escape(meta.hostname)}</h1>",
        f"<p>Run at {escape(meta.timestamp)} with wupctl {escape(meta.wupctl_version)}"
        + (" (list only)" if meta.list_only else "")
        + f". Packages updated: {result.updated_count}.</p>",
        "<h2>Sources</h2>",
        "<table><tr><th>Source</th><th>Status</th><th>Updated</th><th>Errors</th></tr>",
    ]

    for summary in result.summaries:
        status = summary.status.value
        errors = "<br>".join(escape(error) for error in summary.errors)
        if summary.message:
            errors = escape(summary.message) + ("<br>" + errors if errors else "")
        parts.append(
            f"<tr><td>{escape(summary.source.label)}</td>"
            f'<td class="{status}">{status}</td>'
            f"<td>{summary.updated_count}</td><td>{errors}</td></tr>"
        )
    parts.append("</table>")

    for run in result.runs:
        rows = _package_rows(run)
        if not rows:
            continue
        parts.append(f"<h2>{escape(run.summary.source.label)}</h2>")
        parts.append(
            "<table><tr><th>Package</th><th>Id</th><th>Current</th><th>Available</th>"
            "<th>Result</th><th>Exit code</th><th>Duration (s)</th></tr>"
        )
        for record, outcome, label in rows:
            exit_code = "" if outcome is None else str(outcome.exit_code)
            duration = "" if outcome is None else f"{outcome.duration_seconds:.1f}"
            parts.append(
                f"<tr><td>{escape(record.name)}</td><td>{escape(record.id)}</td>"
                f"<td>{escape(record.current_version)}</td>"
                f"<td>{escape(record.available_version)}</td>"
                f'<td class="{label}">{label}</td><td>{exit_code}</td><td>{duration}</td></tr>'
            )
        parts.append("</table>")

        for outcome in run.outcomes:
            if outcome.failed and outcome.error_output:
                parts.append(f"<h3>{escape(outcome.error_line)}</h3>")
                parts.append(f"<pre>{escape(outcome.error_output)}</pre>")

    parts.append("</body></html>")
    return "\n".join(parts) + "\n"


_RENDERERS = {
    ReportFormat.JSON: render_json,
    ReportFormat.CSV: render_csv,
    ReportFormat.HTML: render_html,
}


def render_report(result: RunResult, report_format: ReportFormat) -> str:
    """Render a run in the requested format."""
    return _RENDERERS[report_format](result)


def report_filename(result: RunResult, report_format: ReportFormat) -> str:
    """Build a timestamped file name for a report.

    Returns:
        Name like 'wupctl-report-20260115-093000.html'.
    """
    try:
        stamp = datetime.fromisoformat(result.metadata.timestamp).strftime("%Y%m%d-%H%M%S")
    except ValueError:
        stamp = "run"
    return f"wupctl-report-{stamp}.{report_format.value}"


def write_report(result: RunResult, report_format: ReportFormat, directory: Path) -> Path:
    """Render a run and write it into a directory.

    Args:
        result: Run to report on.
        report_format: Output format.
        directory: Target directory (created if missing).

    Returns:
        Path of the written report.

    Raises:
        ReportError: If the report cannot be written.
    """
    path = directory / report_filename(result, report_format)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_text(render_report(result, report_format), encoding="utf-8")
    except OSError as e:
        raise ReportError(f"Failed to write report {path}: {e}") from e

    logger.info("Report written to %s", path)
    return path
