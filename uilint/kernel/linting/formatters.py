"""Report formatters: pure projections of a Report into text or records.

Formatting never alters a report. A failure raises FormatError with the
untouched report attached so the caller still has its verdict.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from enum import StrEnum
from typing import Any

from uilint.kernel.exceptions import FormatError
from uilint.kernel.linting.models import Finding, Report, Severity

FORMAT_VERSION = 1


class ReportStyle(StrEnum):
    """Available output styles."""

    TEXT = "text"
    RECORDS = "records"
    JSON = "json"


def finding_record(finding: Finding, source: str = "") -> dict[str, Any]:
    """Flat, JSON-serializable record of one finding."""
    record: dict[str, Any] = {
        "source": source,
        "rule_id": finding.rule_id,
        "severity": finding.severity.label,
        "node_id": finding.node_id,
        "location": {
            "path": finding.location.path,
            "line": finding.location.line,
            "column": finding.location.column,
        },
        "message": finding.message,
        "suggested_fix": finding.suggested_fix,
    }
    if finding.source_rule is not None:
        record["source_rule"] = finding.source_rule
    return record


def summary_record(report: Report) -> dict[str, int]:
    return {severity.label: report.summary_counts.get(severity, 0) for severity in reversed(Severity)}


def _summary_line(report: Report) -> str:
    counts = summary_record(report)
    return (
        f"{report.source or '<component>'}: {report.verdict.value.upper()} "
        f"({counts['error']} error(s), {counts['warning']} warning(s), {counts['info']} info)"
    )


def _render_text(report: Report) -> str:
    lines = [_summary_line(report)]
    for location, findings in report.by_location().items():
        lines.append("")
        lines.append(f"  {location}")
        for finding in findings:
            lines.append(f"    {finding.severity.label:<8} {finding.rule_id}  {finding.message}")
            if finding.suggested_fix:
                lines.append(f"    {'':<8} fix: {finding.suggested_fix}")
    return "\n".join(lines)


def _render_document(report: Report) -> dict[str, Any]:
    return {
        "version": FORMAT_VERSION,
        "source": report.source,
        "verdict": report.verdict.value,
        "summary": summary_record(report),
        "findings": [finding_record(f, report.source) for f in report.findings],
    }


def format_report(report: Report, style: ReportStyle | str = ReportStyle.TEXT) -> Any:
    """Render one report.

    Parameters
    ----------
    report : Report
        Report to render
    style : ReportStyle | str
        ``text`` for a human-readable listing grouped by location,
        ``records`` for a list of dicts, ``json`` for a versioned JSON
        document

    Returns
    -------
    str | list[dict[str, Any]]
        Text for ``text`` and ``json``, records for ``records``

    Raises
    ------
    FormatError
        If the style is unknown or rendering fails
    """
    try:
        resolved = ReportStyle(style)
    except ValueError:
        choices = ", ".join(s.value for s in ReportStyle)
        raise FormatError(str(style), f"unknown style (choose from: {choices})", report) from None

    try:
        if resolved is ReportStyle.TEXT:
            return _render_text(report)
        if resolved is ReportStyle.RECORDS:
            return [finding_record(f, report.source) for f in report.findings]
        return json.dumps(_render_document(report), indent=2)
    except (TypeError, ValueError, AttributeError, KeyError) as e:
        raise FormatError(resolved.value, str(e), report) from e


def format_reports(reports: Sequence[Report], style: ReportStyle | str = ReportStyle.TEXT) -> Any:
    """Render several reports as one output of the same style."""
    try:
        resolved = ReportStyle(style)
    except ValueError:
        choices = ", ".join(s.value for s in ReportStyle)
        raise FormatError(str(style), f"unknown style (choose from: {choices})") from None

    if resolved is ReportStyle.TEXT:
        return "\n\n".join(format_report(r, resolved) for r in reports)
    if resolved is ReportStyle.RECORDS:
        return [record for r in reports for record in format_report(r, resolved)]
    try:
        return json.dumps(
            {"version": FORMAT_VERSION, "reports": [_render_document(r) for r in reports]},
            indent=2,
        )
    except (TypeError, ValueError) as e:
        raise FormatError(resolved.value, str(e)) from e
