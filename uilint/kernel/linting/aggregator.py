"""Diagnostic aggregation: dedupe, sort and judge findings."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from types import MappingProxyType

from uilint.kernel.linting.models import Finding, Report, Severity, Verdict
from uilint.kernel.logging import get_logger

logger = get_logger(__name__)


def verdict_for(findings: Iterable[Finding]) -> Verdict:
    """FAIL iff any finding has ERROR severity."""
    if any(f.severity is Severity.ERROR for f in findings):
        return Verdict.FAIL
    return Verdict.PASS


def aggregate(findings: Iterable[Finding], source: str = "") -> Report:
    """Consolidate raw findings of one source unit into a report.

    Repeats of the same rule on the same node are collapsed to the first
    occurrence. The result is sorted by location, then severity (highest
    first), then rule id, so the report does not depend on the order in
    which rules ran.
    """
    unique: dict[tuple[str, str, str | None], Finding] = {}
    duplicates = 0
    for finding in findings:
        if finding.dedup_key in unique:
            duplicates += 1
            continue
        unique[finding.dedup_key] = finding

    if duplicates:
        logger.warning(
            "Dropped {count} duplicate finding(s) for {source}",
            count=duplicates,
            source=source or "<unnamed>",
        )

    ordered = tuple(sorted(unique.values(), key=lambda f: f.sort_key))
    counts = Counter(f.severity for f in ordered)
    return Report(
        source=source,
        findings=ordered,
        verdict=verdict_for(ordered),
        summary_counts=MappingProxyType({s: counts.get(s, 0) for s in Severity}),
    )
