"""Core models for the uilint linting engine."""

from __future__ import annotations

import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum, StrEnum
from types import MappingProxyType

INTERNAL_RULE_ERROR = "internal-rule-error"


class Severity(IntEnum):
    """Finding severity, ordered so that ``ERROR > WARNING > INFO``."""

    INFO = 0
    WARNING = 1
    ERROR = 2

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: str | Severity) -> Severity:
        """Parse a severity from its label (``"warning"``) or return it unchanged.

        Raises
        ------
        ValueError
            If the label is not a known severity
        """
        if isinstance(value, Severity):
            return value
        choices = ", ".join(s.label for s in cls)
        if not isinstance(value, str):
            raise ValueError(f"Unknown severity {value!r}. Choose from: {choices}")
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown severity {value!r}. Choose from: {choices}") from None


class Verdict(StrEnum):
    """Binary outcome of a report."""

    PASS = "pass"
    FAIL = "fail"


class NodeKind(StrEnum):
    """Kinds of nodes the walker visits."""

    COMPONENT = "component"
    ELEMENT = "element"
    ATTRIBUTE = "attribute"
    TEXT = "text"
    EXPRESSION = "expression"


@dataclass(frozen=True, slots=True)
class Location:
    """Where in the tree a finding was raised.

    ``order`` is the node's pre-order index in the walk, which keeps
    sorting deterministic for trees built without source positions.
    """

    path: str
    order: int
    line: int | None = None
    column: int | None = None

    @property
    def sort_key(self) -> tuple[int, int, int]:
        line = self.line if self.line is not None else sys.maxsize
        return (line, self.column or 0, self.order)

    def __str__(self) -> str:
        if self.line is None:
            return self.path
        return f"{self.line}:{self.column or 1} {self.path}"


@dataclass(frozen=True, slots=True)
class Match:
    """What a rule predicate reports; the rule turns it into a Finding."""

    message: str
    suggested_fix: str | None = None


@dataclass(frozen=True, slots=True)
class Finding:
    """A single rule violation found during a walk."""

    rule_id: str
    node_id: str
    severity: Severity
    message: str
    location: Location
    suggested_fix: str | None = None
    source_rule: str | None = None

    @property
    def dedup_key(self) -> tuple[str, str, str | None]:
        return (self.rule_id, self.node_id, self.source_rule)

    @property
    def sort_key(self) -> tuple[tuple[int, int, int], int, str, str]:
        return (self.location.sort_key, -self.severity, self.rule_id, self.source_rule or "")


def _empty_counts() -> Mapping[Severity, int]:
    return MappingProxyType(dict.fromkeys(Severity, 0))


@dataclass(frozen=True, slots=True)
class Report:
    """Aggregated, sorted lint results for one source unit."""

    source: str = ""
    findings: tuple[Finding, ...] = ()
    verdict: Verdict = Verdict.PASS
    summary_counts: Mapping[Severity, int] = field(default_factory=_empty_counts)

    @property
    def errors(self) -> list[Finding]:
        """Findings with severity ERROR."""
        return [f for f in self.findings if f.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Finding]:
        """Findings with severity WARNING."""
        return [f for f in self.findings if f.severity is Severity.WARNING]

    @property
    def info(self) -> list[Finding]:
        """Findings with severity INFO."""
        return [f for f in self.findings if f.severity is Severity.INFO]

    @property
    def is_clean(self) -> bool:
        """True if no findings were produced."""
        return len(self.findings) == 0

    @property
    def has_errors(self) -> bool:
        return self.verdict is Verdict.FAIL

    def by_location(self) -> dict[Location, list[Finding]]:
        """Group findings by location, preserving report order."""
        groups: dict[Location, list[Finding]] = {}
        for finding in self.findings:
            groups.setdefault(finding.location, []).append(finding)
        return groups
