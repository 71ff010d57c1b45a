"""uilint - static rule checking for UI component declarations.

Detects violations of component conventions (naming, composition, list
keys) and security rules (unsanitized HTML, unvalidated URLs) over a
read-only structural model of each component.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("uilint")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"  # Fallback for source checkouts

from uilint.api.linting import lint_component, lint_files, lint_many, lint_source
from uilint.kernel.config.models import LintConfig
from uilint.kernel.domain.structure import (
    ComponentKind,
    ComponentNode,
    ElementNode,
    ExpressionRef,
    FunctionRef,
    IterationBinding,
    PropDecl,
    RawHTMLInjection,
    SourceLocation,
    StringLiteral,
    TemplateExpression,
    TextLiteral,
    URLReference,
)
from uilint.kernel.exceptions import (
    ConfigError,
    FormatError,
    ParseError,
    RuleInternalError,
    UILintError,
)
from uilint.kernel.linting.aggregator import aggregate
from uilint.kernel.linting.formatters import ReportStyle, format_report, format_reports
from uilint.kernel.linting.models import Finding, Match, NodeKind, Report, Severity, Verdict
from uilint.kernel.linting.registry import RuleRegistry, resolve
from uilint.kernel.linting.rules import NodeView, Rule, rule
from uilint.kernel.linting.walker import walk

__all__ = [
    "ComponentKind",
    "ComponentNode",
    "ConfigError",
    "ElementNode",
    "ExpressionRef",
    "Finding",
    "FormatError",
    "FunctionRef",
    "IterationBinding",
    "LintConfig",
    "Match",
    "NodeKind",
    "NodeView",
    "ParseError",
    "PropDecl",
    "RawHTMLInjection",
    "Report",
    "ReportStyle",
    "Rule",
    "RuleInternalError",
    "RuleRegistry",
    "Severity",
    "SourceLocation",
    "StringLiteral",
    "TemplateExpression",
    "TextLiteral",
    "UILintError",
    "URLReference",
    "Verdict",
    "__version__",
    "aggregate",
    "format_report",
    "format_reports",
    "lint_component",
    "lint_files",
    "lint_many",
    "lint_source",
    "resolve",
    "rule",
    "walk",
]
