"""Core exception hierarchy for uilint.

All uilint exceptions inherit from UILintError so that callers (and the
CLI) can handle every fatal-to-run condition in one place. Rule failures
are never raised out of a walk; they become findings instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uilint.kernel.linting.models import Report

# ============================================================================
# Base Exception
# ============================================================================


class UILintError(Exception):
    """Base exception for all uilint errors.

    Catch this to handle all uilint-specific errors.
    """

    pass


# ============================================================================
# Input & Configuration Errors
# ============================================================================


class ParseError(UILintError):
    """Raised when a structural model cannot be built from its input.

    The engine never receives a partially-built tree: anything that fails
    here is reported before a single rule runs.

    Examples
    --------
    Example usage::

        raise ParseError("Button.yaml", "component name cannot be empty")
    """

    def __init__(self, source: str, reason: str) -> None:
        """Initialize parse error.

        Args
        ----
            source: Name of the input unit (file path or component name)
            reason: Explanation of what is malformed
        """
        super().__init__(f"Cannot parse '{source}': {reason}")
        self.source = source
        self.reason = reason


class ConfigError(UILintError):
    """Raised when the rule configuration is invalid or conflicting.

    Examples
    --------
    Example usage::

        raise ConfigError("duplicate rule id", rule_id="no-index-as-key")
    """

    def __init__(self, reason: str, rule_id: str | None = None) -> None:
        """Initialize configuration error.

        Args
        ----
            reason: Explanation of what is wrong
            rule_id: The rule id involved, if any
        """
        if rule_id is not None:
            msg = f"Configuration error for rule '{rule_id}': {reason}"
        else:
            msg = f"Configuration error: {reason}"
        super().__init__(msg)
        self.reason = reason
        self.rule_id = rule_id


# ============================================================================
# Execution Errors
# ============================================================================


class RuleInternalError(UILintError):
    """A rule predicate failed while inspecting a node.

    Never propagates out of a walk: the walker converts it into an
    ``internal-rule-error`` finding and moves on.
    """

    def __init__(self, rule_id: str, node_id: str, cause: BaseException) -> None:
        """Initialize rule internal error.

        Args
        ----
            rule_id: Id of the rule whose predicate failed
            node_id: Id of the node being inspected
            cause: The original exception
        """
        super().__init__(
            f"Rule '{rule_id}' failed on node '{node_id}': {type(cause).__name__}: {cause}"
        )
        self.rule_id = rule_id
        self.node_id = node_id
        self.cause = cause


class FormatError(UILintError):
    """Raised when a report cannot be rendered.

    The report is attached unchanged so the caller can still act on its
    verdict.
    """

    def __init__(self, style: str, reason: str, report: Report | None = None) -> None:
        """Initialize format error.

        Args
        ----
            style: The requested output style
            reason: Explanation of the failure
            report: The report that was being formatted
        """
        super().__init__(f"Cannot format report as '{style}': {reason}")
        self.style = style
        self.reason = reason
        self.report = report
