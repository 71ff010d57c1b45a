"""Configuration data models for uilint."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from uilint.kernel.linting.models import Severity
from uilint.kernel.linting.rules import Rule


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration for uilint.

    Examples
    --------
    TOML configuration:

    ```toml
    [tool.uilint.logging]
    level = "DEBUG"
    format = "rich"
    ```

    Environment variable overrides:

    ```bash
    export UILINT_LOG_LEVEL=DEBUG
    export UILINT_LOG_FORMAT=json
    ```
    """

    level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "structured", "rich"] = "structured"
    output_file: str | None = None
    use_color: bool = True
    include_timestamp: bool = True


@dataclass(frozen=True, slots=True)
class LintConfig:
    """Rule configuration for one lint run.

    Attributes
    ----------
    disabled_rule_ids : frozenset[str]
        Built-in rules to leave out
    severity_overrides : Mapping[str, Severity]
        Replacement severities for built-in rules
    extra_rules : tuple[Rule, ...]
        Additional rules appended after the built-in catalog
    rule_options : Mapping[str, Mapping[str, Any]]
        Option overrides per built-in rule (e.g. the sibling threshold)
    """

    disabled_rule_ids: frozenset[str] = frozenset()
    severity_overrides: Mapping[str, Severity] = field(default_factory=dict)
    extra_rules: tuple[Rule, ...] = ()
    rule_options: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "disabled_rule_ids", frozenset(self.disabled_rule_ids))
        object.__setattr__(self, "extra_rules", tuple(self.extra_rules))


@dataclass(frozen=True, slots=True)
class UILintConfig:
    """Complete uilint configuration as loaded from a config file."""

    lint: LintConfig = field(default_factory=LintConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
