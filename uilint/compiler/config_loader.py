"""Configuration loader for uilint.

Parses configuration files into kernel config models. Supported sources:

1. **kind: Config YAML**: explicit path, ``UILINT_CONFIG_PATH`` or a
   ``uilint.yaml`` / ``.uilint.yaml`` file in the working directory.
2. **pyproject.toml [tool.uilint]**: auto-discovery fallback.

When nothing is found the defaults are used. The engine itself never
reads configuration; it only receives the resulting ``LintConfig``.

Example ``uilint.yaml``::

    kind: Config
    spec:
      disable: [redundant-wrapper-element]
      severity:
        no-index-as-key: error
      options:
        duplicate-literal-siblings: {threshold: 4}
      rules:
        - my_project.lint_rules:no_inline_styles
      logging:
        level: INFO
"""

from __future__ import annotations

import importlib
import os
import tomllib
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Literal, cast

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from uilint.kernel.config.models import LintConfig, LoggingConfig, UILintConfig
from uilint.kernel.exceptions import ConfigError
from uilint.kernel.linting.models import Severity
from uilint.kernel.linting.registry import resolve
from uilint.kernel.linting.rules import Rule
from uilint.kernel.logging import get_logger

_TRUTHY_VALUES = frozenset({"true", "1", "yes", "on", "enabled"})
_FALSY_VALUES = frozenset({"false", "0", "no", "off", "disabled"})

_YAML_CANDIDATES = ("uilint.yaml", "uilint.yml", ".uilint.yaml", ".uilint.yml")

logger = get_logger(__name__)


def _parse_bool_env(value: str) -> bool:
    """Parse a boolean environment variable value.

    Raises
    ------
    ValueError
        If value is not a recognized boolean string
    """
    normalized = value.lower().strip()
    if normalized in _TRUTHY_VALUES:
        return True
    if normalized in _FALSY_VALUES:
        return False
    expected = sorted(_TRUTHY_VALUES | _FALSY_VALUES)
    raise ValueError(f"Invalid boolean value: {value!r}. Expected one of: {expected}")


class LoggingSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "structured", "rich"] = "structured"
    output_file: str | None = None
    use_color: bool = True
    include_timestamp: bool = True


class ConfigSection(BaseModel):
    """Schema of the ``spec`` of a ``kind: Config`` file or ``[tool.uilint]``."""

    model_config = ConfigDict(extra="forbid")

    disable: list[str] = Field(default_factory=list)
    severity: dict[str, str] = Field(default_factory=dict)
    options: dict[str, dict[str, Any]] = Field(default_factory=dict)
    rules: list[str] = Field(default_factory=list)
    logging: LoggingSection = Field(default_factory=LoggingSection)


def import_rules(references: Iterable[str]) -> tuple[Rule, ...]:
    """Import extra rules from ``module:attribute`` references.

    The attribute may be a single Rule or an iterable of Rules.

    Raises
    ------
    ConfigError
        If a reference cannot be imported or does not name rules
    """
    rules: list[Rule] = []
    for reference in references:
        module_name, _, attribute = reference.partition(":")
        if not module_name or not attribute:
            raise ConfigError(f"rule reference {reference!r} must look like 'module:attribute'")
        try:
            target = getattr(importlib.import_module(module_name), attribute)
        except (ImportError, AttributeError) as e:
            raise ConfigError(f"cannot import rule {reference!r}: {e}") from e

        if isinstance(target, Rule):
            candidates = [target]
        elif isinstance(target, Iterable) and not isinstance(target, str):
            candidates = list(target)
        else:
            raise ConfigError(f"{reference!r} provides {type(target).__name__}, expected Rule")
        for candidate in candidates:
            if not isinstance(candidate, Rule):
                raise ConfigError(
                    f"{reference!r} provides {type(candidate).__name__}, expected Rule"
                )
            rules.append(candidate)
        logger.debug("Imported {count} rule(s) from {ref}", count=len(candidates), ref=reference)
    return tuple(rules)


class ConfigLoader:
    """Finds and parses uilint configuration files."""

    def load(self, path: str | Path | None = None) -> UILintConfig:
        """Load configuration, falling back to defaults when none is found.

        Raises
        ------
        ConfigError
            If an explicitly given file does not exist or any file is invalid
        """
        config_path = self._find_config_file(path)
        if config_path is None:
            logger.debug("No configuration file found, using defaults")
            return self._parse_config({}, source="<defaults>")

        logger.info("Loading configuration from {path}", path=config_path)
        if config_path.suffix in (".yaml", ".yml"):
            data = self._load_yaml(config_path)
        else:
            data = self._load_toml(config_path)
        return self._parse_config(data, source=str(config_path))

    def _find_config_file(self, path: str | Path | None) -> Path | None:
        """Find the configuration file.

        Discovery order:
        1. Explicit path argument
        2. ``UILINT_CONFIG_PATH`` env var
        3. ``uilint.yaml`` (or ``.uilint.yaml``) in CWD
        4. ``pyproject.toml`` with ``[tool.uilint]`` in CWD or a parent directory
        """
        if path:
            config_path = Path(path)
            if not config_path.exists():
                raise ConfigError(f"configuration file not found: {config_path}")
            return config_path

        if env_path := os.getenv("UILINT_CONFIG_PATH"):
            config_path = Path(env_path)
            if config_path.exists():
                logger.debug("Using config from UILINT_CONFIG_PATH: {}", config_path)
                return config_path
            logger.warning("UILINT_CONFIG_PATH set but file not found: {}", config_path)

        for candidate in _YAML_CANDIDATES:
            if Path(candidate).exists():
                return Path(candidate)

        current = Path.cwd()
        while True:
            pyproject = current / "pyproject.toml"
            if pyproject.exists() and self._has_tool_section(pyproject):
                return pyproject
            if current == current.parent:
                return None
            current = current.parent

    @staticmethod
    def _has_tool_section(pyproject: Path) -> bool:
        try:
            with pyproject.open("rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            return False
        return "uilint" in data.get("tool", {})

    def _load_yaml(self, config_path: Path) -> dict[str, Any]:
        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"cannot read {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{config_path.name}: expected a mapping, got {type(data).__name__}")
        if data.get("kind") != "Config":
            raise ConfigError(
                f"{config_path.name}: YAML config must use the 'kind: Config' manifest format, "
                f"got 'kind: {data.get('kind')}'"
            )
        spec = data.get("spec") or {}
        if not isinstance(spec, dict):
            raise ConfigError(f"{config_path.name}: 'spec' must be a mapping")
        return spec

    def _load_toml(self, config_path: Path) -> dict[str, Any]:
        try:
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"cannot read {config_path}: {e}") from e

        if "tool" in data and "uilint" in data.get("tool", {}):
            section = data["tool"]["uilint"]
        elif config_path.name == "pyproject.toml":
            logger.warning("No [tool.uilint] section found in pyproject.toml, using defaults")
            section = {}
        else:
            section = data
        return cast("dict[str, Any]", section)

    def _parse_config(self, data: dict[str, Any], source: str) -> UILintConfig:
        try:
            section = ConfigSection.model_validate(data)
        except PydanticValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ConfigError(f"{source}: {details}") from e

        try:
            overrides = {rule_id: Severity.parse(level) for rule_id, level in section.severity.items()}
        except ValueError as e:
            raise ConfigError(f"{source}: {e}") from e

        lint = LintConfig(
            disabled_rule_ids=frozenset(section.disable),
            severity_overrides=overrides,
            extra_rules=import_rules(section.rules),
            rule_options=section.options,
        )
        # Unknown ids, option values and rule collisions fail at load time
        resolve(lint)
        return UILintConfig(lint=lint, logging=self._parse_logging_config(section.logging))

    def _parse_logging_config(self, section: LoggingSection) -> LoggingConfig:
        """Apply environment variable overrides on top of the file values.

        - UILINT_LOG_LEVEL: log level
        - UILINT_LOG_FORMAT: output format
        - UILINT_LOG_FILE: optional file path for log output
        - UILINT_LOG_COLOR: use color output (true/false)
        - UILINT_LOG_TIMESTAMP: include timestamp (true/false)
        """
        level: str = section.level
        format_type: str = section.format
        output_file = section.output_file
        use_color = section.use_color
        include_timestamp = section.include_timestamp

        if env_level := os.getenv("UILINT_LOG_LEVEL"):
            level = env_level.upper()
        if env_format := os.getenv("UILINT_LOG_FORMAT"):
            format_type = env_format.lower()
        if env_file := os.getenv("UILINT_LOG_FILE"):
            output_file = env_file
        if env_color := os.getenv("UILINT_LOG_COLOR"):
            try:
                use_color = _parse_bool_env(env_color)
            except ValueError as e:
                logger.warning("Invalid UILINT_LOG_COLOR value: {}", e)
        if env_timestamp := os.getenv("UILINT_LOG_TIMESTAMP"):
            try:
                include_timestamp = _parse_bool_env(env_timestamp)
            except ValueError as e:
                logger.warning("Invalid UILINT_LOG_TIMESTAMP value: {}", e)

        return LoggingConfig(
            level=cast("Literal['TRACE', 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']", level),
            format=cast("Literal['console', 'json', 'structured', 'rich']", format_type),
            output_file=output_file,
            use_color=use_color,
            include_timestamp=include_timestamp,
        )


def load_config(path: str | Path | None = None) -> UILintConfig:
    """Load uilint configuration (see :class:`ConfigLoader`)."""
    return ConfigLoader().load(path)
