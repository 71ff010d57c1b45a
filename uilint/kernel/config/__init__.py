"""Configuration models."""

from uilint.kernel.config.models import LintConfig, LoggingConfig, UILintConfig

__all__ = ["LintConfig", "LoggingConfig", "UILintConfig"]
