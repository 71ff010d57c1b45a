"""CLI helper utilities for uilint commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from uilint.compiler.config_loader import load_config
from uilint.kernel.config.models import LoggingConfig, UILintConfig
from uilint.kernel.logging import configure_logging


class ContextProtocol(Protocol):
    """Protocol for common interface between Click and Typer contexts."""

    @property
    def obj(self) -> dict[str, Any] | None: ...


def load_cli_config(path: Path | None) -> UILintConfig:
    """Load configuration from an explicit path or by discovery."""
    return load_config(path)


def apply_logging(ctx: ContextProtocol | None, settings: LoggingConfig) -> None:
    """Configure logging from the config file unless the command line chose a level."""
    obj = getattr(ctx, "obj", None)
    cli_level = obj.get("log_level") if isinstance(obj, dict) else None
    configure_logging(
        level=cli_level or settings.level,  # type: ignore[arg-type]
        format=settings.format,
        output_file=settings.output_file,
        use_color=settings.use_color,
        include_timestamp=settings.include_timestamp,
    )
