"""Centralized logging configuration for uilint using Loguru.

Examples
--------
Basic usage:

>>> from uilint.kernel.logging import get_logger
>>> logger = get_logger(__name__)
>>> logger.debug("Walk started", component="Button")

Configure logging globally::

    from uilint.kernel.logging import configure_logging
    configure_logging(level="DEBUG", format="rich")
"""

from __future__ import annotations

import contextvars
import os
import sys
from contextlib import suppress
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from loguru import logger
from rich.logging import RichHandler

if TYPE_CHECKING:
    from loguru import Logger

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["console", "json", "structured", "rich"]

_CURRENT_CONFIG: dict | None = None
_HANDLER_IDS: list[int] = []
_DEFAULT_HANDLER_REMOVED = False

# Correlation ID of the lint unit (usually the source name) being processed
correlation_id: contextvars.ContextVar[str] = contextvars.ContextVar("correlation_id", default="-")


def _patch_correlation_id(record: dict) -> None:
    record["extra"].setdefault("cid", correlation_id.get())


def configure_logging(
    level: LogLevel = "WARNING",
    format: LogFormat = "structured",
    output_file: str | Path | None = None,
    use_color: bool = True,
    include_timestamp: bool = True,
    force_reconfigure: bool = False,
) -> None:
    """Configure global logging for uilint.

    Idempotent: calling it again with the same settings neither duplicates
    handlers nor changes anything.

    Parameters
    ----------
    level : LogLevel, default="WARNING"
        Minimum log level to output
    format : LogFormat, default="structured"
        Output format:
        - "console": plain console output
        - "json": one JSON object per record
        - "structured": colored structured format (Loguru native)
        - "rich": Rich console handler
    output_file : str | Path | None, default=None
        Optional file path to additionally write JSON records to
    use_color : bool, default=True
        Use ANSI colors in structured format (auto-disabled for non-TTY)
    include_timestamp : bool, default=True
        Include timestamp in log output
    force_reconfigure : bool, default=False
        Reconfigure even if the settings did not change
    """
    global _CURRENT_CONFIG, _DEFAULT_HANDLER_REMOVED

    current_config = {
        "level": level,
        "format": format,
        "output_file": str(output_file) if output_file else None,
        "use_color": use_color,
        "include_timestamp": include_timestamp,
    }

    if not force_reconfigure and current_config == _CURRENT_CONFIG:
        return

    # Remove only our own handlers so pytest's capture sinks survive
    for handler_id in _HANDLER_IDS:
        with suppress(ValueError):
            logger.remove(handler_id)
    _HANDLER_IDS.clear()

    # Loguru ships a DEBUG stderr sink (id 0) that would bypass the configured level
    if not _DEFAULT_HANDLER_REMOVED:
        with suppress(ValueError):
            logger.remove(0)
        _DEFAULT_HANDLER_REMOVED = True

    logger.configure(patcher=_patch_correlation_id)

    if format == "rich":
        rich_handler = RichHandler(
            rich_tracebacks=True,
            markup=False,
            show_time=include_timestamp,
            show_level=True,
            show_path=True,
        )
        handler_id = logger.add(sink=rich_handler, level=level, format="{message}")
        _HANDLER_IDS.append(handler_id)

    elif format == "json":
        handler_id = logger.add(sink=sys.stderr, level=level, serialize=True)
        _HANDLER_IDS.append(handler_id)

    elif format == "structured":
        timestamp_fmt = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> " if include_timestamp else ""
        colorize = use_color and sys.stderr.isatty()
        color_level = "<level>{level: <8}</level>" if colorize else "{level: <8}"
        structured_format = (
            f"{timestamp_fmt}[{color_level}]"
            "<cyan>{name}:{function}:{line}</cyan> [{extra[cid]}] | <level>{message}</level>"
        )
        handler_id = logger.add(
            sink=sys.stderr,
            level=level,
            format=structured_format,
            colorize=colorize,
        )
        _HANDLER_IDS.append(handler_id)

    else:  # console
        timestamp_fmt = "{time:YYYY-MM-DD HH:mm:ss} " if include_timestamp else ""
        console_format = f"{timestamp_fmt}{{level: <8}} | {{name}} | {{message}}"
        handler_id = logger.add(
            sink=sys.stderr, level=level, format=console_format, colorize=False
        )
        _HANDLER_IDS.append(handler_id)

    if output_file:
        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        handler_id = logger.add(sink=output_path, level=level, serialize=True)
        _HANDLER_IDS.append(handler_id)

    _CURRENT_CONFIG = current_config


@lru_cache(maxsize=256)
def get_logger(name: str) -> Logger:
    """Get a logger bound with the given module name (cached).

    Parameters
    ----------
    name : str
        Logger name, typically ``__name__`` of the calling module

    Returns
    -------
    loguru.Logger
        Logger instance bound with the module name

    Notes
    -----
    If ``configure_logging()`` has not been called, defaults are taken
    from ``UILINT_LOG_LEVEL`` and ``UILINT_LOG_FORMAT``.
    """
    _ensure_configured()
    return logger.bind(module=name)


def set_correlation_id(cid: str) -> None:
    """Set the correlation ID for the current context.

    Every record emitted within the current thread or task includes it.
    """
    correlation_id.set(cid)


def get_correlation_id() -> str:
    """Get the current correlation ID.

    Examples
    --------
    >>> from uilint.kernel.logging import clear_correlation_id, get_correlation_id
    >>> clear_correlation_id()
    >>> get_correlation_id()
    '-'
    """
    return correlation_id.get()


def clear_correlation_id() -> None:
    """Clear the correlation ID for the current context."""
    correlation_id.set("-")


def _ensure_configured() -> None:
    """Apply environment-driven defaults if nothing configured logging yet."""
    if _CURRENT_CONFIG is None:
        level = os.getenv("UILINT_LOG_LEVEL", "WARNING").upper()
        format_type = os.getenv("UILINT_LOG_FORMAT", "structured").lower()
        configure_logging(level=level, format=format_type)  # type: ignore[arg-type]
