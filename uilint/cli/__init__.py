"""Command-line interface for uilint."""

from uilint.cli.main import app, main

__all__ = ["app", "main"]
