"""Public API for linting component trees."""

from uilint.api.linting import lint_component, lint_files, lint_many, lint_source

__all__ = ["lint_component", "lint_files", "lint_many", "lint_source"]
