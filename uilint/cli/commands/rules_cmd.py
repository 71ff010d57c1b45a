"""Rule catalog command for the uilint CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from uilint.cli.utils import load_cli_config
from uilint.kernel.exceptions import UILintError
from uilint.kernel.linting.registry import resolve

console = Console()


def rules(
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to a kind: Config YAML or TOML file"),
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Output machine-readable JSON")] = False,
) -> None:
    """List the active rules after applying the configuration."""
    try:
        registry = resolve(load_cli_config(config_file).lint)
    except UILintError as e:
        console.print(f"[red]{type(e).__name__}:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(2) from e

    if as_json:
        output = [
            {
                "id": r.id,
                "title": r.title,
                "severity": r.severity.label,
                "applies_to": sorted(k.value for k in r.applies_to),
                "options": dict(r.options),
            }
            for r in registry
        ]
        console.print(json.dumps(output, indent=2), markup=False, highlight=False, soft_wrap=True)
        return

    table = Table(show_header=True, border_style="dim")
    table.add_column("Rule", style="cyan")
    table.add_column("Severity", width=8)
    table.add_column("Applies to", style="green")
    table.add_column("Title")
    table.add_column("Options", style="dim")
    for r in registry:
        table.add_row(
            r.id,
            r.severity.label,
            ", ".join(sorted(k.value for k in r.applies_to)),
            r.title,
            ", ".join(f"{k}={v}" for k, v in r.options.items()),
        )
    console.print(table)
