"""Component linting command for the uilint CLI."""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from uilint.api.linting import DEFAULT_CONCURRENCY, lint_files
from uilint.cli.utils import apply_logging, load_cli_config
from uilint.kernel.exceptions import FormatError, UILintError
from uilint.kernel.linting.formatters import ReportStyle, format_reports, summary_record
from uilint.kernel.linting.models import Report, Severity, Verdict

console = Console()

_OUTPUT_FORMATS = ("text", "plain", "json")
_SEVERITY_STYLE = {Severity.ERROR: "red", Severity.WARNING: "yellow", Severity.INFO: "blue"}


def lint(
    ctx: typer.Context,
    files: Annotated[
        list[Path],
        typer.Argument(
            help="Structural documents (YAML/JSON) describing the components to lint",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to a kind: Config YAML or TOML file"),
    ] = None,
    severity: Annotated[
        str,
        typer.Option("--severity", "-s", help="Minimum severity to report (error, warning, info)"),
    ] = "info",
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (text, plain, json)"),
    ] = "text",
    disable: Annotated[
        str,
        typer.Option(
            "--disable",
            "-d",
            help="Comma-separated rule IDs to skip (e.g., no-index-as-key,missing-list-key)",
        ),
    ] = "",
    concurrency: Annotated[
        int,
        typer.Option("--concurrency", help="Number of components linted in parallel", min=1),
    ] = DEFAULT_CONCURRENCY,
) -> None:
    """Lint component documents for convention and security issues.

    Exit status is 1 when any error-level finding is reported, 2 when the
    input, the configuration or the output cannot be processed.

    Examples
    --------
    uilint lint components.yaml
    uilint lint src/*.yaml --severity warning
    uilint lint components.yaml --format json
    uilint lint components.yaml --disable redundant-wrapper-element
    """
    try:
        min_severity = Severity.parse(severity)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2) from e

    if output_format not in _OUTPUT_FORMATS:
        console.print(
            f"[red]Invalid format '{output_format}'.[/red] Choose from: {', '.join(_OUTPUT_FORMATS)}"
        )
        raise typer.Exit(2)

    try:
        settings = load_cli_config(config_file)
        apply_logging(ctx, settings.logging)

        lint_config = settings.lint
        disabled_ids = {r.strip() for r in disable.split(",") if r.strip()}
        if disabled_ids:
            lint_config = dataclasses.replace(
                lint_config, disabled_rule_ids=lint_config.disabled_rule_ids | disabled_ids
            )

        reports = lint_files(files, lint_config, concurrency=concurrency)
    except UILintError as e:
        console.print(f"[red]{type(e).__name__}:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(2) from e

    failed = any(r.verdict is Verdict.FAIL for r in reports)
    shown = [
        dataclasses.replace(r, findings=tuple(f for f in r.findings if f.severity >= min_severity))
        for r in reports
    ]

    try:
        if output_format == "text":
            _print_table(shown)
        else:
            style = ReportStyle.JSON if output_format == "json" else ReportStyle.TEXT
            console.print(format_reports(shown, style), markup=False, highlight=False, soft_wrap=True)
    except FormatError as e:
        console.print(f"[red]Output error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1 if failed else 2) from e

    if failed:
        raise typer.Exit(1)


def _print_table(reports: list[Report]) -> None:
    """Print lint results as rich tables, one per source unit."""
    console.print()
    if not reports:
        console.print("[yellow]No components found.[/yellow]")
        console.print()
        return

    for report in reports:
        counts = summary_record(report)
        verdict_style = "red" if report.verdict is Verdict.FAIL else "green"
        header = Text.assemble(
            (report.source, "bold"),
            "  ",
            (report.verdict.value.upper(), verdict_style),
            "  ",
            (f"{counts['error']} error(s)", "red"),
            "  ",
            (f"{counts['warning']} warning(s)", "yellow"),
            "  ",
            (f"{counts['info']} info", "blue"),
        )
        console.print(header)

        if not report.findings:
            console.print("[green]No issues found[/green]")
            console.print()
            continue

        table = Table(show_header=True, border_style="dim")
        table.add_column("Rule", style="cyan")
        table.add_column("Severity", width=8)
        table.add_column("Location", style="green")
        table.add_column("Message")
        table.add_column("Suggestion", style="dim")

        for finding in report.findings:
            style = _SEVERITY_STYLE.get(finding.severity, "white")
            table.add_row(
                finding.rule_id,
                Text(finding.severity.label, style=style),
                Text(str(finding.location)),
                Text(finding.message),
                Text(finding.suggested_fix or ""),
            )

        console.print(table)
        console.print()
