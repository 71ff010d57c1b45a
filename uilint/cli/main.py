"""uilint CLI - Main entrypoint."""

from __future__ import annotations

import typer
from rich.console import Console

from uilint import __version__
from uilint.cli.commands import lint_cmd, rules_cmd
from uilint.kernel.logging import configure_logging

app = typer.Typer(
    name="uilint",
    help="uilint - Static convention and security checks for UI component trees.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

console = Console()

app.command(name="lint", help="Lint component documents")(lint_cmd.lint)
app.command(name="rules", help="List the active rules")(rules_cmd.rules)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold blue]uilint[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only log errors"),
    verbose: bool = typer.Option(False, "-V", "--verbose", help="Enable debug logging"),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level: debug|info|warning|error (default: from config)"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """uilint - static rule checks for UI component declarations.

    Global flags are parsed here and stored on `ctx.obj` for subcommands.
    """
    if ctx.obj is None:
        ctx.obj = {}

    effective_level = log_level.upper() if log_level else None
    if quiet:
        effective_level = "ERROR"
    elif verbose:
        effective_level = "DEBUG"

    ctx.obj.update({"quiet": quiet, "verbose": verbose, "log_level": effective_level})

    if effective_level is not None:
        configure_logging(level=effective_level)  # type: ignore[arg-type]


def main() -> None:
    """Main CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
