"""Entry point for running uilint as a module: ``python -m uilint``."""

from __future__ import annotations


def main() -> None:
    """Main entry point for module execution."""
    from uilint.cli import main as cli_main

    cli_main()


if __name__ == "__main__":
    main()
