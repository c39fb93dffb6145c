"""Main CLI application module.

This module provides the main entry point for the chartdeck CLI.

Command Groups:
- chart (alias: ch): Release output, apply, update and delete
"""

import sys
from typing import Annotated

import typer
from loguru import logger

from .commands import chart_app

# Create the main CLI application
app = typer.Typer(
    help="🛠️  chartdeck - Helm release management for api and game-host services",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(chart_app, name="chart")
app.add_typer(chart_app, name="ch", hidden=True)


def configure_logging(verbose: bool) -> None:
    """Route loguru output to stderr at the requested level."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    configure_logging(verbose)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
