"""CLI context and dependency container."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import click
import typer

from chartdeck.cli.shared.console import CLIConsole, console
from chartdeck.config.settings import (
    ChartDescriptor,
    ToolSettings,
    ensure_settings,
    load_settings,
)
from chartdeck.deployment.chart_operator import ChartWorkflow
from chartdeck.deployment.shell_commands import ShellCommands


@dataclass(frozen=True)
class CLIContext:
    """Runtime dependencies for CLI commands."""

    console: CLIConsole
    working_dir: Path
    settings: ToolSettings
    descriptor: ChartDescriptor
    commands: ShellCommands

    def workflow(self) -> ChartWorkflow:
        """Chart workflow bound to this context."""
        return ChartWorkflow(
            self.console,
            self.descriptor,
            self.commands,
            working_dir=self.working_dir,
        )


def build_cli_context(settings_file: Path | None = None) -> CLIContext:
    """Build a fresh CLIContext from the settings file.

    Raises:
        ConfigurationError: If the settings file is missing or invalid
    """
    path = ensure_settings(settings_file)
    settings = load_settings(path)
    working_dir = Path.cwd()

    return CLIContext(
        console=console,
        working_dir=working_dir,
        settings=settings,
        descriptor=settings.current(),
        commands=ShellCommands(working_dir),
    )


def get_cli_context(ctx: typer.Context | None = None) -> CLIContext:
    """Return the CLIContext from Typer, falling back to a new instance."""
    context = ctx or click.get_current_context(silent=True)
    if context and isinstance(context.obj, CLIContext):
        return context.obj
    return build_cli_context()
