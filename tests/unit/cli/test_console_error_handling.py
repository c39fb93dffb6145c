import pytest
import typer
from rich.console import Console

from chartdeck.cli.shared.console import CLIConsole, with_error_handling
from chartdeck.deployment.chart_operator.errors import (
    ChartDeckError,
    ReleaseNotFoundError,
)


def test_with_error_handling_handles_chartdeck_error():
    @with_error_handling
    def _command() -> None:
        raise ChartDeckError("Boom", details="extra")

    with pytest.raises(typer.Exit) as excinfo:
        _command()

    assert excinfo.value.exit_code == 1


def test_with_error_handling_handles_subclasses():
    @with_error_handling
    def _command() -> None:
        raise ReleaseNotFoundError("game-api10", "game-ns")

    with pytest.raises(typer.Exit) as excinfo:
        _command()

    assert excinfo.value.exit_code == 1


def test_with_error_handling_handles_keyboard_interrupt():
    @with_error_handling
    def _command() -> None:
        raise KeyboardInterrupt

    with pytest.raises(typer.Exit) as excinfo:
        _command()

    assert excinfo.value.exit_code == 130


def test_with_error_handling_leaves_other_errors_alone():
    @with_error_handling
    def _command() -> None:
        raise RuntimeError("unexpected")

    with pytest.raises(RuntimeError):
        _command()


def test_handle_error_prints_message_and_details():
    rich_console = Console(record=True, width=120)
    cli_console = CLIConsole(rich_console)

    with pytest.raises(typer.Exit):
        cli_console.handle_error("Config doesn't include log4net.config", "look in ./cfg")

    text = rich_console.export_text()
    assert "Config doesn't include log4net.config" in text
    assert "look in ./cfg" in text
