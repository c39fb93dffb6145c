"""Tests for CLI context dependency injection."""

from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import typer

from chartdeck.cli.context import CLIContext, build_cli_context, get_cli_context
from chartdeck.deployment.chart_operator import ChartWorkflow
from chartdeck.deployment.chart_operator.errors import ConfigurationError

SETTINGS = """\
current_chart: game
charts:
  game:
    name: game
    namespace: game-ns
    repository: registry.local/game
    region: eu-west-1
    api_template: charts/api
    host_template: charts/host
"""


def _context(**overrides) -> CLIContext:
    fields = {
        "console": Mock(),
        "working_dir": Path("/test"),
        "settings": Mock(),
        "descriptor": Mock(),
        "commands": Mock(),
    }
    fields.update(overrides)
    return CLIContext(**fields)


def test_cli_context_is_immutable():
    """Test that CLIContext is frozen/immutable."""
    ctx = _context()

    with pytest.raises(AttributeError):
        ctx.console = Mock()  # type: ignore[misc]


def test_build_cli_context_loads_current_chart(tmp_path, monkeypatch):
    """Test that build_cli_context wires settings into the context."""
    path = tmp_path / "config.yaml"
    path.write_text(SETTINGS)
    monkeypatch.chdir(tmp_path)

    ctx = build_cli_context(path)

    assert ctx.descriptor.name == "game"
    assert ctx.descriptor.api_template == tmp_path / "charts" / "api"
    assert ctx.working_dir == tmp_path
    assert ctx.commands.working_dir == tmp_path


def test_build_cli_context_reads_env_location(tmp_path, monkeypatch):
    path = tmp_path / "elsewhere.yaml"
    path.write_text(SETTINGS)
    monkeypatch.setenv("CHARTDECK_CONFIG", str(path))

    ctx = build_cli_context()

    assert ctx.settings.current_chart == "game"


def test_build_cli_context_creates_missing_settings(tmp_path):
    """A missing settings file is written and reported as an error."""
    path = tmp_path / "config.yaml"

    with pytest.raises(ConfigurationError):
        build_cli_context(path)

    assert path.exists()


def test_workflow_is_bound_to_context(descriptor):
    ctx = _context(descriptor=descriptor, working_dir=Path("/work"))

    workflow = ctx.workflow()

    assert isinstance(workflow, ChartWorkflow)
    assert workflow.descriptor is descriptor
    assert workflow.working_dir == Path("/work")


def test_get_cli_context_from_typer_context():
    """Test that get_cli_context retrieves from Typer context."""
    mock_ctx_obj = _context()

    typer_ctx = Mock(spec=typer.Context)
    typer_ctx.obj = mock_ctx_obj

    assert get_cli_context(typer_ctx) is mock_ctx_obj


def test_get_cli_context_with_none_falls_back():
    """Test that get_cli_context creates new context when ctx is None."""
    with patch("chartdeck.cli.context.build_cli_context") as mock_build:
        mock_build.return_value = Mock(spec=CLIContext)

        get_cli_context(None)

        mock_build.assert_called_once()
