"""Tool settings: which chart family to deploy and where.

Settings live in a YAML file (default ~/.config/chartdeck/config.yaml,
overridable with CHARTDECK_CONFIG):

    current_chart: game
    charts:
      game:
        name: game
        namespace: game
        repository: 123456789012.dkr.ecr.eu-west-1.amazonaws.com/game
        region: eu-west-1
        api_template: charts/api
        host_template: charts/host

`${VAR}` and `${VAR:-default}` references are substituted from the
environment before parsing. Relative template paths are resolved against
the directory that holds the settings file.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, model_validator

from chartdeck.deployment.chart_operator.constants import Archetype, DeploymentConstants
from chartdeck.deployment.chart_operator.errors import ConfigurationError

CONFIG_ENV_VAR = "CHARTDECK_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/chartdeck/config.yaml")

# ${NAME}, ${NAME:-fallback} or ${NAME:?hint}
_ENV_REFERENCE = re.compile(
    r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::(?P<op>[-?])(?P<arg>[^}]*))?\}"
)

DEFAULT_CONFIG_TEMPLATE = """\
# chartdeck settings
# Fill in the chart family below, then re-run the command.
current_chart: default
charts:
  default:
    # Base name used in implicit release names: <name>-<api|host><version>
    name: my-service
    namespace: default
    # Container repository images are tagged into: <repository>:<version>
    repository: 123456789012.dkr.ecr.eu-west-1.amazonaws.com/my-service
    region: eu-west-1
    # Chart directories, relative to this file
    api_template: charts/api
    host_template: charts/host
"""


class ChartDescriptor(BaseModel):
    """Static identity of a chart family."""

    name: str
    namespace: str
    repository: str
    region: str
    api_template: Path
    host_template: Path
    helm_timeout: str = DeploymentConstants.HELM_TIMEOUT

    def template_for(self, archetype: Archetype) -> Path:
        """Chart template directory of an archetype."""
        if archetype is Archetype.API:
            return self.api_template
        return self.host_template

    def resolve_paths(self, base_dir: Path) -> ChartDescriptor:
        """Copy with relative template paths anchored at base_dir."""
        return self.model_copy(
            update={
                "api_template": _anchor(self.api_template, base_dir),
                "host_template": _anchor(self.host_template, base_dir),
            }
        )


def _anchor(path: Path, base_dir: Path) -> Path:
    path = path.expanduser()
    return path if path.is_absolute() else base_dir / path


class ToolSettings(BaseModel):
    """Top-level settings document."""

    current_chart: str
    charts: dict[str, ChartDescriptor] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _current_chart_exists(self) -> ToolSettings:
        if self.current_chart not in self.charts:
            raise ValueError(
                f"current_chart '{self.current_chart}' is not defined under charts"
            )
        return self

    def current(self) -> ChartDescriptor:
        """Descriptor of the chart family commands operate on."""
        return self.charts[self.current_chart]


def expand_env_references(text: str) -> str:
    """Replace ${VAR} references in settings text with environment values.

    ${VAR:-fallback} uses fallback when VAR is unset; ${VAR:?hint} and a
    bare ${VAR} require it.

    Raises:
        ValueError: If a required variable is unset
    """

    def lookup(match: re.Match[str]) -> str:
        name, op, arg = match.group("name", "op", "arg")
        value = os.getenv(name)
        if value is not None:
            return value
        if op == "-":
            return arg
        hint = arg if op == "?" and arg else "not set"
        raise ValueError(f"Environment variable {name} is required: {hint}")

    return _ENV_REFERENCE.sub(lookup, text)


def settings_path() -> Path:
    """Resolve the settings file location."""
    configured = os.getenv(CONFIG_ENV_VAR)
    return Path(configured or DEFAULT_CONFIG_PATH).expanduser()


def ensure_settings(path: Path | None = None) -> Path:
    """Make sure a settings file exists.

    A missing file is created from a commented template and reported, since
    its placeholder values can't be deployed as-is.

    Raises:
        ConfigurationError: If the file had to be created
    """
    path = path or settings_path()
    if path.exists():
        return path

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    logger.info(f"Created default settings at {path}")
    raise ConfigurationError(
        f"Created default settings at {path}",
        details="Edit the chart name, namespace, repository, region and "
        "template paths, then run the command again.",
    )


def load_settings(path: Path | None = None) -> ToolSettings:
    """Load and validate the settings file.

    Args:
        path: Settings file (default: settings_path())

    Returns:
        ToolSettings with template paths resolved

    Raises:
        ConfigurationError: If the file is unreadable, malformed or invalid
    """
    path = path or settings_path()
    logger.debug(f"Loading settings from {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read settings file {path}", details=str(e)) from e

    try:
        content = expand_env_references(content)
        loaded: Any = yaml.safe_load(content)
    except ValueError as e:
        raise ConfigurationError(f"Invalid settings file {path}", details=str(e)) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing {path}", details=str(e)) from e

    if not isinstance(loaded, dict):
        raise ConfigurationError(
            f"Invalid settings file {path}",
            details="Expected a mapping with current_chart and charts",
        )

    try:
        settings = ToolSettings.model_validate(loaded)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings file {path}", details=str(e)) from e

    base_dir = path.parent
    settings.charts = {
        key: descriptor.resolve_paths(base_dir)
        for key, descriptor in settings.charts.items()
    }
    logger.info(f"Using chart '{settings.current_chart}' from {path}")
    return settings
