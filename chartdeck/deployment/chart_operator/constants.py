"""Chart operation constants.

This module centralizes the magic strings and configuration values used
throughout release management.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Archetype(str, Enum):
    """Supported release archetypes.

    The value is both the CLI literal and the infix used in implicit
    release names.
    """

    API = "api"
    HOST = "host"

    @property
    def label(self) -> str:
        """Human-readable archetype name."""
        return "game-host" if self is Archetype.HOST else "api"


@dataclass(frozen=True)
class DeploymentConstants:
    """Constants for chart rendering and release management.

    All attributes are class-level and immutable.
    """

    # Configuration bundle artifacts
    APPSETTINGS_FILE: str = "appsettings.json"
    LOG_CONFIG_FILE: str = "log4net.config"

    # Values document conventions
    CONFIG_NAME: str = "config"
    CONFIG_MAP_SUFFIX: str = "-config"
    VALUES_FILE: str = "values.yaml"
    CHART_FILE: str = "Chart.yaml"

    # Helm
    HELM_TIMEOUT: str = "5m"
    NOT_FOUND_MARKERS: tuple[str, ...] = (
        "not found",
        "has no deployed releases",
    )
