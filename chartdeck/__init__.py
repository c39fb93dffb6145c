"""chartdeck - Helm release management for api and game-host services."""

__version__ = "0.1.0"
