"""Tool settings loading."""

from .settings import (
    CONFIG_ENV_VAR,
    ChartDescriptor,
    ToolSettings,
    ensure_settings,
    load_settings,
    settings_path,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "ChartDescriptor",
    "ToolSettings",
    "ensure_settings",
    "load_settings",
    "settings_path",
]
