"""Exception hierarchy for chart operations.

Every failure a command can hit is a ChartDeckError carrying a short
message and optional recovery details; the CLI prints both and exits
non-zero.
"""

from __future__ import annotations


class ChartDeckError(Exception):
    """Raised when a chart operation fails."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class InputValidationError(ChartDeckError):
    """Raised for bad arguments before any side effect happens."""


class ConfigurationError(ChartDeckError):
    """Raised when the settings file is missing or invalid."""


class ConfigBundleError(ChartDeckError):
    """Raised when a configuration directory cannot be read."""


class MissingArtifactError(ConfigBundleError):
    """Raised when a required configuration artifact is absent."""

    def __init__(self, artifact: str, root: str):
        self.artifact = artifact
        super().__init__(
            f"Config doesn't include {artifact}",
            details=f"No file named '{artifact}' was found anywhere under {root}",
        )


class TemplateError(ChartDeckError):
    """Raised when a chart template cannot be read."""


class SchemaMismatchError(TemplateError):
    """Raised when a chart's default values don't fit the values schema."""


class ImageBuildError(ChartDeckError):
    """Raised when the build, login or push step fails."""

    def __init__(self, step: str, message: str, details: str | None = None):
        self.step = step
        super().__init__(message, details)


class ClusterError(ChartDeckError):
    """Raised when a Helm call against the cluster fails."""


class ReleaseNotFoundError(ClusterError):
    """Raised when the targeted release doesn't exist in the cluster."""

    def __init__(self, name: str, namespace: str, details: str | None = None):
        self.name = name
        self.namespace = namespace
        super().__init__(
            f"Release '{name}' not found in namespace '{namespace}'", details
        )


class SelectionError(ChartDeckError):
    """Raised when an interactive release selection can't be resolved."""


class SelectionParseError(SelectionError):
    """Raised when the selection token isn't an integer."""


class SelectionRangeError(SelectionError):
    """Raised when the selection ordinal is outside the listing."""
