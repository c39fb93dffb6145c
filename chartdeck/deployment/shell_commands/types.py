"""Data types for shell command results.

This module contains all dataclasses used across the shell command modules.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "CommandResult",
    "HelmRelease",
]


@dataclass
class CommandResult:
    """Result of a command execution."""

    success: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0

    @property
    def output(self) -> str:
        """Best available diagnostic text (stderr first, then stdout)."""
        return (self.stderr or self.stdout).strip()


@dataclass
class HelmRelease:
    """Information about a Helm release as reported by `helm list`.

    Attributes:
        name: Release name
        namespace: Kubernetes namespace
        status: Release status (deployed, failed, pending, uninstalling)
        revision: Release revision number
        chart: Chart name and version (e.g., "game-api-0.1.0")
        app_version: Chart appVersion
    """

    name: str
    namespace: str
    status: str
    revision: str
    chart: str = ""
    app_version: str = ""
