"""Shell command abstractions for Helm release operations.

This package provides a clean interface for the external tools chartdeck
drives. It is organized into specialized modules for each tool:

- helm: Helm release management and queries
- docker: Image build, login and push
- registry: Registry credential lookup

Usage:
    from chartdeck.deployment.shell_commands import ShellCommands

    commands = ShellCommands(Path("."))
    result, releases = commands.helm.list_releases("game")
"""

from pathlib import Path

from .docker import DockerCommands
from .helm import HelmCommands
from .registry import RegistryCommands
from .runner import CommandRunner
from .types import CommandResult, HelmRelease


class ShellCommands:
    """Unified interface for all shell command operations.

    Attributes:
        helm: Helm-related commands
        docker: Docker-related commands
        registry: Registry credential commands
    """

    def __init__(self, working_dir: Path) -> None:
        """Initialize the shell commands executor.

        Args:
            working_dir: Commands will be executed from this directory by default.
        """
        self._working_dir = Path(working_dir)
        self._runner = CommandRunner(self._working_dir)

        self.helm = HelmCommands(self._runner)
        self.docker = DockerCommands(self._runner)
        self.registry = RegistryCommands(self._runner)

    @property
    def working_dir(self) -> Path:
        """Get the default working directory."""
        return self._working_dir


__all__ = [
    "ShellCommands",
    "CommandResult",
    "HelmRelease",
    "DockerCommands",
    "HelmCommands",
    "RegistryCommands",
    "CommandRunner",
]
