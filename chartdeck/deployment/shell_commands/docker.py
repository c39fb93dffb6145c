"""Docker command abstractions.

This module provides commands for building, authenticating and pushing
container images.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner


class DockerCommands:
    """Docker-related shell commands.

    Provides operations for:
    - Image builds from a Dockerfile
    - Registry login with a token read from stdin
    - Image pushes
    """

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize Docker commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    def build(
        self,
        dockerfile: Path,
        image_tag: str,
        context_dir: Path | None = None,
    ) -> CommandResult:
        """Build an image from a Dockerfile.

        Args:
            dockerfile: Path to the Dockerfile
            image_tag: Tag to apply (e.g., "registry/game:1.2.0")
            context_dir: Build context (defaults to the Dockerfile's directory)

        Returns:
            CommandResult with build status
        """
        context = context_dir or dockerfile.parent
        return self._runner.run(
            ["docker", "build", "-f", str(dockerfile), "-t", image_tag, str(context)],
            capture_output=False,
        )

    def login(self, registry: str, username: str, password: str) -> CommandResult:
        """Log docker into a registry, passing the password on stdin.

        Args:
            registry: Registry host (e.g., "123.dkr.ecr.eu-west-1.amazonaws.com")
            username: Registry user name
            password: Registry password or token

        Returns:
            CommandResult with login status
        """
        return self._runner.run(
            ["docker", "login", "--username", username, "--password-stdin", registry],
            input_text=password,
        )

    def push_image(self, image_tag: str) -> CommandResult:
        """Push a Docker image to a remote registry.

        Args:
            image_tag: Full image tag including registry

        Returns:
            CommandResult with push status
        """
        return self._runner.run(["docker", "push", image_tag], capture_output=False)
