"""Docker image build and registry push.

The pipeline is build -> login -> push, strictly in order. The first
failing step raises ImageBuildError and nothing after it runs; an image
that was built or pushed before a later failure is left as is.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from .errors import ImageBuildError

if TYPE_CHECKING:
    from chartdeck.cli.shared.console import CLIConsole

    from ..shell_commands import ShellCommands


def image_tag(repository: str, version: str) -> str:
    """Container tag for a version, e.g. "registry/game:1.2.0"."""
    return f"{repository}:{version}"


def registry_host(tag: str) -> str:
    """Registry host part of an image tag."""
    return tag.split("/", 1)[0]


class ImageBuilder:
    """Builds a service image and pushes it to the chart's registry.

    Attributes:
        commands: Shell command executor
        console: CLI console for output
    """

    def __init__(self, commands: ShellCommands, console: CLIConsole) -> None:
        self.commands = commands
        self.console = console

    def build(self, dockerfile: Path, tag: str) -> None:
        """Build the image from a Dockerfile.

        Raises:
            ImageBuildError: If the Dockerfile is missing or the build fails
        """
        dockerfile = Path(dockerfile)
        if not dockerfile.is_file():
            raise ImageBuildError(
                "build",
                f"Dockerfile not found: {dockerfile}",
                details="Pass --build with a path relative to the current directory",
            )

        self.console.print(f"[bold cyan]🔨 Building image {tag}...[/bold cyan]")
        logger.info(f"Building {tag} from {dockerfile}")
        result = self.commands.docker.build(dockerfile, tag)
        if not result.success:
            raise ImageBuildError(
                "build",
                f"Docker build failed for {tag}",
                details=result.output or f"docker exited with code {result.returncode}",
            )
        self.console.ok(f"Image {tag} built")

    def login(self, region: str) -> str:
        """Get a registry token for a region.

        Returns:
            Registry password to use for the push

        Raises:
            ImageBuildError: If no token could be obtained
        """
        logger.info(f"Requesting registry token for {region}")
        result = self.commands.registry.get_login_password(region)
        token = result.stdout.strip()
        if not result.success or not token:
            raise ImageBuildError(
                "login",
                f"Registry login failed for region {region}",
                details=result.output or "The registry returned an empty token",
            )
        return token

    def push(self, tag: str, token: str) -> None:
        """Authenticate docker with token and push the image.

        Raises:
            ImageBuildError: If docker login or push fails
        """
        registry = registry_host(tag)
        login = self.commands.docker.login(
            registry, self.commands.registry.USERNAME, token
        )
        if not login.success:
            raise ImageBuildError(
                "push",
                f"Docker login to {registry} failed",
                details=login.output or None,
            )

        self.console.print(f"[bold cyan]📦 Pushing {tag}...[/bold cyan]")
        result = self.commands.docker.push_image(tag)
        if not result.success:
            raise ImageBuildError(
                "push",
                f"Docker push failed for {tag}",
                details=result.output or f"docker exited with code {result.returncode}",
            )
        self.console.ok(f"Image {tag} pushed")

    def build_and_push(self, dockerfile: Path, tag: str, region: str) -> str:
        """Run the full build, login and push sequence.

        Returns:
            The pushed tag
        """
        self.build(dockerfile, tag)
        token = self.login(region)
        self.push(tag, token)
        return tag
