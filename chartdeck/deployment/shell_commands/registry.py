"""Container registry authentication commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner


class RegistryCommands:
    """Registry credential lookups through the AWS CLI."""

    USERNAME = "AWS"

    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def get_login_password(self, region: str) -> CommandResult:
        """Fetch a short-lived registry password for a region.

        Args:
            region: Registry region (e.g., "eu-west-1")

        Returns:
            CommandResult whose stdout holds the password
        """
        return self._runner.run(
            ["aws", "ecr", "get-login-password", "--region", region]
        )
