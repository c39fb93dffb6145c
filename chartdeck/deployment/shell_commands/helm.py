"""Helm command abstractions.

This module provides commands for Helm release management,
including deployment, upgrades, uninstallation, and release queries.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .types import CommandResult, HelmRelease

if TYPE_CHECKING:
    from .runner import CommandRunner


class HelmCommands:
    """Helm-related shell commands.

    Provides operations for:
    - Release management (upgrade --install, upgrade, uninstall)
    - Release queries (list, stored values, rendered manifest)
    """

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize Helm commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    # =========================================================================
    # Release Management
    # =========================================================================

    def upgrade(
        self,
        release_name: str,
        chart_path: Path,
        namespace: str,
        *,
        install: bool = True,
        value_files: list[Path] | None = None,
        timeout: str = "5m",
        wait: bool = False,
        create_namespace: bool = True,
        on_output: Callable[[str], None] | None = None,
    ) -> CommandResult:
        """Deploy or upgrade a Helm release.

        With install=True this is `helm upgrade --install`: the release is
        created if absent and upgraded otherwise. With install=False the
        release must already exist and Helm reports "has no deployed releases"
        when it does not.

        Args:
            release_name: Name for the Helm release
            chart_path: Path to the Helm chart directory
            namespace: Kubernetes namespace for deployment
            install: Whether to create the release when it doesn't exist
            value_files: Optional list of values.yaml override files
            timeout: Maximum time to wait for deployment
            wait: Whether to wait for resources to be ready
            create_namespace: Whether to create namespace if it doesn't exist
            on_output: Optional callback for real-time output streaming

        Returns:
            CommandResult with deployment status
        """
        cmd = ["helm", "upgrade"]
        if install:
            cmd.append("--install")
        cmd.extend([release_name, str(chart_path), "--namespace", namespace])

        if install and create_namespace:
            cmd.append("--create-namespace")
        if wait:
            cmd.append("--wait")
        cmd.extend(["--timeout", timeout])

        for vf in value_files or []:
            cmd.extend(["-f", str(vf)])

        if on_output:
            return self._runner.run_streaming(cmd, on_output=on_output)
        return self._runner.run(cmd)

    def uninstall(
        self,
        release_name: str,
        namespace: str,
        *,
        wait: bool = True,
    ) -> CommandResult:
        """Uninstall a Helm release.

        Args:
            release_name: Name of the release to uninstall
            namespace: Kubernetes namespace
            wait: Whether to wait for resources to be deleted

        Returns:
            CommandResult with uninstall status
        """
        cmd = ["helm", "uninstall", release_name, "-n", namespace]
        if wait:
            cmd.append("--wait")
        return self._runner.run(cmd)

    # =========================================================================
    # Release Queries
    # =========================================================================

    def list_releases(self, namespace: str) -> tuple[CommandResult, list[HelmRelease]]:
        """List deployed Helm releases in a namespace, in Helm's order.

        Args:
            namespace: Kubernetes namespace to query

        Returns:
            The raw CommandResult and the parsed releases (empty on failure)
        """
        cmd = ["helm", "list", "-n", namespace, "-o", "json"]
        result = self._runner.run(cmd)
        if not result.success or not result.stdout.strip():
            return result, []

        try:
            releases_data = json.loads(result.stdout)
        except json.JSONDecodeError:
            return CommandResult(
                success=False,
                stdout=result.stdout,
                stderr="helm list returned invalid JSON",
                returncode=result.returncode,
            ), []

        return result, [
            HelmRelease(
                name=r.get("name", ""),
                namespace=r.get("namespace", ""),
                status=r.get("status", ""),
                revision=str(r.get("revision", "")),
                chart=r.get("chart", ""),
                app_version=r.get("app_version", ""),
            )
            for r in releases_data or []
        ]

    def get_values(
        self, release_name: str, namespace: str
    ) -> tuple[CommandResult, dict[str, Any]]:
        """Get the user-supplied values stored with a release.

        Args:
            release_name: Name of the release
            namespace: Kubernetes namespace

        Returns:
            The raw CommandResult and the parsed values (empty on failure)
        """
        cmd = ["helm", "get", "values", release_name, "-n", namespace, "-o", "json"]
        result = self._runner.run(cmd)
        if not result.success:
            return result, {}

        try:
            values = json.loads(result.stdout or "{}")
        except json.JSONDecodeError:
            return CommandResult(
                success=False,
                stdout=result.stdout,
                stderr="helm get values returned invalid JSON",
                returncode=result.returncode,
            ), {}
        # Helm prints `null` for a release installed without values
        return result, values or {}

    def get_manifest(self, release_name: str, namespace: str) -> CommandResult:
        """Get the rendered Kubernetes manifests of a release.

        Args:
            release_name: Name of the release
            namespace: Kubernetes namespace

        Returns:
            CommandResult whose stdout holds the manifest YAML
        """
        return self._runner.run(
            ["helm", "get", "manifest", release_name, "-n", namespace]
        )
