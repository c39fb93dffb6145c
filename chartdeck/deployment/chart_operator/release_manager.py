"""Helm release management.

This module installs, upgrades, exports and removes releases. Every
transition is a single blocking Helm call; failures are raised as-is and
never retried or rolled back.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml  # type: ignore[import-untyped]
from loguru import logger

from .constants import Archetype, DeploymentConstants
from .errors import ClusterError, InputValidationError, ReleaseNotFoundError
from .release_index import Release, ReleaseIndexer, ReleaseListing
from .schemas import BaseValues

if TYPE_CHECKING:
    from chartdeck.cli.shared.console import CLIConsole
    from chartdeck.config.settings import ChartDescriptor

    from ..shell_commands import CommandResult, ShellCommands
    from .values import Mutation, ValuesRenderer, T


class ReleaseManager:
    """Manages the releases of one chart family.

    Handles:
    - Install or upgrade from a rendered values document
    - Version-only upgrades that reuse a release's stored values
    - Manifest export without touching the cluster
    - Uninstall

    Removing a release that is already gone raises ReleaseNotFoundError
    rather than succeeding silently.
    """

    def __init__(
        self,
        commands: ShellCommands,
        console: CLIConsole,
        descriptor: ChartDescriptor,
        indexer: ReleaseIndexer,
        constants: DeploymentConstants | None = None,
    ) -> None:
        """Initialize the release manager.

        Args:
            commands: Shell command executor
            console: CLI console for output
            descriptor: Active chart descriptor
            indexer: Release indexer used to look releases up
            constants: Optional deployment constants
        """
        self.commands = commands
        self.console = console
        self.descriptor = descriptor
        self.indexer = indexer
        self.constants = constants or DeploymentConstants()

    @property
    def namespace(self) -> str:
        return self.descriptor.namespace

    # =========================================================================
    # Helpers
    # =========================================================================

    def _is_not_found(self, result: CommandResult) -> bool:
        # 127 means the helm binary itself is missing
        if result.returncode == 127:
            return False
        output = result.output.lower()
        return any(marker in output for marker in self.constants.NOT_FOUND_MARKERS)

    def _check(
        self,
        result: CommandResult,
        name: str,
        action: str,
        *,
        existing: bool = True,
    ) -> None:
        """Raise the matching error for a failed Helm call.

        Args:
            result: Result of the Helm call
            name: Release the call targeted
            action: Verb used in the error message
            existing: Whether the call targets a release that must exist.
                Upserts pass False; their "not found" output refers to a
                namespace, chart or referenced object and stays a
                ClusterError.
        """
        if result.success:
            return
        if existing and self._is_not_found(result):
            raise ReleaseNotFoundError(name, self.namespace, details=result.output)
        raise ClusterError(
            f"Failed to {action} release '{name}'",
            details=result.output or f"helm exited with code {result.returncode}",
        )

    def _print_helm_output(self, line: str) -> None:
        line = line.strip()
        if line:
            self.console.print(f"  [dim]{line}[/dim]")

    def _submit(
        self,
        name: str,
        chart_path: Path,
        values: dict[str, Any],
        *,
        install: bool,
    ) -> None:
        """Write values to a temporary file and run helm upgrade with it."""
        with tempfile.NamedTemporaryFile(
            "w",
            suffix=".yaml",
            prefix="chartdeck-values-",
            delete=False,
            encoding="utf-8",
        ) as f:
            yaml.safe_dump(values, f, default_flow_style=False, sort_keys=False)
            values_file = Path(f.name)

        try:
            result = self.commands.helm.upgrade(
                name,
                chart_path,
                self.namespace,
                install=install,
                value_files=[values_file],
                timeout=self.descriptor.helm_timeout,
                on_output=self._print_helm_output,
            )
        finally:
            values_file.unlink(missing_ok=True)

        self._check(
            result, name, "install" if install else "upgrade", existing=not install
        )

    def _chart_dir(self, template_path: Path) -> Path:
        template_path = Path(template_path)
        return template_path if template_path.is_dir() else template_path.parent

    # =========================================================================
    # Install
    # =========================================================================

    def install(
        self,
        renderer: ValuesRenderer[T],
        template_path: Path,
        name: str,
        version: str,
        mutate: Mutation[T],
        archetype: Archetype | None = None,
    ) -> Release:
        """Install the release, or upgrade it in place if it already exists.

        Args:
            renderer: Renderer for the archetype's values schema
            template_path: Chart template directory
            name: Release name
            version: Image tag to deploy
            mutate: Patches the rendered defaults in place
            archetype: Archetype recorded on the returned Release

        Returns:
            The release as deployed

        Raises:
            TemplateError: If the template can't be read or doesn't fit the schema
            ClusterError: If Helm fails
        """
        values: BaseValues = renderer.apply(template_path, mutate)
        values.image.tag = version

        self.console.print(
            f"[bold cyan]🚀 Deploying {name} ({version}) to {self.namespace}...[/bold cyan]"
        )
        logger.info(f"Installing {name} from {template_path} at {version}")
        self._submit(
            name,
            self._chart_dir(template_path),
            renderer.to_dict(values),
            install=True,
        )
        self.console.ok(f"Release {name} deployed at version {version}")
        return Release(
            name=name,
            version=version,
            namespace=self.namespace,
            archetype=archetype,
            status="deployed",
        )

    # =========================================================================
    # Update
    # =========================================================================

    def update_version(self, release: Release, version: str) -> Release:
        """Re-apply a release's stored values with only the image tag changed.

        Raises:
            InputValidationError: If the release's chart matches no template
            ReleaseNotFoundError: If the release no longer exists
            ClusterError: If Helm fails
        """
        if release.archetype is None:
            raise InputValidationError(
                f"Cannot tell which chart release '{release.name}' uses",
                details=f"Its chart '{release.chart}' matches neither the api "
                "nor the host template of the current chart settings",
            )

        result, values = self.commands.helm.get_values(release.name, self.namespace)
        self._check(result, release.name, "read values of")

        image = values.get("image")
        if not isinstance(image, dict):
            image = {}
            values["image"] = image
        image["tag"] = version

        template = self.descriptor.template_for(release.archetype)
        self.console.print(
            f"[bold cyan]♻️  Updating {release.name} to {version}...[/bold cyan]"
        )
        logger.info(f"Updating {release.name} from {release.version} to {version}")
        self._submit(release.name, self._chart_dir(template), values, install=False)
        self.console.ok(f"Release {release.name} updated to version {version}")
        return Release(
            name=release.name,
            version=version,
            namespace=release.namespace,
            archetype=release.archetype,
            status="deployed",
            chart=release.chart,
        )

    def update_version_by_name(self, name: str, version: str) -> Release:
        return self.update_version(self.indexer.find_release(name), version)

    def update_version_by_index(
        self, listing: ReleaseListing, token: str | int, version: str
    ) -> Release:
        return self.update_version(listing.resolve(token), version)

    # =========================================================================
    # Uninstall
    # =========================================================================

    def uninstall_by_name(self, name: str) -> None:
        """Remove a release.

        Raises:
            ReleaseNotFoundError: If the release doesn't exist
            ClusterError: If Helm fails
        """
        self.console.print(f"[bold cyan]🗑  Uninstalling {name}...[/bold cyan]")
        logger.info(f"Uninstalling {name} from {self.namespace}")
        result = self.commands.helm.uninstall(name, self.namespace)
        self._check(result, name, "uninstall")
        self.console.ok(f"Release {name} removed")

    def uninstall_by_index(self, listing: ReleaseListing, token: str | int) -> Release:
        release = listing.resolve(token)
        self.uninstall_by_name(release.name)
        return release

    # =========================================================================
    # Output
    # =========================================================================

    def output_chart_by_name(self, name: str, path: Path) -> Path:
        """Write a release's rendered manifests to <path>/<name>.yaml.

        Nothing is submitted to the cluster.

        Returns:
            Path of the written manifest file
        """
        result = self.commands.helm.get_manifest(name, self.namespace)
        self._check(result, name, "read manifest of")

        target_dir = Path(path)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / f"{name}.yaml"
        target.write_text(result.stdout, encoding="utf-8")
        self.console.ok(f"Manifests of {name} written to {target}")
        return target

    def output_chart_by_index(
        self, listing: ReleaseListing, token: str | int, path: Path
    ) -> Path:
        return self.output_chart_by_name(listing.resolve(token).name, path)
