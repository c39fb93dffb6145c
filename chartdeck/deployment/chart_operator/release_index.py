"""Release listing and interactive selection.

Listing captures the releases deployed at one moment and numbers them from
1. The resulting ReleaseListing belongs to the current command only and is
passed explicitly to whatever acts on a selection. If the cluster changes
after listing, acting on the stale entry surfaces Helm's own not-found
error; it never silently retargets another release.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import yaml  # type: ignore[import-untyped]
from loguru import logger
from rich.table import Table

from .constants import Archetype, DeploymentConstants
from .errors import (
    ClusterError,
    ReleaseNotFoundError,
    SelectionParseError,
    SelectionRangeError,
)

if TYPE_CHECKING:
    from chartdeck.cli.shared.console import CLIConsole
    from chartdeck.config.settings import ChartDescriptor

    from ..shell_commands import ShellCommands


@dataclass(frozen=True)
class Release:
    """A release as observed in the cluster.

    Attributes:
        name: Release name, unique within the namespace
        version: Image tag stored in the release's values
        namespace: Kubernetes namespace
        archetype: Chart archetype, or None if the chart matches no template
        status: Helm status (deployed, failed, ...)
        revision: Helm revision number
        chart: Chart name and version as reported by Helm
    """

    name: str
    version: str
    namespace: str
    archetype: Archetype | None = None
    status: str = ""
    revision: str = ""
    chart: str = ""


@dataclass(frozen=True)
class ReleaseListing:
    """Releases numbered for selection, valid for one command."""

    releases: tuple[Release, ...]

    def __len__(self) -> int:
        return len(self.releases)

    def __iter__(self) -> Iterator[Release]:
        return iter(self.releases)

    def resolve(self, token: str | int) -> Release:
        """Map a 1-based ordinal to the release listed at that position.

        Args:
            token: User input, parsed as an integer

        Returns:
            The release captured at listing time

        Raises:
            SelectionParseError: If token isn't an integer
            SelectionRangeError: If the ordinal is outside [1, len(listing)]
        """
        try:
            ordinal = int(str(token).strip())
        except ValueError:
            raise SelectionParseError(
                f"Invalid selection '{token}'",
                details="Enter the number shown next to a release",
            ) from None

        if not 1 <= ordinal <= len(self.releases):
            raise SelectionRangeError(
                f"Selection {ordinal} is out of range",
                details=f"Choose a number between 1 and {len(self.releases)}"
                if self.releases
                else "No releases are deployed",
            )
        return self.releases[ordinal - 1]


class ReleaseIndexer:
    """Lists the releases deployed in a chart's namespace."""

    def __init__(
        self,
        commands: ShellCommands,
        console: CLIConsole,
        descriptor: ChartDescriptor,
        constants: DeploymentConstants | None = None,
    ) -> None:
        """Initialize the release indexer.

        Args:
            commands: Shell command executor
            console: CLI console for output
            descriptor: Active chart descriptor (namespace, templates)
            constants: Optional deployment constants
        """
        self.commands = commands
        self.console = console
        self.descriptor = descriptor
        self.constants = constants or DeploymentConstants()

    def chart_names(self) -> dict[str, Archetype]:
        """Map each template's Chart.yaml name to its archetype.

        Templates without a readable Chart.yaml are left out.
        """
        names: dict[str, Archetype] = {}
        for archetype in Archetype:
            chart_file = (
                Path(self.descriptor.template_for(archetype))
                / self.constants.CHART_FILE
            )
            try:
                with open(chart_file, encoding="utf-8") as f:
                    chart = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.debug(f"Skipping {chart_file}: {e}")
                continue
            if isinstance(chart, dict) and chart.get("name"):
                names[str(chart["name"])] = archetype
        return names

    def archetype_of(
        self, chart: str, chart_names: dict[str, Archetype] | None = None
    ) -> Archetype | None:
        """Find the archetype of a Helm "chart" field like "game-api-0.1.0"."""
        chart_names = self.chart_names() if chart_names is None else chart_names
        matches = [name for name in chart_names if chart.startswith(f"{name}-")]
        if not matches:
            return None
        return chart_names[max(matches, key=len)]

    def fetch_releases(self) -> ReleaseListing:
        """Query the cluster for deployed releases, in Helm's order.

        Raises:
            ClusterError: If Helm can't list releases
        """
        namespace = self.descriptor.namespace
        with self.console.status(f"Listing releases in {namespace}..."):
            result, helm_releases = self.commands.helm.list_releases(namespace)
        if not result.success:
            raise ClusterError(
                f"Failed to list releases in namespace '{namespace}'",
                details=result.output or None,
            )

        chart_names = self.chart_names()
        releases = []
        for item in helm_releases:
            values_result, values = self.commands.helm.get_values(
                item.name, namespace
            )
            if not values_result.success:
                logger.debug(f"No stored values for {item.name}: {values_result.output}")
            image = values.get("image") or {}
            releases.append(
                Release(
                    name=item.name,
                    version=str(image.get("tag", "")),
                    namespace=item.namespace or namespace,
                    archetype=self.archetype_of(item.chart, chart_names),
                    status=item.status,
                    revision=item.revision,
                    chart=item.chart,
                )
            )
        logger.info(f"Found {len(releases)} release(s) in {namespace}")
        return ReleaseListing(tuple(releases))

    def find_release(self, name: str) -> Release:
        """Look up a deployed release by name.

        Raises:
            ReleaseNotFoundError: If no release has that name
            ClusterError: If Helm can't list releases
        """
        for release in self.fetch_releases():
            if release.name == name:
                return release
        raise ReleaseNotFoundError(name, self.descriptor.namespace)

    def print_listing(self, listing: ReleaseListing) -> None:
        """Print a listing with the ordinals used for selection."""
        if not listing:
            self.console.warn(
                f"No releases found in namespace '{self.descriptor.namespace}'"
            )
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Name")
        table.add_column("Version")
        table.add_column("Type")
        table.add_column("Status")
        table.add_column("Revision", justify="right")

        for ordinal, release in enumerate(listing, 1):
            status = release.status
            if status == "deployed":
                status = f"[green]{status}[/green]"
            elif status == "failed":
                status = f"[red]{status}[/red]"
            table.add_row(
                str(ordinal),
                release.name,
                release.version,
                release.archetype.label if release.archetype else "-",
                status,
                release.revision,
            )
        self.console.print(table)

    def list_releases(self) -> ReleaseListing:
        """Fetch and print the releases, returning the numbered listing."""
        listing = self.fetch_releases()
        self.print_listing(listing)
        return listing
