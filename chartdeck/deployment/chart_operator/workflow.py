"""Chart actions: output, apply, update and delete.

ChartWorkflow ties the release-management components together for one
command invocation. Each action runs its checks first (arguments, config
bundle, chart template), then the optional image pipeline, then exactly one
cluster transition.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from .config_bundle import ConfigBundle, load_config_bundle
from .constants import Archetype, DeploymentConstants
from .errors import InputValidationError, SelectionError
from .image_builder import ImageBuilder, image_tag
from .naming import generate_release_name
from .release_index import Release, ReleaseIndexer, ReleaseListing
from .release_manager import ReleaseManager
from .schemas import ApiValues, BaseValues, GameHostValues
from .values import ValuesRenderer

if TYPE_CHECKING:
    from chartdeck.cli.shared.console import CLIConsole
    from chartdeck.config.settings import ChartDescriptor

    from ..shell_commands import ShellCommands


def parse_archetype(value: str) -> Archetype:
    """Parse an archetype literal ("api" or "host").

    Raises:
        InputValidationError: For any other value
    """
    try:
        return Archetype(value)
    except ValueError:
        raise InputValidationError(
            f"Unknown release type '{value}'",
            details="Expected one of: " + ", ".join(a.value for a in Archetype),
        ) from None


def _apply_common(
    values: BaseValues,
    descriptor: ChartDescriptor,
    name: str,
    bundle: ConfigBundle,
    constants: DeploymentConstants,
) -> None:
    values.image.repository = descriptor.repository
    values.body.namespace = descriptor.namespace
    values.body.name = name
    values.config.data.appsettings = bundle.appsettings
    values.config.data.log4net_config = bundle.log4net_config
    values.config.config_map_name = f"{name}{constants.CONFIG_MAP_SUFFIX}"
    values.config.config_name = constants.CONFIG_NAME
    for mount in values.volume_mounts:
        mount.name = values.config.config_name


def api_mutation(
    descriptor: ChartDescriptor,
    name: str,
    bundle: ConfigBundle,
    ingress_path: str,
    count: int,
    constants: DeploymentConstants | None = None,
) -> Callable[[ApiValues], None]:
    """Build the patch applied to the api chart's default values."""
    constants = constants or DeploymentConstants()

    def mutate(values: ApiValues) -> None:
        _apply_common(values, descriptor, name, bundle, constants)
        values.count = count
        for host in values.ingress.hosts:
            host.path = ingress_path

    return mutate


def host_mutation(
    descriptor: ChartDescriptor,
    name: str,
    bundle: ConfigBundle,
    constants: DeploymentConstants | None = None,
) -> Callable[[GameHostValues], None]:
    """Build the patch applied to the game-host chart's default values."""
    constants = constants or DeploymentConstants()

    def mutate(values: GameHostValues) -> None:
        _apply_common(values, descriptor, name, bundle, constants)

    return mutate


class ChartWorkflow:
    """Runs chart actions for the active chart descriptor.

    Attributes:
        descriptor: Active chart family
        indexer: Lists releases for interactive selection
        releases: Installs, updates, exports and removes releases
        image_builder: Build/login/push pipeline
    """

    def __init__(
        self,
        console: CLIConsole,
        descriptor: ChartDescriptor,
        commands: ShellCommands,
        *,
        working_dir: Path | None = None,
        constants: DeploymentConstants | None = None,
    ) -> None:
        """Initialize the workflow.

        Args:
            console: CLI console for output and prompts
            descriptor: Active chart descriptor
            commands: Shell command executor
            working_dir: Base for relative --build paths (default: cwd)
            constants: Optional deployment constants
        """
        self.console = console
        self.descriptor = descriptor
        self.commands = commands
        self.working_dir = working_dir or Path.cwd()
        self.constants = constants or DeploymentConstants()

        self.indexer = ReleaseIndexer(commands, console, descriptor, self.constants)
        self.releases = ReleaseManager(
            commands, console, descriptor, self.indexer, self.constants
        )
        self.image_builder = ImageBuilder(commands, console)

    # =========================================================================
    # Helpers
    # =========================================================================

    def select_release(self) -> tuple[ReleaseListing, str]:
        """List releases and read the user's choice.

        Returns:
            The listing and the raw token, resolved later by the caller

        Raises:
            SelectionError: If nothing is deployed or no input was given
        """
        listing = self.indexer.list_releases()
        if not listing:
            raise SelectionError(
                f"No releases to select in namespace '{self.descriptor.namespace}'"
            )
        try:
            token = self.console.input("Select: ")
        except EOFError:
            raise SelectionError("No selection entered") from None
        return listing, token

    def _resolve_dockerfile(self, dockerfile: str | Path | None) -> Path | None:
        if not dockerfile:
            return None
        path = Path(dockerfile).expanduser()
        return path if path.is_absolute() else self.working_dir / path

    def _build(self, dockerfile: Path | None, version: str) -> None:
        """Build and push <repository>:<version> when a Dockerfile was given."""
        if dockerfile is None:
            logger.debug("No build source given, skipping image build")
            return
        self.image_builder.build_and_push(
            dockerfile,
            image_tag(self.descriptor.repository, version),
            self.descriptor.region,
        )

    def _load_bundle(self, config_dir: str | Path | None) -> ConfigBundle:
        if not config_dir:
            raise InputValidationError(
                "Choose a config path",
                details="Pass --config <dir> containing "
                f"{self.constants.APPSETTINGS_FILE} and {self.constants.LOG_CONFIG_FILE}",
            )
        return load_config_bundle(Path(config_dir), self.constants)

    def _preflight(self, archetype: Archetype) -> None:
        """Fail on an unreadable or mismatched template before side effects."""
        schema = ApiValues if archetype is Archetype.API else GameHostValues
        ValuesRenderer(schema, self.constants).render(
            self.descriptor.template_for(archetype)
        )

    def _install(
        self,
        archetype: Archetype,
        name: str,
        version: str,
        bundle: ConfigBundle,
        ingress_path: str | None,
        count: int,
    ) -> Release:
        template = self.descriptor.template_for(archetype)
        if archetype is Archetype.API:
            return self.releases.install(
                ValuesRenderer(ApiValues, self.constants),
                template,
                name,
                version,
                api_mutation(
                    self.descriptor,
                    name,
                    bundle,
                    ingress_path or f"/{version}",
                    count,
                    self.constants,
                ),
                archetype=archetype,
            )
        return self.releases.install(
            ValuesRenderer(GameHostValues, self.constants),
            template,
            name,
            version,
            host_mutation(self.descriptor, name, bundle, self.constants),
            archetype=archetype,
        )

    @staticmethod
    def _check_count(count: int) -> None:
        if count < 1:
            raise InputValidationError(
                f"Invalid instance count {count}", details="--count must be at least 1"
            )

    # =========================================================================
    # Actions
    # =========================================================================

    def output(self, path: str | Path = ".", name: str | None = None) -> Path:
        """Write a release's manifests to path, selecting it if no name is given."""
        if name:
            return self.releases.output_chart_by_name(name, Path(path))
        listing, token = self.select_release()
        return self.releases.output_chart_by_index(listing, token, Path(path))

    def apply(
        self,
        archetype: str,
        version: str,
        *,
        name: str | None = None,
        config_dir: str | Path | None = None,
        ingress_path: str | None = None,
        count: int = 1,
        dockerfile: str | Path | None = None,
    ) -> Release:
        """Install or upgrade a release of an archetype at a version.

        The release name defaults to <chart>-<archetype><version without dots>,
        so applying the same version again upgrades the same release.
        """
        kind = parse_archetype(archetype)
        self._check_count(count)
        bundle = self._load_bundle(config_dir)
        self._preflight(kind)

        release_name = name or generate_release_name(
            self.descriptor.name, kind, version
        )
        logger.info(f"Applying {kind.label} release {release_name} at {version}")

        self._build(self._resolve_dockerfile(dockerfile), version)
        return self._install(kind, release_name, version, bundle, ingress_path, count)

    def update(
        self,
        version: str,
        *,
        name: str | None = None,
        dockerfile: str | Path | None = None,
        reinstall: str | None = None,
        config_dir: str | Path | None = None,
        ingress_path: str | None = None,
        count: int = 1,
    ) -> Release:
        """Move a release to a new version.

        Without reinstall the release's stored values are re-applied with the
        new image tag. With reinstall ("api" or "host") the selected release
        is removed and a fresh release of that archetype is installed under
        its implicit name for the new version.
        """
        kind = parse_archetype(reinstall) if reinstall else None
        bundle: ConfigBundle | None = None
        if kind is not None:
            self._check_count(count)
            bundle = self._load_bundle(config_dir)
            self._preflight(kind)

        selected: Release | None = None
        if not name:
            # Resolve now so a bad choice fails before the image pipeline
            listing, token = self.select_release()
            selected = listing.resolve(token)

        self._build(self._resolve_dockerfile(dockerfile), version)

        if kind is None or bundle is None:
            if selected is not None:
                return self.releases.update_version(selected, version)
            return self.releases.update_version_by_name(str(name), version)

        self.releases.uninstall_by_name(selected.name if selected else str(name))
        new_name = generate_release_name(self.descriptor.name, kind, version)
        return self._install(kind, new_name, version, bundle, ingress_path, count)

    def delete(self, name: str | None = None) -> None:
        """Remove a release, selecting it if no name is given."""
        if name:
            self.releases.uninstall_by_name(name)
            return
        listing, token = self.select_release()
        self.releases.uninstall_by_index(listing, token)
