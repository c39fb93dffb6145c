"""Release management for the api and game-host charts.

Each concern lives in its own module:

- naming: Implicit release names
- config_bundle: Settings and logging artifacts from a config directory
- image_builder: Docker build, registry login and push
- schemas / values: Typed values documents and their rendering
- release_index: Release listing and ordinal selection
- release_manager: Install, update, output and uninstall
- workflow: The output/apply/update/delete actions

Usage:
    from chartdeck.deployment.chart_operator import ChartWorkflow

    workflow = ChartWorkflow(console, settings.current(), commands)
    workflow.apply("api", "1.2.0", config_dir="./cfg")
"""

from .config_bundle import ConfigBundle, load_config_bundle
from .constants import Archetype, DeploymentConstants
from .errors import (
    ChartDeckError,
    ClusterError,
    ConfigBundleError,
    ConfigurationError,
    ImageBuildError,
    InputValidationError,
    MissingArtifactError,
    ReleaseNotFoundError,
    SchemaMismatchError,
    SelectionError,
    SelectionParseError,
    SelectionRangeError,
    TemplateError,
)
from .image_builder import ImageBuilder
from .naming import generate_release_name
from .release_index import Release, ReleaseIndexer, ReleaseListing
from .release_manager import ReleaseManager
from .schemas import ApiValues, GameHostValues
from .values import ValuesRenderer
from .workflow import ChartWorkflow

__all__ = [
    "ChartWorkflow",
    "Archetype",
    "DeploymentConstants",
    "generate_release_name",
    "ConfigBundle",
    "load_config_bundle",
    "ImageBuilder",
    "ValuesRenderer",
    "ApiValues",
    "GameHostValues",
    "Release",
    "ReleaseListing",
    "ReleaseIndexer",
    "ReleaseManager",
    # Errors
    "ChartDeckError",
    "InputValidationError",
    "ConfigurationError",
    "ConfigBundleError",
    "MissingArtifactError",
    "TemplateError",
    "SchemaMismatchError",
    "ImageBuildError",
    "ClusterError",
    "ReleaseNotFoundError",
    "SelectionError",
    "SelectionParseError",
    "SelectionRangeError",
]
