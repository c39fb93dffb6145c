"""Configuration bundle discovery.

A configuration directory holds the application settings file and the
logging configuration somewhere in its tree. Both are read as opaque text
and embedded verbatim into the values document.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from .constants import DeploymentConstants
from .errors import ConfigBundleError, MissingArtifactError


@dataclass(frozen=True)
class ConfigBundle:
    """Raw contents of the two configuration artifacts."""

    appsettings: str
    log4net_config: str


def _find_artifacts(root: Path, names: set[str]) -> dict[str, Path]:
    """Walk root and return the shallowest path for each wanted file name.

    Raises:
        ConfigBundleError: If any directory in the tree can't be read
    """
    candidates: dict[str, list[Path]] = {name: [] for name in names}

    def on_error(error: OSError) -> None:
        raise ConfigBundleError(
            f"Cannot read config directory: {error.filename}",
            details=str(error),
        )

    for dirpath, _dirnames, filenames in os.walk(root, onerror=on_error):
        for filename in filenames:
            if filename in candidates:
                candidates[filename].append(Path(dirpath) / filename)

    return {
        name: min(paths, key=lambda p: (len(p.parts), str(p)))
        for name, paths in candidates.items()
        if paths
    }


def load_config_bundle(
    root: Path, constants: DeploymentConstants | None = None
) -> ConfigBundle:
    """Resolve and read the settings and logging artifacts under root.

    Args:
        root: Configuration directory to search recursively
        constants: Optional constants overriding the artifact names

    Returns:
        ConfigBundle with both file contents

    Raises:
        ConfigBundleError: If root isn't a readable directory or a file can't be read
        MissingArtifactError: If either artifact is absent from the tree
    """
    constants = constants or DeploymentConstants()
    root = Path(root)
    if not root.is_dir():
        raise ConfigBundleError(
            f"Config path is not a directory: {root}",
            details="Pass --config <dir> pointing at the folder that contains "
            f"{constants.APPSETTINGS_FILE} and {constants.LOG_CONFIG_FILE}",
        )

    wanted = {constants.APPSETTINGS_FILE, constants.LOG_CONFIG_FILE}
    found = _find_artifacts(root, wanted)

    for name in (constants.APPSETTINGS_FILE, constants.LOG_CONFIG_FILE):
        if name not in found:
            raise MissingArtifactError(name, str(root))

    contents: dict[str, str] = {}
    for name, path in found.items():
        logger.debug(f"Reading {name} from {path}")
        try:
            contents[name] = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigBundleError(f"Cannot read {path}", details=str(e)) from e

    return ConfigBundle(
        appsettings=contents[constants.APPSETTINGS_FILE],
        log4net_config=contents[constants.LOG_CONFIG_FILE],
    )
