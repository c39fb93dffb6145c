"""Release naming."""

from __future__ import annotations

from .constants import Archetype


def generate_release_name(
    base_name: str, archetype: Archetype | str, version: str
) -> str:
    """Derive the implicit release name for a chart, archetype and version.

    Dots are dropped from the version so the same inputs always map to the
    same release, e.g. ("game", "api", "1.2.3") -> "game-api123".
    """
    kind = archetype.value if isinstance(archetype, Archetype) else archetype
    return f"{base_name}-{kind}{version.replace('.', '')}"
