"""Values rendering for chart templates.

This module loads a chart's default values.yaml into a typed schema and
lets the caller patch it in place before the document is submitted:

    renderer = ValuesRenderer(ApiValues)
    values = renderer.apply(chart_dir, lambda v: setattr(v.body, "name", "x"))
    renderer.write(values, Path("values.yaml"))

One rendering algorithm serves both archetypes; only the schema type and
the mutation differ.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, Generic, TypeVar

import yaml  # type: ignore[import-untyped]
from loguru import logger
from pydantic import ValidationError

from .constants import DeploymentConstants
from .errors import SchemaMismatchError, TemplateError
from .schemas import BaseValues

T = TypeVar("T", bound=BaseValues)

Mutation = Callable[[T], None]


class ValuesRenderer(Generic[T]):
    """Renders the values document of one chart archetype.

    Attributes:
        schema: Values model the chart defaults are validated into
        constants: Deployment constants (values file name)
    """

    def __init__(
        self,
        schema: type[T],
        constants: DeploymentConstants | None = None,
    ) -> None:
        self.schema = schema
        self.constants = constants or DeploymentConstants()

    def values_path(self, template_path: Path) -> Path:
        """Locate the default values file of a chart template.

        A template may be given as the chart directory or as the values
        file itself.
        """
        template_path = Path(template_path)
        if template_path.is_dir():
            return template_path / self.constants.VALUES_FILE
        return template_path

    def render(self, template_path: Path) -> T:
        """Load the chart's default values document.

        Args:
            template_path: Chart directory (or its values.yaml)

        Returns:
            Fully-populated default document, including every repeated
            section the template defines

        Raises:
            TemplateError: If the values file can't be read or parsed
            SchemaMismatchError: If the defaults don't fit the schema
        """
        path = self.values_path(template_path)
        logger.debug(f"Rendering {self.schema.__name__} from {path}")

        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise TemplateError(
                f"Cannot read chart template: {path}",
                details=str(e),
            ) from e

        try:
            data: Any = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise TemplateError(f"Error parsing {path}", details=str(e)) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise SchemaMismatchError(
                f"{path} does not match {self.schema.__name__}",
                details="The chart's default values must be a YAML mapping",
            )

        try:
            return self.schema.model_validate(data)
        except ValidationError as e:
            raise SchemaMismatchError(
                f"{path} does not match {self.schema.__name__}",
                details=str(e),
            ) from e

    def apply(self, template_path: Path, mutate: Mutation[T]) -> T:
        """Render the defaults and apply the caller's mutation in place.

        The mutation owns every identity-bearing field (name, namespace,
        image repository, config blobs, config map name); nothing is
        defaulted here.
        """
        values = self.render(template_path)
        mutate(values)
        return values

    def to_dict(self, values: T) -> dict[str, Any]:
        """Serialize a document with the chart's camelCase keys."""
        return values.model_dump(by_alias=True, mode="json")

    def write(self, values: T, destination: Path) -> Path:
        """Write a document as a Helm values file.

        Args:
            values: Rendered document
            destination: File to write

        Returns:
            The destination path
        """
        with open(destination, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                self.to_dict(values), f, default_flow_style=False, sort_keys=False
            )
        logger.debug(f"Wrote values file {destination}")
        return destination
