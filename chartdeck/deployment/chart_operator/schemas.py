"""Values document schemas for the api and game-host charts.

Field names are snake_case in Python and camelCase in values.yaml. Keys a
chart template defines beyond these schemas are kept as extra fields and
written back unchanged.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ValuesModel(BaseModel):
    """Base model for every section of a values document."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        # Bare numeric tags (tag: 1.0) load as str
        coerce_numbers_to_str=True,
    )


class ImageValues(ValuesModel):
    repository: str = ""
    tag: str = ""


class BodyValues(ValuesModel):
    name: str = ""
    namespace: str = ""


class ConfigData(ValuesModel):
    """Configuration blobs mounted into the service container."""

    appsettings: str = ""
    # to_camel would give "log4NetConfig"
    log4net_config: str = Field("", alias="log4netConfig")


class ConfigValues(ValuesModel):
    data: ConfigData = Field(default_factory=ConfigData)
    config_map_name: str = ""
    config_name: str = ""


class VolumeMount(ValuesModel):
    name: str = ""
    mount_path: str = ""


class IngressHost(ValuesModel):
    host: str = ""
    path: str = "/"


class IngressValues(ValuesModel):
    hosts: list[IngressHost] = Field(default_factory=list)


class BaseValues(ValuesModel):
    """Shape shared by both archetypes."""

    image: ImageValues = Field(default_factory=ImageValues)
    body: BodyValues = Field(default_factory=BodyValues)
    config: ConfigValues = Field(default_factory=ConfigValues)
    volume_mounts: list[VolumeMount] = Field(default_factory=list)


class ApiValues(BaseValues):
    """Values for the api chart: adds ingress routing and an instance count."""

    count: int = 1
    ingress: IngressValues = Field(default_factory=IngressValues)


class GameHostValues(BaseValues):
    """Values for the game-host chart."""
