"""Pydantic bases for manifest descriptors and subject configuration."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Model(BaseModel):
    """Immutable model for values parsed out of test manifests."""

    model_config = ConfigDict(frozen=True)


class ConfigModel(Model):
    """Immutable model read from camelCase JSON configuration files."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
