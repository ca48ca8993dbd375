"""Shared Pydantic base models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel, to_pascal


class StrictBaseModel(BaseModel):
    """Base model with strict, immutable defaults."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class DumpModel(BaseModel):
    """Base model for records read from upstream dump files.

    Dump records use camelCase keys and carry many fields this project
    never reads, so unknown keys are ignored rather than rejected.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class JournalModel(BaseModel):
    """Base model for game journal events.

    Journal keys are PascalCase and every event carries fields beyond
    the ones read here.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_pascal,
        populate_by_name=True,
    )
