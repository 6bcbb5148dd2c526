"""Reusable, strict base models shared by the codec and the RPC layer."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    A base model that reads and writes field names in camel case.

    Substrate RPC responses use camel case keys, e.g. `thresholdWeight`.
    The Python side keeps snake case (`threshold_weight`) and the alias
    generator maps between the two.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        arbitrary_types_allowed=True,
    )


class StrictBaseModel(CamelModel):
    """A strict, immutable pydantic base model."""

    model_config = CamelModel.model_config | {
        "extra": "forbid",
        "frozen": True,
        "strict": True,
    }
