"""Shared pydantic base for request and response bodies."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Limits matching the column types in heroforge.models
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
NAME_MAX_LENGTH = 64
ITEM_NAME_MAX_LENGTH = 120


class CamelModel(BaseModel):
    """Bodies use camelCase keys on the wire and snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(CamelModel):
    """Plain acknowledgement."""

    message: str
