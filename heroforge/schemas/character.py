"""Pydantic schemas for characters."""

from pydantic import Field

from .base import NAME_MAX_LENGTH, CamelModel


class CharacterCreate(CamelModel):
    """Body of ``POST /api/characters``."""

    name: str = Field(default="", max_length=NAME_MAX_LENGTH, description="Character name, unique across all accounts")


class CharacterRead(CamelModel):
    """
    Character as returned to clients.

    ``money`` is None unless the caller owns the character; routes drop
    None fields from the response.
    """

    character_id: int
    name: str
    level: int
    health: int
    power: int
    money: int | None = None


class CharacterCreateResponse(CamelModel):
    message: str
    character: CharacterRead
