"""
Pydantic schemas for catalog items and inventories.

``ItemUpdate`` fields are all optional: a field left out or sent as null
keeps its stored value, while a zero stat is a real update. ``price`` is
accepted for compatibility but never applied. Stats, prices and ids are
bounded to the 32-bit integer columns they are stored in.
"""

from pydantic import Field

from .base import INT32_MAX, INT32_MIN, ITEM_NAME_MAX_LENGTH, CamelModel


class ItemCreate(CamelModel):
    """Body of ``POST /api/items``."""

    name: str = Field(default="", max_length=ITEM_NAME_MAX_LENGTH, description="Item name")
    health: int = Field(default=0, ge=INT32_MIN, le=INT32_MAX, description="Health bonus")
    power: int = Field(default=0, ge=INT32_MIN, le=INT32_MAX, description="Power bonus")
    price: int = Field(default=0, ge=0, le=INT32_MAX, description="Price, fixed once created")
    description: str | None = Field(default=None, description="Free text description")
    character_id: int | None = Field(
        default=None, ge=1, le=INT32_MAX, description="Receiving character; defaults to the caller's first"
    )


class ItemUpdate(CamelModel):
    """Body of ``PUT /api/items/{item_id}``."""

    name: str | None = Field(default=None, max_length=ITEM_NAME_MAX_LENGTH)
    health: int | None = Field(default=None, ge=INT32_MIN, le=INT32_MAX)
    power: int | None = Field(default=None, ge=INT32_MIN, le=INT32_MAX)
    description: str | None = None
    price: int | None = Field(default=None, description="Ignored, prices are immutable")


class ItemRead(CamelModel):
    item_id: int
    name: str
    health: int
    power: int
    price: int
    description: str | None = None


class ItemCreateResponse(CamelModel):
    message: str
    item: ItemRead
    inventory_id: int
    character_id: int


class ItemUpdateResponse(CamelModel):
    message: str
    item: ItemRead


class ItemStats(CamelModel):
    health: int
    power: int


class InventoryItem(CamelModel):
    """The linked catalog item as shown inside an inventory listing."""

    id: int
    name: str
    stats: ItemStats
    price: int


class InventoryEntryRead(CamelModel):
    inventory_id: int
    item: InventoryItem
