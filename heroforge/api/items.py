"""
Item catalog and inventory API endpoints.

All routes require a valid session. Any signed-in account may edit a
catalog item or list any character's inventory.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.access_guard import get_current_account
from ..database import get_async_session
from ..models.account import Account
from ..models.item import InventoryEntry, ItemDefinition
from ..schemas.base import INT32_MAX
from ..schemas.item import (
    InventoryEntryRead,
    InventoryItem,
    ItemCreate,
    ItemCreateResponse,
    ItemRead,
    ItemStats,
    ItemUpdate,
    ItemUpdateResponse,
)
from ..services.inventory_service import InventoryService
from ..utils.error_logging import create_context_from_request

item_router = APIRouter(prefix="/items", tags=["items"])
inventory_router = APIRouter(prefix="/inventory", tags=["inventory"])


def _item_read(item: ItemDefinition) -> ItemRead:
    return ItemRead(
        item_id=item.item_id,
        name=item.name,
        health=item.health,
        power=item.power,
        price=item.price,
        description=item.description,
    )


def _entry_read(entry: InventoryEntry) -> InventoryEntryRead:
    item = entry.item
    return InventoryEntryRead(
        inventory_id=entry.inventory_id,
        item=InventoryItem(
            id=item.item_id,
            name=item.name,
            stats=ItemStats(health=item.health, power=item.power),
            price=item.price,
        ),
    )


@item_router.post("", response_model=ItemCreateResponse, status_code=status.HTTP_201_CREATED)
async def add_item(
    payload: ItemCreate,
    request: Request,
    current_account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_async_session),
) -> ItemCreateResponse:
    """Create a catalog item and add it to one of the caller's characters."""
    acquired = await InventoryService(session).add_item(
        current_account, payload, context=create_context_from_request(request)
    )
    return ItemCreateResponse(
        message="item added",
        item=_item_read(acquired.item),
        inventory_id=acquired.entry.inventory_id,
        character_id=acquired.entry.character_id,
    )


@item_router.put("/{item_id}", response_model=ItemUpdateResponse)
async def update_item(
    item_id: Annotated[int, Path(ge=1, le=INT32_MAX)],
    payload: ItemUpdate,
    request: Request,
    _current_account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_async_session),
) -> ItemUpdateResponse:
    """Partially update a catalog item. Price is never changed."""
    item = await InventoryService(session).update_item(item_id, payload, context=create_context_from_request(request))
    return ItemUpdateResponse(message="item updated", item=_item_read(item))


@item_router.get("/{item_id}", response_model=ItemRead)
async def get_item(
    item_id: Annotated[int, Path(ge=1, le=INT32_MAX)],
    request: Request,
    _current_account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_async_session),
) -> ItemRead:
    item = await InventoryService(session).get_item(item_id, context=create_context_from_request(request))
    return _item_read(item)


@inventory_router.get("/{character_id}", response_model=list[InventoryEntryRead])
async def list_inventory(
    character_id: Annotated[int, Path(ge=1, le=INT32_MAX)],
    request: Request,
    _current_account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_async_session),
) -> list[InventoryEntryRead]:
    """A character's inventory with the linked catalog items."""
    entries = await InventoryService(session).list_inventory(
        character_id, context=create_context_from_request(request)
    )
    return [_entry_read(entry) for entry in entries]
