"""
Repository for item definitions and inventory entries.

Item definitions are the shared catalog; inventory entries are per-character
snapshots. Bound to the caller's session; never commits.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ...exceptions import DatabaseError
from ...models.item import InventoryEntry, ItemDefinition
from ...structured_logging.enhanced_logging_config import get_logger
from ...utils.error_logging import create_error_context, log_and_raise

logger = get_logger(__name__)

EDITABLE_FIELDS = frozenset({"name", "health", "power", "description"})


class ItemRepository:
    """Data access helpers for the item catalog and inventories."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_definition(self, item_id: int) -> ItemDefinition | None:
        """
        Get a catalog item by id.

        Raises:
            DatabaseError: If the lookup fails
        """
        context = create_error_context()
        context.metadata["operation"] = "get_item_definition"
        context.metadata["item_id"] = item_id
        try:
            return await self._session.get(ItemDefinition, item_id)
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Database error retrieving item {item_id}: {e}",
                context=context,
                details={"item_id": item_id, "error": str(e)},
                operation="get_item_definition",
                table="item_definitions",
            )

    async def entry_name_exists(self, character_id: int, name: str) -> bool:
        result = await self._session.execute(
            select(InventoryEntry.inventory_id).where(
                InventoryEntry.character_id == character_id, InventoryEntry.name == name
            )
        )
        return result.first() is not None

    async def add_definition(
        self, name: str, health: int, power: int, price: int, description: str | None
    ) -> ItemDefinition:
        """Stage a catalog item and flush it so ``item_id`` is assigned."""
        item = ItemDefinition(name=name, health=health, power=power, price=price, description=description)
        self._session.add(item)
        await self._session.flush()
        return item

    async def add_entry(self, item: ItemDefinition, character_id: int) -> InventoryEntry:
        """
        Stage an inventory entry snapshotting ``item`` and flush it.

        Constraint violations surface here as ``IntegrityError``.
        """
        entry = InventoryEntry.snapshot_of(item, character_id)
        self._session.add(entry)
        await self._session.flush()
        return entry

    async def update_definition(self, item: ItemDefinition, changes: dict[str, Any]) -> ItemDefinition:
        """
        Apply ``changes`` to a catalog item. Keys outside the editable set are ignored.

        Inventory snapshots are separate rows and are not touched.
        """
        for key, value in changes.items():
            if key in EDITABLE_FIELDS:
                setattr(item, key, value)
        await self._session.flush()
        return item

    async def list_entries(self, character_id: int) -> list[InventoryEntry]:
        """Inventory entries for a character, oldest first, with definitions loaded."""
        result = await self._session.execute(
            select(InventoryEntry)
            .options(selectinload(InventoryEntry.item))
            .where(InventoryEntry.character_id == character_id)
            .order_by(InventoryEntry.inventory_id)
        )
        return list(result.scalars().all())
