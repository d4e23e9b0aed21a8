"""
Inventory mutation protocol.

Adding an item creates the catalog definition and the character's
snapshot entry in one transaction; if anything fails after the definition
is staged, neither row survives. Editing a definition never touches the
snapshots already taken from it.
"""

from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import transaction
from ..error_types import ErrorMessages, ErrorReason
from ..exceptions import ConflictError, DatabaseError, ErrorContext, ResourceNotFoundError, ValidationError
from ..models.account import Account
from ..models.character import Character
from ..models.item import InventoryEntry, ItemDefinition
from ..persistence.repositories.character_repository import CharacterRepository
from ..persistence.repositories.item_repository import EDITABLE_FIELDS, ItemRepository
from ..schemas.item import ItemCreate, ItemUpdate
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.error_logging import create_error_context, log_and_raise

logger = get_logger(__name__)


@dataclass(frozen=True)
class AcquiredItem:
    """A newly created catalog item and the entry that put it in an inventory."""

    item: ItemDefinition
    entry: InventoryEntry


def collect_item_changes(update: ItemUpdate) -> dict[str, Any]:
    """
    Fields of ``update`` that should be applied.

    Omitted and null fields are dropped; zero and empty values are kept.
    ``price`` is never included.
    """
    return update.model_dump(exclude_unset=True, exclude_none=True, include=set(EDITABLE_FIELDS))


class InventoryService:
    """Catalog and inventory operations for one request's session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._characters = CharacterRepository(session)
        self._items = ItemRepository(session)

    async def _resolve_character(
        self, owner: Account, character_id: int | None, context: ErrorContext
    ) -> Character:
        if character_id is None:
            character = await self._characters.first_for_owner(owner.id)
            if character is None:
                log_and_raise(
                    ResourceNotFoundError,
                    f"Account {owner.id} has no character to receive items",
                    context=context,
                    user_friendly=ErrorMessages.NO_CHARACTER,
                    reason=ErrorReason.NO_CHARACTER,
                    resource_type="character",
                )
            return character

        character = await self._characters.get_by_id(character_id)
        if character is None or not character.is_owned_by(owner.id):
            log_and_raise(
                ResourceNotFoundError,
                f"Character {character_id} not found or not owned by {owner.id}",
                context=context,
                user_friendly=ErrorMessages.CHARACTER_NOT_FOUND_OR_FORBIDDEN,
                reason=ErrorReason.NOT_FOUND_OR_FORBIDDEN,
                resource_type="character",
                resource_id=str(character_id),
            )
        return character

    async def add_item(self, owner: Account, payload: ItemCreate, context: ErrorContext | None = None) -> AcquiredItem:
        """
        Create a catalog item and place a snapshot of it in a character's inventory.

        Raises:
            ValidationError: If the item name is blank
            ResourceNotFoundError: NO_CHARACTER or NOT_FOUND_OR_FORBIDDEN
            ConflictError: If the character already holds an item with that name (DUPLICATE_ITEM)
        """
        context = context or create_error_context()
        context.metadata["operation"] = "add_item"

        name = payload.name.strip()
        if not name:
            raise ValidationError(
                "Item name missing",
                context=context,
                field="name",
                reason=ErrorReason.MISSING_NAME,
                user_friendly=ErrorMessages.INVALID_INPUT,
            )

        character = await self._resolve_character(owner, payload.character_id, context)
        character_id = character.character_id

        if await self._items.entry_name_exists(character_id, name):
            log_and_raise(
                ConflictError,
                f"Character {character_id} already holds {name}",
                context=context,
                user_friendly=ErrorMessages.DUPLICATE_ITEM,
                reason=ErrorReason.DUPLICATE_ITEM,
                resource_type="inventory_entry",
            )

        try:
            async with transaction(self._session):
                item = await self._items.add_definition(
                    name, payload.health, payload.power, payload.price, payload.description
                )
                entry = await self._items.add_entry(item, character_id)
        except IntegrityError as e:
            log_and_raise(
                ConflictError,
                f"Item {name} added to character {character_id} concurrently",
                context=context,
                details={"error": str(e.orig)},
                user_friendly=ErrorMessages.DUPLICATE_ITEM,
                reason=ErrorReason.DUPLICATE_ITEM,
                resource_type="inventory_entry",
            )
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Failed to add item {name}: {e}",
                context=context,
                operation="add_item",
                table="item_definitions",
            )

        logger.info(
            "Item added to inventory",
            item_id=item.item_id,
            inventory_id=entry.inventory_id,
            character_id=character_id,
        )
        return AcquiredItem(item=item, entry=entry)

    async def get_item(self, item_id: int, context: ErrorContext | None = None) -> ItemDefinition:
        """
        Raises:
            ResourceNotFoundError: If the id does not resolve
        """
        item = await self._items.get_definition(item_id)
        if item is None:
            log_and_raise(
                ResourceNotFoundError,
                f"Item not found: {item_id}",
                context=context,
                user_friendly=ErrorMessages.ITEM_NOT_FOUND,
                resource_type="item",
                resource_id=str(item_id),
            )
        return item

    async def update_item(self, item_id: int, update: ItemUpdate, context: ErrorContext | None = None) -> ItemDefinition:
        """
        Apply a partial update to a catalog item.

        Raises:
            ValidationError: If no editable field is supplied, or the new name is blank
            ResourceNotFoundError: If the id does not resolve
        """
        context = context or create_error_context()
        context.metadata["operation"] = "update_item"

        changes = collect_item_changes(update)
        if not changes:
            raise ValidationError(
                "Item update carries no editable fields",
                context=context,
                reason=ErrorReason.NOTHING_TO_UPDATE,
                user_friendly=ErrorMessages.NOTHING_TO_UPDATE,
            )
        if "name" in changes:
            changes["name"] = changes["name"].strip()
            if not changes["name"]:
                raise ValidationError(
                    "Item name missing",
                    context=context,
                    field="name",
                    reason=ErrorReason.MISSING_NAME,
                    user_friendly=ErrorMessages.INVALID_INPUT,
                )

        item = await self.get_item(item_id, context)
        try:
            async with transaction(self._session):
                await self._items.update_definition(item, changes)
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Failed to update item {item_id}: {e}",
                context=context,
                operation="update_item",
                table="item_definitions",
            )

        logger.info("Item definition updated", item_id=item_id, fields=sorted(changes))
        return item

    async def list_inventory(self, character_id: int, context: ErrorContext | None = None) -> list[InventoryEntry]:
        """
        Inventory of a character with the linked definitions loaded.

        An existing character with no items yields an empty list.

        Raises:
            ResourceNotFoundError: If the character does not exist
        """
        if await self._characters.get_by_id(character_id) is None:
            log_and_raise(
                ResourceNotFoundError,
                f"Character not found: {character_id}",
                context=context,
                user_friendly=ErrorMessages.CHARACTER_NOT_FOUND,
                resource_type="character",
                resource_id=str(character_id),
            )
        return await self._items.list_entries(character_id)
