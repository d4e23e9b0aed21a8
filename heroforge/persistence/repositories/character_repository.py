"""
Character repository for async persistence operations.

Handles character lookups, creation and the two-step removal of a
character with its inventory. Bound to the caller's session; never commits.
"""

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...exceptions import DatabaseError
from ...models.character import Character
from ...models.item import InventoryEntry
from ...structured_logging.enhanced_logging_config import get_logger
from ...utils.error_logging import create_error_context, log_and_raise

logger = get_logger(__name__)


class CharacterRepository:
    """Repository for character persistence operations."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_name(self, name: str) -> Character | None:
        """
        Get a character by exact name.

        Raises:
            DatabaseError: If the lookup fails
        """
        context = create_error_context()
        context.metadata["operation"] = "get_character_by_name"
        context.metadata["character_name"] = name
        try:
            result = await self._session.execute(select(Character).where(Character.name == name))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Database error retrieving character '{name}': {e}",
                context=context,
                details={"character_name": name, "error": str(e)},
                operation="get_character_by_name",
                table="characters",
            )

    async def get_by_id(self, character_id: int) -> Character | None:
        return await self._session.get(Character, character_id)

    async def get_owned_by_name(self, name: str, owner_id: str) -> Character | None:
        """Character with this name owned by ``owner_id``, or None for any mismatch."""
        result = await self._session.execute(
            select(Character).where(Character.name == name, Character.owner_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def list_for_owner(self, owner_id: str) -> list[Character]:
        """The owner's characters, oldest first."""
        result = await self._session.execute(
            select(Character).where(Character.owner_id == owner_id).order_by(Character.character_id)
        )
        return list(result.scalars().all())

    async def first_for_owner(self, owner_id: str) -> Character | None:
        """The owner's earliest-created character."""
        result = await self._session.execute(
            select(Character).where(Character.owner_id == owner_id).order_by(Character.character_id).limit(1)
        )
        return result.scalar_one_or_none()

    async def add(self, owner_id: str, name: str) -> Character:
        """
        Stage a new character with starting stats and flush it.

        Constraint violations surface here as ``IntegrityError``.
        """
        character = Character(owner_id=owner_id, name=name)
        self._session.add(character)
        await self._session.flush()
        logger.debug("Character staged", character_id=character.character_id, owner_id=owner_id)
        return character

    async def delete_with_inventory(self, character: Character) -> int:
        """
        Delete a character's inventory entries and then the character.

        Returns:
            int: Number of inventory entries removed
        """
        result = await self._session.execute(
            delete(InventoryEntry).where(InventoryEntry.character_id == character.character_id)
        )
        await self._session.delete(character)
        await self._session.flush()
        return result.rowcount or 0
