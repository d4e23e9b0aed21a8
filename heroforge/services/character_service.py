"""
Character lifecycle: create, read, list and delete.

Deleting a character removes its inventory entries and the character in
one transaction, so no entry is ever left pointing at a missing character.
"""

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import transaction
from ..error_types import ErrorMessages, ErrorReason
from ..exceptions import ConflictError, DatabaseError, ErrorContext, ResourceNotFoundError, ValidationError
from ..models.account import Account
from ..models.character import Character
from ..persistence.repositories.character_repository import CharacterRepository
from ..schemas.character import CharacterRead
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.error_logging import create_error_context, log_and_raise

logger = get_logger(__name__)


def present_character(character: Character, viewer_id: str) -> CharacterRead:
    """Public view of a character; ``money`` only when ``viewer_id`` owns it."""
    return CharacterRead(
        character_id=character.character_id,
        name=character.name,
        level=character.level,
        health=character.health,
        power=character.power,
        money=character.money if character.is_owned_by(viewer_id) else None,
    )


class CharacterService:
    """Character operations for one request's session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._characters = CharacterRepository(session)

    async def create(self, owner: Account, name: str, context: ErrorContext | None = None) -> Character:
        """
        Create a character with starting stats.

        Raises:
            ValidationError: If the name is blank (MISSING_NAME)
            ConflictError: If the name is taken by any account (DUPLICATE_NAME)
        """
        context = context or create_error_context()
        context.metadata["operation"] = "create_character"

        name = name.strip()
        if not name:
            raise ValidationError(
                "Character name missing",
                context=context,
                field="name",
                reason=ErrorReason.MISSING_NAME,
                user_friendly=ErrorMessages.MISSING_CHARACTER_NAME,
            )

        if await self._characters.get_by_name(name) is not None:
            log_and_raise(
                ConflictError,
                f"Character name already in use: {name}",
                context=context,
                user_friendly=ErrorMessages.DUPLICATE_CHARACTER_NAME,
                reason=ErrorReason.DUPLICATE_NAME,
                resource_type="character",
            )

        try:
            async with transaction(self._session):
                character = await self._characters.add(owner.id, name)
        except IntegrityError as e:
            log_and_raise(
                ConflictError,
                f"Character name claimed concurrently: {name}",
                context=context,
                details={"error": str(e.orig)},
                user_friendly=ErrorMessages.DUPLICATE_CHARACTER_NAME,
                reason=ErrorReason.DUPLICATE_NAME,
                resource_type="character",
            )
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Failed to create character {name}: {e}",
                context=context,
                operation="create_character",
                table="characters",
            )

        logger.info("Character created", character_id=character.character_id, owner_id=owner.id)
        return character

    async def get_by_name(self, name: str, context: ErrorContext | None = None) -> Character:
        """
        Look a character up by name, regardless of owner.

        Surrounding whitespace is ignored, as on create.

        Raises:
            ResourceNotFoundError: If no character has that name
        """
        name = name.strip()
        character = await self._characters.get_by_name(name)
        if character is None:
            log_and_raise(
                ResourceNotFoundError,
                f"Character not found: {name}",
                context=context,
                user_friendly=ErrorMessages.CHARACTER_NOT_FOUND,
                resource_type="character",
                resource_id=name,
            )
        return character

    async def list_owned(self, owner: Account) -> list[Character]:
        return await self._characters.list_for_owner(owner.id)

    async def delete(self, owner: Account, name: str, context: ErrorContext | None = None) -> int:
        """
        Delete an owned character together with its inventory.

        A missing character and one owned by someone else are reported the
        same way.

        Returns:
            int: Number of inventory entries removed

        Raises:
            ResourceNotFoundError: NOT_FOUND_OR_FORBIDDEN
        """
        context = context or create_error_context()
        context.metadata["operation"] = "delete_character"

        name = name.strip()
        character = await self._characters.get_owned_by_name(name, owner.id)
        if character is None:
            log_and_raise(
                ResourceNotFoundError,
                f"No character {name} owned by {owner.id}",
                context=context,
                user_friendly=ErrorMessages.CHARACTER_NOT_FOUND_OR_FORBIDDEN,
                reason=ErrorReason.NOT_FOUND_OR_FORBIDDEN,
                resource_type="character",
                resource_id=name,
            )

        character_id = character.character_id
        try:
            async with transaction(self._session):
                removed = await self._characters.delete_with_inventory(character)
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Failed to delete character {name}: {e}",
                context=context,
                operation="delete_character",
                table="characters",
            )

        logger.info("Character deleted", character_id=character_id, owner_id=owner.id, inventory_removed=removed)
        return removed
