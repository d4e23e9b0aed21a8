"""
Character API endpoints.

All routes require a valid session. A character's ``money`` is shown only
to its owner.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.access_guard import get_current_account
from ..database import get_async_session
from ..models.account import Account
from ..schemas.base import MessageResponse
from ..schemas.character import CharacterCreate, CharacterCreateResponse, CharacterRead
from ..services.character_service import CharacterService, present_character
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.error_logging import create_context_from_request

logger = get_logger(__name__)

character_router = APIRouter(prefix="/characters", tags=["characters"])


@character_router.post("", response_model=CharacterCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_character(
    payload: CharacterCreate,
    request: Request,
    current_account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_async_session),
) -> CharacterCreateResponse:
    """Create a character owned by the caller."""
    character = await CharacterService(session).create(
        current_account, payload.name, context=create_context_from_request(request)
    )
    return CharacterCreateResponse(
        message="character created",
        character=present_character(character, current_account.id),
    )


@character_router.get("", response_model=list[CharacterRead])
async def list_characters(
    current_account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_async_session),
) -> list[CharacterRead]:
    """The caller's characters, oldest first."""
    characters = await CharacterService(session).list_owned(current_account)
    return [present_character(character, current_account.id) for character in characters]


@character_router.get("/{name}", response_model=CharacterRead, response_model_exclude_none=True)
async def get_character(
    name: str,
    request: Request,
    current_account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_async_session),
) -> CharacterRead:
    """Any character by name; ``money`` is omitted unless the caller owns it."""
    character = await CharacterService(session).get_by_name(name, context=create_context_from_request(request))
    return present_character(character, current_account.id)


@character_router.delete("/{name}", response_model=MessageResponse)
async def delete_character(
    name: str,
    request: Request,
    current_account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_async_session),
) -> MessageResponse:
    """Delete one of the caller's characters along with its inventory."""
    await CharacterService(session).delete(current_account, name, context=create_context_from_request(request))
    return MessageResponse(message="character deleted")
