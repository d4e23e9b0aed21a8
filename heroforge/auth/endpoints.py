"""
Authentication endpoints for HeroForge.

Sign-up creates an account and profile without starting a session.
Sign-in checks credentials and sets the session cookie
``authorization=Bearer <token>``. Sign-out clears it.
"""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_config
from ..database import get_async_session
from ..schemas.account import AccountResponse, AccountSummary, SignInRequest, SignUpRequest
from ..schemas.base import MessageResponse
from ..services.account_service import AccountService
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.error_logging import create_context_from_request
from .access_guard import TOKEN_SCHEME
from .session_authority import SessionAuthority, get_session_authority

logger = get_logger(__name__)

auth_router = APIRouter(tags=["auth"])


@auth_router.post("/sign-up", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    payload: SignUpRequest,
    request: Request,
    session: AsyncSession = Depends(get_async_session),
) -> AccountResponse:
    """Register a new account."""
    logger.info("Registration attempt", account_id=payload.id)
    identity = await AccountService(session).register(
        payload.id,
        payload.password,
        payload.password_check,
        payload.name,
        context=create_context_from_request(request),
    )
    return AccountResponse(
        message="sign-up complete",
        account=AccountSummary(id=identity.account.id, name=identity.display_name),
    )


@auth_router.post("/sign-in", response_model=AccountResponse)
async def sign_in(
    payload: SignInRequest,
    request: Request,
    response: Response,
    session: AsyncSession = Depends(get_async_session),
    authority: SessionAuthority = Depends(get_session_authority),
) -> AccountResponse:
    """Check credentials and start a session."""
    identity = await AccountService(session).authenticate(
        payload.id, payload.password, context=create_context_from_request(request)
    )

    auth = get_config().auth
    token = authority.issue(identity.account.id)
    response.set_cookie(
        key=auth.cookie_name,
        value=f"{TOKEN_SCHEME} {token}",
        max_age=authority.lifetime_seconds,
        httponly=True,
        samesite="lax",
        secure=auth.cookie_secure,
    )
    return AccountResponse(
        message="sign-in complete",
        account=AccountSummary(id=identity.account.id, name=identity.display_name),
    )


@auth_router.post("/sign-out", response_model=MessageResponse)
async def sign_out(response: Response) -> MessageResponse:
    """End the session on this client. Tokens are stateless, so nothing is revoked."""
    auth = get_config().auth
    response.delete_cookie(auth.cookie_name, httponly=True, samesite="lax", secure=auth.cookie_secure)
    return MessageResponse(message="sign-out complete")
