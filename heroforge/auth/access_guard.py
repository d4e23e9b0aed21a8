"""
Access guard for protected HeroForge endpoints.

``evaluate_session`` is the pure decision: cookie value in, account or
failure kind out. ``get_current_account`` is the FastAPI dependency that
applies it, attaching the account to the request or raising
``SessionRejectedError`` so the response clears the session cookie.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.contextvars import bind_contextvars

from ..config import get_config
from ..database import get_async_session
from ..error_types import ErrorMessages, ErrorReason
from ..exceptions import SessionRejectedError
from ..models.account import Account
from ..persistence.repositories.account_repository import AccountRepository
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.error_logging import create_context_from_request
from .session_authority import SessionAuthority, SessionFailure, get_session_authority

logger = get_logger(__name__)

TOKEN_SCHEME = "Bearer"

FAILURE_MESSAGES: dict[ErrorReason, str] = {
    ErrorReason.EXPIRED: ErrorMessages.SESSION_EXPIRED,
    ErrorReason.MALFORMED: ErrorMessages.INVALID_SESSION,
    ErrorReason.MISSING_TOKEN: ErrorMessages.MISSING_TOKEN,
    ErrorReason.WRONG_SCHEME: ErrorMessages.WRONG_SCHEME,
    ErrorReason.UNKNOWN_ACCOUNT: ErrorMessages.UNKNOWN_SESSION_ACCOUNT,
}

_VERIFY_FAILURES = {
    SessionFailure.EXPIRED: ErrorReason.EXPIRED,
    SessionFailure.MALFORMED: ErrorReason.MALFORMED,
}

AccountLookup = Callable[[str], Awaitable[Account | None]]


@dataclass(frozen=True)
class GuardDecision:
    """Result of evaluating a session cookie."""

    account: Account | None = None
    failure: ErrorReason | None = None
    clear_session: bool = False

    @property
    def admitted(self) -> bool:
        return self.account is not None

    @classmethod
    def reject(cls, failure: ErrorReason) -> "GuardDecision":
        return cls(failure=failure, clear_session=True)


def failure_message(failure: ErrorReason | None) -> str:
    """User-facing text for a guard failure kind."""
    if failure is None:
        return ErrorMessages.UNAUTHORIZED_REQUEST
    return FAILURE_MESSAGES.get(failure, ErrorMessages.UNAUTHORIZED_REQUEST)


async def evaluate_session(
    cookie_value: str | None,
    authority: SessionAuthority,
    account_lookup: AccountLookup,
) -> GuardDecision:
    """
    Decide whether a session cookie admits its bearer.

    Checks run in order: presence, ``Bearer`` scheme, token verification,
    then account existence. The first failing check decides the outcome.
    """
    if not cookie_value:
        return GuardDecision.reject(ErrorReason.MISSING_TOKEN)

    parts = cookie_value.split(" ")
    if len(parts) != 2 or parts[0] != TOKEN_SCHEME:
        return GuardDecision.reject(ErrorReason.WRONG_SCHEME)

    verification = authority.verify(parts[1])
    if verification.failure is not None or verification.account_id is None:
        return GuardDecision.reject(_VERIFY_FAILURES.get(verification.failure, ErrorReason.MALFORMED))

    account = await account_lookup(verification.account_id)
    if account is None:
        return GuardDecision.reject(ErrorReason.UNKNOWN_ACCOUNT)

    return GuardDecision(account=account)


async def get_current_account(
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    authority: SessionAuthority = Depends(get_session_authority),
) -> Account:
    """
    Dependency admitting only requests with a valid session cookie.

    Raises:
        SessionRejectedError: When the guard rejects the session
    """
    cookie_name = get_config().auth.cookie_name
    repository = AccountRepository(session)
    decision = await evaluate_session(request.cookies.get(cookie_name), authority, repository.get_by_id)

    if decision.account is None:
        context = create_context_from_request(request)
        context.metadata["operation"] = "access_guard"
        raise SessionRejectedError(
            f"Session rejected: {decision.failure.value if decision.failure else 'unknown'}",
            context=context,
            user_friendly=failure_message(decision.failure),
            reason=decision.failure,
            clear_session=decision.clear_session,
        )

    request.state.account = decision.account
    request.state.account_id = decision.account.id
    # The correlation id bound by the middleware stays in place
    bind_contextvars(account_id=decision.account.id)
    return decision.account
