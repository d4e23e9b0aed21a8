"""
Account registration and sign-in.

Registration validates its inputs in a fixed order, then writes the
account and its profile as one transaction. The uniqueness pre-check is
advisory: a constraint violation raised by the store is reported the same
way as a pre-check hit.
"""

import re
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.argon2_utils import hash_password, needs_rehash, verify_password
from ..database import transaction
from ..error_types import ErrorMessages, ErrorReason
from ..exceptions import AuthenticationError, ConflictError, DatabaseError, ErrorContext, ValidationError
from ..models.account import Account
from ..persistence.repositories.account_repository import AccountRepository
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.error_logging import create_error_context, log_and_raise

logger = get_logger(__name__)

ACCOUNT_ID_PATTERN = re.compile(r"[a-z0-9]+")
MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class AccountIdentity:
    """An account together with its profile display name."""

    account: Account
    display_name: str


def validate_registration(account_id: str, password: str, password_check: str, name: str) -> None:
    """
    Check registration inputs, reporting the first rule broken.

    Raises:
        ValidationError: INVALID_ID, WEAK_PASSWORD, PASSWORD_MISMATCH or MISSING_NAME
    """
    if not ACCOUNT_ID_PATTERN.fullmatch(account_id):
        raise ValidationError(
            "Account id rejected", field="id", reason=ErrorReason.INVALID_ID, user_friendly=ErrorMessages.INVALID_ID
        )
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            "Password too short",
            field="password",
            reason=ErrorReason.WEAK_PASSWORD,
            user_friendly=ErrorMessages.WEAK_PASSWORD,
        )
    if password != password_check:
        raise ValidationError(
            "Password confirmation mismatch",
            field="passwordCheck",
            reason=ErrorReason.PASSWORD_MISMATCH,
            user_friendly=ErrorMessages.PASSWORD_MISMATCH,
        )
    if not name.strip():
        raise ValidationError(
            "Display name missing",
            field="name",
            reason=ErrorReason.MISSING_NAME,
            user_friendly=ErrorMessages.MISSING_ACCOUNT_NAME,
        )


class AccountService:
    """Registration and credential checks, bound to one request's session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._accounts = AccountRepository(session)

    async def register(
        self,
        account_id: str,
        password: str,
        password_check: str,
        name: str,
        context: ErrorContext | None = None,
    ) -> AccountIdentity:
        """
        Create an account and its profile atomically.

        Raises:
            ValidationError: If an input rule is broken
            ConflictError: If the id is already registered (DUPLICATE_ID)
            DatabaseError: If the store fails
        """
        context = context or create_error_context()
        context.metadata["operation"] = "register_account"

        validate_registration(account_id, password, password_check, name)
        display_name = name.strip()

        if await self._accounts.exists(account_id):
            log_and_raise(
                ConflictError,
                f"Account id already registered: {account_id}",
                context=context,
                user_friendly=ErrorMessages.DUPLICATE_ID,
                reason=ErrorReason.DUPLICATE_ID,
                resource_type="account",
            )

        password_hash = hash_password(password)
        try:
            async with transaction(self._session):
                account = await self._accounts.add_account_with_profile(account_id, password_hash, display_name)
        except IntegrityError as e:
            log_and_raise(
                ConflictError,
                f"Account id claimed concurrently: {account_id}",
                context=context,
                details={"error": str(e.orig)},
                user_friendly=ErrorMessages.DUPLICATE_ID,
                reason=ErrorReason.DUPLICATE_ID,
                resource_type="account",
            )
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Failed to create account {account_id}: {e}",
                context=context,
                operation="register_account",
                table="accounts",
            )

        logger.info("Account registered", account_id=account_id)
        return AccountIdentity(account=account, display_name=display_name)

    async def authenticate(self, account_id: str, password: str, context: ErrorContext | None = None) -> AccountIdentity:
        """
        Check credentials.

        Unknown ids and wrong passwords are logged with distinct reasons but
        share one user-facing message.

        Raises:
            AuthenticationError: UNKNOWN_ACCOUNT or BAD_CREDENTIAL
        """
        context = context or create_error_context()
        context.metadata["operation"] = "sign_in"

        account = await self._accounts.get_by_id(account_id)
        if account is None:
            log_and_raise(
                AuthenticationError,
                f"Sign-in for unknown account: {account_id}",
                context=context,
                user_friendly=ErrorMessages.INVALID_CREDENTIALS,
                reason=ErrorReason.UNKNOWN_ACCOUNT,
                auth_type="password",
            )
        if not verify_password(password, account.password_hash):
            log_and_raise(
                AuthenticationError,
                f"Wrong password for account: {account_id}",
                context=context,
                user_friendly=ErrorMessages.INVALID_CREDENTIALS,
                reason=ErrorReason.BAD_CREDENTIAL,
                auth_type="password",
            )

        if needs_rehash(account.password_hash):
            async with transaction(self._session):
                account.password_hash = hash_password(password)
            logger.info("Password hash upgraded", account_id=account_id)

        profile = await self._accounts.get_profile(account_id)
        display_name = profile.display_name if profile is not None else account_id
        logger.info("Account signed in", account_id=account_id)
        return AccountIdentity(account=account, display_name=display_name)
