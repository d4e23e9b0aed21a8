"""
Account repository for async persistence operations.

Repositories are bound to the caller's session and never commit; the
protocol that owns the unit of work decides when to commit or roll back.
"""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...exceptions import DatabaseError
from ...models.account import Account, Profile
from ...structured_logging.enhanced_logging_config import get_logger
from ...utils.error_logging import create_error_context, log_and_raise

logger = get_logger(__name__)


class AccountRepository:
    """Repository for account and profile persistence."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, account_id: str) -> Account | None:
        """
        Get an account by its id.

        Raises:
            DatabaseError: If the lookup fails
        """
        context = create_error_context()
        context.metadata["operation"] = "get_account_by_id"
        context.metadata["account_id"] = account_id
        try:
            return await self._session.get(Account, account_id)
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Database error retrieving account '{account_id}': {e}",
                context=context,
                details={"account_id": account_id, "error": str(e)},
                operation="get_account_by_id",
                table="accounts",
            )

    async def exists(self, account_id: str) -> bool:
        return await self.get_by_id(account_id) is not None

    async def get_profile(self, account_id: str) -> Profile | None:
        result = await self._session.execute(select(Profile).where(Profile.account_id == account_id))
        return result.scalar_one_or_none()

    async def add_account_with_profile(self, account_id: str, password_hash: str, display_name: str) -> Account:
        """
        Stage an account and its profile and flush both.

        Constraint violations surface here as ``IntegrityError``.
        """
        account = Account(id=account_id, password_hash=password_hash)
        self._session.add(account)
        # Account row must exist before the profile's foreign key is checked
        await self._session.flush()
        self._session.add(Profile(account_id=account_id, display_name=display_name))
        await self._session.flush()
        logger.debug("Account and profile staged", account_id=account_id)
        return account
