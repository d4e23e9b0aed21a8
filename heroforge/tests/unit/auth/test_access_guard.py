"""Unit tests for the access guard decision and its messages."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from heroforge.auth.access_guard import GuardDecision, evaluate_session, failure_message
from heroforge.auth.session_authority import SessionAuthority
from heroforge.error_types import ErrorReason

SECRET = "guard-test-secret-0123456789-abcdefghij"


@pytest.fixture
def authority() -> SessionAuthority:
    return SessionAuthority(SECRET)


@pytest.fixture
def account() -> MagicMock:
    account = MagicMock()
    account.id = "player1"
    return account


@pytest.mark.asyncio
async def test_valid_session_admits_account(authority, account):
    """A Bearer cookie with a live token for an existing account is admitted."""
    lookup = AsyncMock(return_value=account)

    decision = await evaluate_session(f"Bearer {authority.issue('player1')}", authority, lookup)

    assert decision == GuardDecision(account=account)
    assert decision.admitted
    assert not decision.clear_session
    lookup.assert_awaited_once_with("player1")


@pytest.mark.asyncio
@pytest.mark.parametrize("cookie_value", [None, ""])
async def test_missing_cookie(authority, cookie_value):
    """No cookie means MISSING_TOKEN and no store lookup."""
    lookup = AsyncMock()

    decision = await evaluate_session(cookie_value, authority, lookup)

    assert decision.failure is ErrorReason.MISSING_TOKEN
    assert decision.clear_session
    lookup.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("cookie_value", ["Token abc", "Bearer", "bearer abc", "Bearer a b"])
async def test_wrong_scheme(authority, cookie_value):
    """Anything other than exactly ``Bearer <value>`` is WRONG_SCHEME."""
    decision = await evaluate_session(cookie_value, authority, AsyncMock())

    assert decision.failure is ErrorReason.WRONG_SCHEME
    assert decision.clear_session


@pytest.mark.asyncio
async def test_expired_token(authority):
    """An expired token is reported as EXPIRED and the session is cleared."""
    token = SessionAuthority(SECRET, lifetime_seconds=-1).issue("player1")
    lookup = AsyncMock()

    decision = await evaluate_session(f"Bearer {token}", authority, lookup)

    assert decision.failure is ErrorReason.EXPIRED
    assert decision.clear_session
    lookup.assert_not_awaited()


@pytest.mark.asyncio
async def test_malformed_token(authority):
    decision = await evaluate_session("Bearer nonsense", authority, AsyncMock())

    assert decision.failure is ErrorReason.MALFORMED


@pytest.mark.asyncio
async def test_unknown_account(authority):
    """A valid token for an account that no longer resolves is UNKNOWN_ACCOUNT."""
    decision = await evaluate_session(f"Bearer {authority.issue('ghost')}", authority, AsyncMock(return_value=None))

    assert decision.failure is ErrorReason.UNKNOWN_ACCOUNT
    assert decision.account is None


class TestFailureMessages:
    """User-facing text for each rejection."""

    @pytest.mark.parametrize(
        ("failure", "expected"),
        [
            (ErrorReason.EXPIRED, "session expired"),
            (ErrorReason.MALFORMED, "invalid session"),
            (ErrorReason.MISSING_TOKEN, "session token is missing"),
            (ErrorReason.WRONG_SCHEME, "session token type does not match"),
            (ErrorReason.UNKNOWN_ACCOUNT, "session account does not exist"),
        ],
    )
    def test_specific_messages(self, failure, expected):
        assert failure_message(failure) == expected

    def test_fallback_message(self):
        """Kinds without their own text fall back to the generic message."""
        assert failure_message(None) == "unauthorized request"
        assert failure_message(ErrorReason.INTERNAL) == "unauthorized request"
