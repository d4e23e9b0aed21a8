"""
Session token issuance and verification.

Tokens are HS256 JWTs carrying the account id in ``sub`` and a fixed
audience. They are stateless: there is no revocation list, so a token
stays valid until its ``exp`` passes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import jwt
from fastapi_users.jwt import decode_jwt, generate_jwt

from ..config import get_config
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class SessionFailure(str, Enum):
    """Why a token did not verify."""

    EXPIRED = "EXPIRED"
    MALFORMED = "MALFORMED"


@dataclass(frozen=True)
class TokenVerification:
    """Outcome of ``SessionAuthority.verify``: exactly one field is set."""

    account_id: str | None = None
    failure: SessionFailure | None = None

    @property
    def ok(self) -> bool:
        return self.account_id is not None


class SessionAuthority:
    """Issues and verifies signed session tokens bound to an account id."""

    def __init__(
        self,
        secret: str,
        lifetime_seconds: int = 3600,
        audience: list[str] | None = None,
        algorithm: str = "HS256",
    ) -> None:
        self.secret = secret
        self.lifetime_seconds = lifetime_seconds
        self.audience = audience or ["heroforge:session"]
        self.algorithm = algorithm

    def issue(self, account_id: str) -> str:
        """Sign a token for ``account_id`` expiring after the configured lifetime."""
        data: dict[str, Any] = {"sub": account_id, "aud": self.audience}
        token = generate_jwt(data, self.secret, self.lifetime_seconds, algorithm=self.algorithm)
        logger.debug("Session token issued", account_id=account_id, lifetime_seconds=self.lifetime_seconds)
        return token

    def verify(self, token: str) -> TokenVerification:
        """
        Check signature, audience and expiry of ``token``.

        Returns ``EXPIRED`` when only the expiry check fails and ``MALFORMED``
        for every other defect, including a missing subject.
        """
        try:
            data = decode_jwt(token, self.secret, self.audience, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            logger.info("Session token expired")
            return TokenVerification(failure=SessionFailure.EXPIRED)
        except jwt.PyJWTError as e:
            logger.warning("Session token rejected", error_type=type(e).__name__)
            return TokenVerification(failure=SessionFailure.MALFORMED)

        account_id = data.get("sub")
        if not isinstance(account_id, str) or not account_id:
            logger.warning("Session token missing sub claim")
            return TokenVerification(failure=SessionFailure.MALFORMED)
        return TokenVerification(account_id=account_id)


def get_session_authority() -> SessionAuthority:
    """Build the authority from configuration. Used as a FastAPI dependency."""
    auth = get_config().auth
    return SessionAuthority(
        secret=auth.jwt_secret,
        lifetime_seconds=auth.token_lifetime_seconds,
        audience=[auth.token_audience],
        algorithm=auth.jwt_algorithm,
    )
