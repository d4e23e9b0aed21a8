"""
Pydantic schemas for account registration and sign-in.

Registration fields default to empty strings so that the registration
protocol reports the specific rule a missing field breaks.
"""

from pydantic import Field

from .base import NAME_MAX_LENGTH, CamelModel


class SignUpRequest(CamelModel):
    """Body of ``POST /api/sign-up``."""

    id: str = Field(default="", max_length=NAME_MAX_LENGTH, description="Account id, lowercase letters and digits")
    password: str = Field(default="", description="Plaintext password, at least 6 characters")
    password_check: str = Field(default="", description="Must equal password")
    name: str = Field(default="", max_length=NAME_MAX_LENGTH, description="Display name")

    model_config = {
        "json_schema_extra": {
            "example": {"id": "player1", "password": "secret1", "passwordCheck": "secret1", "name": "Player One"}
        }
    }


class SignInRequest(CamelModel):
    """Body of ``POST /api/sign-in``."""

    id: str = Field(..., description="Account id")
    password: str = Field(..., description="Plaintext password")


class AccountSummary(CamelModel):
    id: str
    name: str


class AccountResponse(CamelModel):
    """Registration and sign-in result."""

    message: str
    account: AccountSummary
