"""
Centralized error types and constants for HeroForge.

This module defines the error categories, the per-failure reason codes and
the short user-facing messages shared by every layer.
"""

from enum import Enum
from typing import Any


class ErrorType(Enum):
    """Error categories; each maps to one HTTP status."""

    VALIDATION_ERROR = "validation_error"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    INTERNAL_ERROR = "internal_error"


class ErrorReason(str, Enum):
    """Specific failure kinds reported alongside the error category."""

    # Validation
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_ID = "INVALID_ID"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    PASSWORD_MISMATCH = "PASSWORD_MISMATCH"
    MISSING_NAME = "MISSING_NAME"
    NOTHING_TO_UPDATE = "NOTHING_TO_UPDATE"
    # Conflict
    DUPLICATE_ID = "DUPLICATE_ID"
    DUPLICATE_NAME = "DUPLICATE_NAME"
    DUPLICATE_ITEM = "DUPLICATE_ITEM"
    # Authentication
    MISSING_TOKEN = "MISSING_TOKEN"
    WRONG_SCHEME = "WRONG_SCHEME"
    EXPIRED = "EXPIRED"
    MALFORMED = "MALFORMED"
    UNKNOWN_ACCOUNT = "UNKNOWN_ACCOUNT"
    BAD_CREDENTIAL = "BAD_CREDENTIAL"
    # Not found
    NOT_FOUND = "NOT_FOUND"
    NOT_FOUND_OR_FORBIDDEN = "NOT_FOUND_OR_FORBIDDEN"
    NO_CHARACTER = "NO_CHARACTER"
    # Internal
    INTERNAL = "INTERNAL"


class ErrorMessages:  # pylint: disable=too-few-public-methods
    """User-facing messages."""

    UNAUTHORIZED_REQUEST = "unauthorized request"
    SESSION_EXPIRED = "session expired"
    INVALID_SESSION = "invalid session"
    MISSING_TOKEN = "session token is missing"
    WRONG_SCHEME = "session token type does not match"
    UNKNOWN_SESSION_ACCOUNT = "session account does not exist"
    INVALID_CREDENTIALS = "invalid id or password"

    INVALID_INPUT = "invalid request"
    INVALID_ID = "id must contain only lowercase letters and digits"
    WEAK_PASSWORD = "password must be at least 6 characters"
    PASSWORD_MISMATCH = "password confirmation does not match"
    MISSING_ACCOUNT_NAME = "name is required"
    MISSING_CHARACTER_NAME = "character name is required"
    NOTHING_TO_UPDATE = "provide a name, stat or description to update"

    DUPLICATE_ID = "id is already registered"
    DUPLICATE_CHARACTER_NAME = "character name is already in use"
    DUPLICATE_ITEM = "item is already in the inventory"

    CHARACTER_NOT_FOUND = "character not found"
    CHARACTER_NOT_FOUND_OR_FORBIDDEN = "character not found or not owned by this account"
    NO_CHARACTER = "create a character first"
    ITEM_NOT_FOUND = "item not found"

    INTERNAL_ERROR = "internal server error"


def create_standard_error_response(
    error_type: ErrorType,
    message: str,
    reason: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Create a standardized error response body.

    Args:
        error_type: The category of error
        message: User-facing message
        reason: Specific failure kind (optional)
        details: Additional error details, only included when non-empty

    Returns:
        Error response dictionary
    """
    body: dict[str, Any] = {
        "message": message,
        "error_type": error_type.value,
        "reason": reason or ErrorReason.INTERNAL.value,
    }
    if details:
        body["details"] = details
    return body
