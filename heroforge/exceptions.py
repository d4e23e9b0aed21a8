"""
Exception hierarchy for the HeroForge server.

Every failure a protocol can report is a ``HeroForgeError`` subclass. The
subclass fixes the HTTP status and error category, the ``reason`` names the
specific failure kind, and ``user_friendly`` is the short message returned
to the caller.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from fastapi import status

from .error_types import ErrorReason, ErrorType
from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ErrorContext:
    """
    Contextual information for error handling.

    Provides structured context for error reporting and debugging.
    """

    account_id: str | None = None
    request_id: str | None = None
    method: str | None = None
    path: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for logging."""
        return {
            "account_id": self.account_id,
            "request_id": self.request_id,
            "method": self.method,
            "path": self.path,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


class HeroForgeError(Exception):
    """
    Base exception for all HeroForge errors.

    Provides structured error handling with context and metadata
    for proper error categorization and debugging.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type: ErrorType = ErrorType.INTERNAL_ERROR
    default_reason: ErrorReason = ErrorReason.INTERNAL
    log_level: str = "error"

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        details: dict[str, Any] | None = None,
        user_friendly: str | None = None,
        reason: ErrorReason | None = None,
    ):
        """
        Initialize HeroForge error.

        Args:
            message: Technical error message
            context: Error context information
            details: Additional error details
            user_friendly: User-friendly error message
            reason: Specific failure kind, defaults to the class default
        """
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()
        self.details = details or {}
        self.user_friendly = user_friendly or message
        self.reason = reason or self.default_reason
        self.timestamp = datetime.now()

        self._log_error()

    def _log_error(self) -> None:
        """Log the error with structured context."""
        log = getattr(logger, self.log_level)
        log(
            "HeroForge error occurred",
            error_type=self.__class__.__name__,
            reason=self.reason.value,
            message=self.message,
            context=self.context.to_dict(),
            details=self.details,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for diagnostics."""
        return {
            "error_type": self.__class__.__name__,
            "reason": self.reason.value,
            "message": self.message,
            "user_friendly": self.user_friendly,
            "context": self.context.to_dict(),
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class ValidationError(HeroForgeError):
    """Malformed input; the caller's fault."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_type = ErrorType.VALIDATION_ERROR
    default_reason = ErrorReason.INVALID_INPUT
    log_level = "warning"

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        field: str | None = None,  # pylint: disable=redefined-outer-name
        **kwargs: Any,
    ):
        super().__init__(message, context, **kwargs)
        self.field = field
        if field:
            self.details["field"] = field


class ConflictError(HeroForgeError):
    """Uniqueness violation."""

    status_code = status.HTTP_409_CONFLICT
    error_type = ErrorType.CONFLICT
    default_reason = ErrorReason.DUPLICATE_ID
    log_level = "warning"

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        resource_type: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, context, **kwargs)
        self.resource_type = resource_type
        if resource_type:
            self.details["resource_type"] = resource_type


class AuthenticationError(HeroForgeError):
    """Authentication failures (sign-in or session)."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = ErrorType.UNAUTHORIZED
    default_reason = ErrorReason.BAD_CREDENTIAL
    log_level = "warning"

    def __init__(self, message: str, context: ErrorContext | None = None, auth_type: str = "unknown", **kwargs: Any):
        super().__init__(message, context, **kwargs)
        self.auth_type = auth_type
        self.details["auth_type"] = auth_type


class SessionRejectedError(AuthenticationError):
    """
    The access guard refused a request.

    ``clear_session`` tells the response layer to expire the session cookie.
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        clear_session: bool = True,
        **kwargs: Any,
    ):
        kwargs.setdefault("auth_type", "session")
        super().__init__(message, context, **kwargs)
        self.clear_session = clear_session


class ResourceNotFoundError(HeroForgeError):
    """Referenced entity absent, or not visible to the caller."""

    status_code = status.HTTP_404_NOT_FOUND
    error_type = ErrorType.NOT_FOUND
    default_reason = ErrorReason.NOT_FOUND
    log_level = "info"

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        resource_type: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, context, **kwargs)
        self.resource_type = resource_type
        self.resource_id = resource_id
        if resource_type:
            self.details["resource_type"] = resource_type
        if resource_id:
            self.details["resource_id"] = resource_id


class DatabaseError(HeroForgeError):
    """Store or infrastructure fault."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        operation: str = "unknown",
        table: str | None = None,
        **kwargs: Any,
    ):
        if not kwargs.get("user_friendly"):
            kwargs["user_friendly"] = "internal server error"
        super().__init__(message, context, **kwargs)
        self.operation = operation
        self.table = table
        self.details["operation"] = operation
        if table:
            self.details["table"] = table
