"""
Error logging utilities for the HeroForge server.

Standardized helpers to build error contexts from requests and to log
before raising, so every raised domain error carries the same fields.
"""

from typing import Any, NoReturn

from fastapi import Request

from ..exceptions import ErrorContext, HeroForgeError
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


def create_error_context(**kwargs: Any) -> ErrorContext:
    """
    Create an error context with the given parameters.

    Args:
        **kwargs: Context parameters

    Returns:
        ErrorContext object
    """
    return ErrorContext(**kwargs)


def log_and_raise(
    exception_class: type[HeroForgeError],
    message: str,
    context: ErrorContext | None = None,
    details: dict[str, Any] | None = None,
    user_friendly: str | None = None,
    logger_name: str | None = None,
    **kwargs: Any,
) -> NoReturn:
    """
    Log an error and raise a HeroForge exception.

    Args:
        exception_class: The HeroForge exception class to raise
        message: Technical error message
        context: Error context information
        details: Additional error details
        user_friendly: User-friendly error message
        logger_name: Specific logger name to use (defaults to current module)
        **kwargs: Extra keyword arguments for the exception class (reason, field, ...)

    Raises:
        The specified HeroForge exception
    """
    error_logger = get_logger(logger_name) if logger_name else logger

    if context is None:
        context = create_error_context()

    error_logger.debug(
        f"Raising {exception_class.__name__}: {message}",
        error_type=exception_class.__name__,
        details=details or {},
        user_friendly=user_friendly,
    )

    raise exception_class(
        message=message,
        context=context,
        details=details,
        user_friendly=user_friendly,
        **kwargs,
    )


def create_context_from_request(request: Request | None) -> ErrorContext:
    """
    Create error context from a FastAPI request.

    Args:
        request: FastAPI request object (can be None for testing)

    Returns:
        ErrorContext with request information
    """
    if request is None:
        return create_error_context(metadata={"path": "unknown", "method": "unknown"})

    metadata = {
        "user_agent": request.headers.get("user-agent", ""),
        "remote_addr": getattr(request.client, "host", "") if request.client else "",
    }

    # The plain id string, the ORM object may be expired after a rollback
    account_id = getattr(request.state, "account_id", None)

    return create_error_context(
        account_id=account_id,
        request_id=getattr(request.state, "correlation_id", None),
        method=request.method,
        path=request.url.path,
        metadata=metadata,
    )
