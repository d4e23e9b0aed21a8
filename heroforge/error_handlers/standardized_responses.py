"""
Standardized error responses for all API endpoints.

Every error leaves the service as ``{"message", "error_type", "reason"}``
with the status code fixed by the error category. Internal details are
logged, never returned.
"""

from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from ..config import get_config
from ..error_types import ErrorMessages, ErrorReason, ErrorType, create_standard_error_response
from ..exceptions import HeroForgeError, SessionRejectedError
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.error_logging import create_context_from_request

logger = get_logger(__name__)


class StandardizedErrorResponse:
    """
    Turns exceptions into standardized JSON error responses.

    Domain errors carry their own status and reason. Framework errors are
    mapped by status code; anything else becomes a 500.
    """

    STATUS_CODE_MAPPINGS = {
        ErrorType.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
        ErrorType.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
        ErrorType.NOT_FOUND: status.HTTP_404_NOT_FOUND,
        ErrorType.CONFLICT: status.HTTP_409_CONFLICT,
        ErrorType.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    }

    def __init__(self, request: Request | None = None, include_details: bool = False):
        self.request = request
        self.include_details = include_details
        self.context = create_context_from_request(request)

    def handle_exception(self, exc: Exception) -> JSONResponse:
        """Build the response for ``exc``."""
        if isinstance(exc, HeroForgeError):
            return self._handle_heroforge_error(exc)
        if isinstance(exc, RequestValidationError):
            return self._handle_request_validation_error(exc)
        if isinstance(exc, HTTPException):
            return self._handle_http_exception(exc)
        return self._handle_generic_exception(exc)

    def _handle_heroforge_error(self, error: HeroForgeError) -> JSONResponse:
        status_code = self.STATUS_CODE_MAPPINGS.get(error.error_type, error.status_code)
        message = error.user_friendly
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            message = ErrorMessages.INTERNAL_ERROR
        details = dict(error.details) if self.include_details else None
        content = create_standard_error_response(error.error_type, message, error.reason.value, details)
        response = JSONResponse(status_code=status_code, content=content)

        if isinstance(error, SessionRejectedError) and error.clear_session:
            auth = get_config().auth
            response.delete_cookie(auth.cookie_name, httponly=True, samesite="lax", secure=auth.cookie_secure)
        return response

    def _handle_request_validation_error(self, exc: RequestValidationError) -> JSONResponse:
        fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
        logger.warning("Request body rejected", fields=fields, path=self.context.path)
        details: dict[str, Any] | None = {"fields": fields} if fields else None
        content = create_standard_error_response(
            ErrorType.VALIDATION_ERROR, ErrorMessages.INVALID_INPUT, ErrorReason.INVALID_INPUT.value, details
        )
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)

    def _handle_http_exception(self, exc: HTTPException) -> JSONResponse:
        error_type, reason = _map_status_code(exc.status_code)
        content = create_standard_error_response(error_type, str(exc.detail), reason.value)
        return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))

    def _handle_generic_exception(self, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            context=self.context.to_dict(),
            exc_info=True,
        )
        content = create_standard_error_response(
            ErrorType.INTERNAL_ERROR, ErrorMessages.INTERNAL_ERROR, ErrorReason.INTERNAL.value
        )
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def _map_status_code(status_code: int) -> tuple[ErrorType, ErrorReason]:
    """Error category and reason for a bare HTTP status."""
    if status_code == status.HTTP_401_UNAUTHORIZED:
        return ErrorType.UNAUTHORIZED, ErrorReason.MISSING_TOKEN
    if status_code == status.HTTP_404_NOT_FOUND:
        return ErrorType.NOT_FOUND, ErrorReason.NOT_FOUND
    if status_code == status.HTTP_409_CONFLICT:
        return ErrorType.CONFLICT, ErrorReason.DUPLICATE_ID
    if status.HTTP_400_BAD_REQUEST <= status_code < status.HTTP_500_INTERNAL_SERVER_ERROR:
        return ErrorType.VALIDATION_ERROR, ErrorReason.INVALID_INPUT
    return ErrorType.INTERNAL_ERROR, ErrorReason.INTERNAL
