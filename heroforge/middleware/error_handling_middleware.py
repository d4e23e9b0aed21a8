"""
Error handling middleware for FastAPI integration.

Exception handlers cover domain errors, request validation failures and
framework HTTP errors. The middleware is the last line: anything that
escapes every handler is logged with its traceback and answered with a
generic 500.
"""

from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from ..error_handlers.standardized_responses import StandardizedErrorResponse
from ..exceptions import HeroForgeError
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Catches exceptions no handler claimed and converts them to standardized responses."""

    def __init__(self, app: FastAPI, include_details: bool = False):
        super().__init__(app)
        self.include_details = include_details

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:  # pylint: disable=broad-exception-caught  # Reason: last-resort boundary
            handler = StandardizedErrorResponse(request=request, include_details=self.include_details)
            # The handler logs unexpected exceptions; domain errors log on construction
            return handler.handle_exception(exc)


def register_error_handlers(app: FastAPI, include_details: bool = False) -> None:
    """Register exception handlers producing standardized error bodies."""

    @app.exception_handler(HeroForgeError)
    async def heroforge_error_handler(request: Request, exc: HeroForgeError) -> JSONResponse:
        return StandardizedErrorResponse(request, include_details).handle_exception(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return StandardizedErrorResponse(request, include_details).handle_exception(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return StandardizedErrorResponse(request, include_details).handle_exception(exc)

    logger.info("Error handlers registered for FastAPI application")


def setup_error_handling(app: FastAPI, include_details: bool = False) -> None:
    """Install the catch-all middleware and the exception handlers."""
    app.add_middleware(ErrorHandlingMiddleware, include_details=include_details)
    register_error_handlers(app, include_details=include_details)
    logger.info("Complete error handling setup completed", include_details=include_details)
