"""
FastAPI application factory for the HeroForge server.

This module handles FastAPI app creation, middleware configuration,
and router registration.
"""

from typing import Any

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..api.characters import character_router
from ..api.items import inventory_router, item_router
from ..auth.endpoints import auth_router
from ..config import get_config
from ..middleware.correlation_middleware import CorrelationMiddleware
from ..middleware.error_handling_middleware import setup_error_handling
from ..structured_logging.enhanced_logging_config import get_logger
from .lifespan import lifespan

logger = get_logger(__name__)

API_PREFIX = "/api"


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Middleware order, outermost first: correlation ids, CORS, error handling.

    Returns:
        FastAPI: The configured FastAPI application instance
    """
    config = get_config()

    app = FastAPI(
        title="HeroForge API",
        description="Game account backend: accounts, sessions, characters and inventories",
        version="0.1.0",
        lifespan=lifespan,
    )

    include_details = config.logging.environment != "production"
    setup_error_handling(app, include_details=include_details)

    cors = config.cors
    logger.info(
        "CORS configuration",
        allow_origins=cors.allow_origins,
        allow_methods=cors.allow_methods,
        allow_credentials=cors.allow_credentials,
        max_age=cors.max_age,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.allow_origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=[method.upper() for method in cors.allow_methods],
        allow_headers=["Content-Type", "X-Correlation-ID"],
        max_age=cors.max_age,
    )
    app.add_middleware(CorrelationMiddleware)

    api_router = APIRouter(prefix=API_PREFIX)
    api_router.include_router(auth_router)
    api_router.include_router(character_router)
    api_router.include_router(item_router)
    api_router.include_router(inventory_router)

    @api_router.get("/health", tags=["health"])
    async def health_check() -> dict[str, Any]:
        return {"status": "ok"}

    app.include_router(api_router)
    return app
