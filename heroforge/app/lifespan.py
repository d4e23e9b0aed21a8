"""
Application lifecycle management for the HeroForge server.

Startup creates any missing tables; shutdown disposes the database engine.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..database import close_db, init_db
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger("heroforge.lifespan")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize the store on startup and release it on shutdown."""
    logger.info("Starting HeroForge server", title=app.title)
    await init_db()
    try:
        yield
    finally:
        await close_db()
        logger.info("HeroForge server shutdown complete")
