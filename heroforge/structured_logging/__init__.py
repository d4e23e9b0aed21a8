"""Structured logging for the HeroForge server."""

from .enhanced_logging_config import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_enhanced_logging,
)

__all__ = ["bind_request_context", "clear_request_context", "get_logger", "setup_enhanced_logging"]
