"""
Enhanced structlog-based logging configuration for the HeroForge server.

This module provides the logging system used by every other module:
request-scoped context through structlog contextvars, correlation IDs,
security sanitization and console or JSON rendering.

CORRECT USAGE:
    from ..structured_logging.enhanced_logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("Character created", character_name="Hero", owner_id="player1")
"""

import json
import logging
import sys
import threading
import uuid
from typing import Any

import structlog
from structlog.contextvars import (
    bind_contextvars,
    clear_contextvars,
    merge_contextvars,
)
from structlog.stdlib import BoundLogger, LoggerFactory

from .logging_processors import add_request_context, sanitize_sensitive_data

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class _LoggingState:  # pylint: disable=too-few-public-methods
    """Tracks whether logging has been configured in this process."""

    def __init__(self) -> None:
        self.initialized = False
        self.signature: str | None = None
        self.lock = threading.Lock()


_logging_state = _LoggingState()


def detect_environment() -> str:
    """
    Detect the runtime environment.

    Returns:
        "unit_test" when running under pytest, otherwise "development"
    """
    if "pytest" in sys.modules:
        return "unit_test"
    return "development"


def configure_enhanced_structlog(
    environment: str | None = None,
    log_level: str = "INFO",
    log_format: str = "console",
) -> None:
    """
    Configure structlog with context merging, sanitization and rendering.

    Args:
        environment: Environment name (auto-detected if None)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: "console" for human-readable output, "json" for one JSON object per line
    """
    if environment is None:
        environment = detect_environment()

    level_name = log_level.upper()
    if level_name not in VALID_LOG_LEVELS:
        raise ValueError(f"Invalid log level: {log_level}. Must be one of {VALID_LOG_LEVELS}")

    base_processors: list[Any] = [
        # Merge context variables (MDC) before sanitizing so bound values are covered too
        merge_contextvars,
        sanitize_sensitive_data,
        add_request_context,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level_name))

    structlog.configure(
        processors=base_processors + [renderer],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=False,
    )

    structlog.get_logger(__name__).debug(
        "Structlog configured", environment=environment, log_level=level_name, log_format=log_format
    )


def setup_enhanced_logging(config: dict[str, Any], *, force_reconfigure: bool = False) -> None:
    """
    Set up logging from the server configuration.

    Repeated calls with the same configuration are ignored unless
    ``force_reconfigure`` is set.

    Args:
        config: Server configuration dictionary (see AppConfig.to_legacy_dict)
        force_reconfigure: When True, reconfigure even if already initialized
    """
    config_signature = json.dumps(config, sort_keys=True, default=str)

    with _logging_state.lock:
        if _logging_state.initialized and not force_reconfigure and _logging_state.signature == config_signature:
            return

        logging_config = config.get("logging", {})
        environment = logging_config.get("environment", detect_environment())
        log_level = logging_config.get("level", "INFO")
        log_format = logging_config.get("format", "console")

        configure_enhanced_structlog(environment, log_level, log_format)
        _configure_uvicorn_logging()

        _logging_state.initialized = True
        _logging_state.signature = config_signature

    get_logger("heroforge.structured_logging").info(
        "Logging system initialized",
        environment=environment,
        log_level=log_level,
        log_format=log_format,
    )


def _configure_uvicorn_logging() -> None:
    """Route uvicorn's loggers through the root handler so all output shares one format."""
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True


def get_logger(name: str) -> Any:  # Returns BoundLogger but typed as Any for flexibility
    """
    Get a Structlog logger with the specified name.

    This is the public API for obtaining loggers. Application code should
    use this function rather than calling structlog.get_logger() directly.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured Structlog logger instance
    """
    return structlog.get_logger(name)


def bind_request_context(
    correlation_id: str | None = None,
    account_id: str | None = None,
    request_id: str | None = None,
    **kwargs: Any,
) -> None:
    """
    Bind request context to the current logging context.

    Every log entry emitted afterwards in the same task carries these values.

    Args:
        correlation_id: Unique correlation ID for the request (generated if None)
        account_id: Authenticated account ID if available
        request_id: Request ID if available
        **kwargs: Additional context variables
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    context: dict[str, Any] = {"correlation_id": correlation_id}
    if account_id is not None:
        context["account_id"] = account_id
    if request_id is not None:
        context["request_id"] = request_id
    context.update(kwargs)

    bind_contextvars(**context)


def clear_request_context() -> None:
    """Clear the current request context from logging."""
    clear_contextvars()


def reset_logging_state() -> None:
    """Forget previous setup so the next setup_enhanced_logging call reconfigures. For tests."""
    with _logging_state.lock:
        _logging_state.initialized = False
        _logging_state.signature = None
