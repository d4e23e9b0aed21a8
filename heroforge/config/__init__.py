"""
Configuration module for the HeroForge server.

Usage:
    from heroforge.config import get_config

    config = get_config()
    logger.info("Configuration loaded", host=config.server.host, port=config.server.port)
"""

import sys
import threading
from functools import lru_cache
from os import getenv

from .models import AppConfig

__all__ = ["get_config", "reset_config", "AppConfig"]

# Module-level config cache
_config_instance: AppConfig | None = None
_config_lock = threading.Lock()


def _is_test_mode() -> bool:
    """
    Detect if running in test environment.

    Returns:
        bool: True if running under pytest, False otherwise
    """
    if "pytest" in sys.modules:
        return True
    return bool(getenv("PYTEST_CURRENT_TEST"))


@lru_cache(maxsize=1)
def _get_config_cached() -> AppConfig:
    """Production config loader with caching."""
    global _config_instance  # pylint: disable=global-statement
    with _config_lock:
        if _config_instance is None:
            _config_instance = AppConfig()
    return _config_instance


def get_config() -> AppConfig:
    """
    Get application configuration (singleton in production, fresh in tests).

    In test mode a fresh instance is built on every call so tests can
    change environment variables with monkeypatch.

    Returns:
        AppConfig: The application configuration

    Raises:
        pydantic.ValidationError: If configuration is invalid or required fields are missing
    """
    if _is_test_mode():
        return AppConfig()
    return _get_config_cached()


def reset_config() -> None:
    """Reset the configuration cache, forcing the next get_config() to reload."""
    global _config_instance  # pylint: disable=global-statement
    with _config_lock:
        _get_config_cached.cache_clear()
        _config_instance = None
