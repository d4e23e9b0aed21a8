"""
Logging processors for structlog event processing.

This module provides processors for sanitizing sensitive data and adding
request context to every event before it is rendered.
"""

import re
from datetime import UTC, datetime
from typing import Any

# Sensitive patterns that should be redacted
# These patterns match whole words or specific suffixes/prefixes
SENSITIVE_PATTERNS = [
    r"\bpassword\b",
    r"password_check",
    r"password_hash",
    r"\btoken\b",
    r"access_token",
    r"\bsecret\b",
    r"jwt_secret",
    r"_key\b",
    r"^key$",
    r"\bcredential\b",
    r"\bjwt\b",
    r"\bbearer\b",
    r"\bauthorization\b",
    r"\bcookie\b",
]

# Field names that should never be redacted even if they match patterns
SAFE_FIELDS = {
    "token_length",
    "token_kind",
    "item_key",
}

REDACTED = "[REDACTED]"


def _is_sensitive(key: str) -> bool:
    key_lower = key.lower()
    if key_lower in SAFE_FIELDS:
        return False
    return any(re.search(pattern, key_lower) for pattern in SENSITIVE_PATTERNS)


def sanitize_sensitive_data(_logger: Any, _name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Remove sensitive data from log entries.

    Passwords, tokens, cookies and secrets are replaced with a redaction
    marker, recursively through nested dictionaries.

    Args:
        _logger: Logger instance (unused)
        _name: Logger name (unused)
        event_dict: Event dictionary to sanitize

    Returns:
        Sanitized event dictionary
    """

    def sanitize_dict(d: dict[str, Any]) -> dict[str, Any]:
        sanitized: dict[str, Any] = {}
        for key, value in d.items():
            if isinstance(value, dict):
                sanitized[key] = sanitize_dict(value)
            elif isinstance(key, str) and _is_sensitive(key):
                sanitized[key] = REDACTED
            else:
                sanitized[key] = value
        return sanitized

    return sanitize_dict(event_dict)


def add_request_context(_logger: Any, _name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Add timestamp and logger name to log entries when missing.

    Request-scoped values (correlation id, method, path, account id) arrive
    through structlog contextvars, merged earlier in the chain.
    """
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(UTC).isoformat()

    if "logger_name" not in event_dict:
        event_dict["logger_name"] = _name

    return event_dict
