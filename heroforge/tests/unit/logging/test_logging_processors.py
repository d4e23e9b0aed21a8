"""Tests for structlog processors and request context binding."""

import structlog

from heroforge.structured_logging.enhanced_logging_config import bind_request_context, clear_request_context
from heroforge.structured_logging.logging_processors import REDACTED, add_request_context, sanitize_sensitive_data


class TestSanitizeSensitiveData:
    def test_redacts_credentials(self):
        event = {
            "event": "sign-in",
            "password": "secret1",
            "password_check": "secret1",
            "token": "abc",
            "authorization": "Bearer abc",
            "account_id": "player1",
        }

        result = sanitize_sensitive_data(None, "info", event)

        assert result["password"] == REDACTED
        assert result["password_check"] == REDACTED
        assert result["token"] == REDACTED
        assert result["authorization"] == REDACTED
        assert result["account_id"] == "player1"
        assert result["event"] == "sign-in"

    def test_redacts_nested_values(self):
        result = sanitize_sensitive_data(None, "info", {"details": {"jwt_secret": "x", "operation": "sign_in"}})

        assert result["details"] == {"jwt_secret": REDACTED, "operation": "sign_in"}

    def test_safe_fields_kept(self):
        assert sanitize_sensitive_data(None, "info", {"token_length": 120})["token_length"] == 120


def test_add_request_context_fills_missing_fields():
    result = add_request_context(None, "heroforge.test", {"event": "x"})

    assert result["logger_name"] == "heroforge.test"
    assert "timestamp" in result


def test_bind_and_clear_request_context():
    """Bound values appear in the contextvars until cleared."""
    bind_request_context(correlation_id="corr-1", account_id="player1", path="/api/characters")

    bound = structlog.contextvars.get_contextvars()
    assert bound["correlation_id"] == "corr-1"
    assert bound["account_id"] == "player1"
    assert bound["path"] == "/api/characters"

    clear_request_context()
    assert structlog.contextvars.get_contextvars() == {}
