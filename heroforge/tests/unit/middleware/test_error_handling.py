"""Tests for standardized error responses and the error handling middleware."""

import json
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from starlette.exceptions import HTTPException

from heroforge.error_handlers.standardized_responses import StandardizedErrorResponse
from heroforge.error_types import ErrorReason
from heroforge.exceptions import (
    ConflictError,
    DatabaseError,
    ResourceNotFoundError,
    SessionRejectedError,
    ValidationError,
)


def _handler(include_details: bool = False) -> StandardizedErrorResponse:
    request = MagicMock()
    request.state.account_id = "player1"
    request.state.correlation_id = "corr-1"
    request.url.path = "/api/characters"
    request.method = "POST"
    return StandardizedErrorResponse(request=request, include_details=include_details)


class TestStandardizedErrorResponse:
    @pytest.mark.parametrize(
        ("error", "status_code", "reason"),
        [
            (ValidationError("bad", reason=ErrorReason.INVALID_ID), 400, "INVALID_ID"),
            (ConflictError("dup", reason=ErrorReason.DUPLICATE_NAME), 409, "DUPLICATE_NAME"),
            (ResourceNotFoundError("gone", reason=ErrorReason.NO_CHARACTER), 404, "NO_CHARACTER"),
            (SessionRejectedError("no", reason=ErrorReason.EXPIRED), 401, "EXPIRED"),
        ],
    )
    def test_status_by_category(self, error, status_code, reason):
        response = _handler().handle_exception(error)

        assert response.status_code == status_code
        body = json.loads(response.body)
        assert body["reason"] == reason
        assert set(body) >= {"message", "error_type", "reason"}

    def test_user_message_not_technical_message(self):
        error = ConflictError(
            "Character name claimed concurrently: Hero", user_friendly="character name is already in use"
        )

        response = _handler().handle_exception(error)

        assert b"claimed concurrently" not in response.body
        assert b"character name is already in use" in response.body

    def test_database_error_is_generic(self):
        response = _handler(include_details=False).handle_exception(
            DatabaseError("connection to 10.0.0.5 refused", operation="add_item")
        )

        assert response.status_code == 500
        assert b"10.0.0.5" not in response.body
        assert b"internal server error" in response.body

    def test_session_rejection_clears_cookie(self):
        response = _handler().handle_exception(
            SessionRejectedError("expired", reason=ErrorReason.EXPIRED, clear_session=True)
        )

        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("authorization=")
        assert "Max-Age=0" in set_cookie
        assert "HttpOnly" in set_cookie

    def test_session_rejection_without_clearing(self):
        response = _handler().handle_exception(
            SessionRejectedError("expired", reason=ErrorReason.EXPIRED, clear_session=False)
        )

        assert "set-cookie" not in response.headers

    def test_http_exception_mapping(self):
        response = _handler().handle_exception(HTTPException(status_code=404, detail="Not Found"))

        assert response.status_code == 404
        assert b'"reason":"NOT_FOUND"' in response.body

    def test_unknown_exception_is_500(self):
        response = _handler().handle_exception(KeyError("secret-internal-key"))

        assert response.status_code == 500
        assert b"secret-internal-key" not in response.body
        assert b'"reason":"INTERNAL"' in response.body


class TestMiddlewareIntegration:
    def test_unhandled_exception_becomes_500(self, app):
        @app.get("/api/explode")
        async def explode():
            raise RuntimeError("kaboom at /var/lib/heroforge")

        with TestClient(app) as client:
            response = client.get("/api/explode")

        assert response.status_code == 500
        assert response.json() == {
            "message": "internal server error",
            "error_type": "internal_error",
            "reason": "INTERNAL",
        }

    def test_unhandled_exception_logged_once(self, app, mocker):
        response_logger = mocker.patch("heroforge.error_handlers.standardized_responses.logger")
        middleware_logger = mocker.patch("heroforge.middleware.error_handling_middleware.logger")

        @app.get("/api/explode")
        async def explode():
            raise RuntimeError("kaboom")

        with TestClient(app) as client:
            assert client.get("/api/explode").status_code == 500

        assert response_logger.error.call_count == 1
        assert response_logger.error.call_args.args == ("Unhandled exception",)
        middleware_logger.error.assert_not_called()

    def test_unknown_route_is_standardized(self, client):
        response = client.get("/api/no-such-route")

        assert response.status_code == 404
        assert response.json()["reason"] == "NOT_FOUND"

    def test_malformed_json_body(self, client, signed_in_as):
        signed_in_as("player1")

        response = client.post(
            "/api/characters", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["reason"] == "INVALID_INPUT"
