"""Tests for sign-up, sign-in, sign-out and the session cookie."""

import pytest

from heroforge.auth.session_authority import SessionAuthority


class TestSignUp:
    def test_success_issues_no_session(self, client, sign_up):
        response = sign_up("player1", name="P1")

        assert response.status_code == 201
        assert response.json() == {"message": "sign-up complete", "account": {"id": "player1", "name": "P1"}}
        assert "set-cookie" not in response.headers

    def test_duplicate_id(self, sign_up):
        sign_up("player1")

        response = sign_up("player1")

        assert response.status_code == 409
        assert response.json()["reason"] == "DUPLICATE_ID"

    @pytest.mark.parametrize(
        ("body", "reason"),
        [
            ({"id": "Player1", "password": "secret1", "passwordCheck": "secret1", "name": "P1"}, "INVALID_ID"),
            ({"id": "player1", "password": "abc", "passwordCheck": "abc", "name": "P1"}, "WEAK_PASSWORD"),
            ({"id": "player1", "password": "secret1", "passwordCheck": "secret2", "name": "P1"}, "PASSWORD_MISMATCH"),
            ({"id": "player1", "password": "secret1", "passwordCheck": "secret1"}, "MISSING_NAME"),
            ({}, "INVALID_ID"),
            ({"id": "a" * 65, "password": "secret1", "passwordCheck": "secret1", "name": "P1"}, "INVALID_INPUT"),
        ],
    )
    def test_rule_violations(self, client, body, reason):
        response = client.post("/api/sign-up", json=body)

        assert response.status_code == 400
        assert response.json()["reason"] == reason


class TestSignIn:
    def test_sets_bearer_cookie(self, client, sign_up, sign_in):
        sign_up("player1", name="P1")

        response = sign_in("player1")

        assert response.status_code == 200
        assert response.json()["account"] == {"id": "player1", "name": "P1"}
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith('authorization="Bearer ')
        assert "HttpOnly" in set_cookie
        assert "SameSite=lax" in set_cookie

    def test_wrong_password_and_unknown_id_look_alike(self, client, sign_up, sign_in):
        sign_up("player1")

        wrong_password = sign_in("player1", "not-the-password")
        unknown_id = sign_in("nobody", "secret1")

        assert wrong_password.status_code == unknown_id.status_code == 401
        assert wrong_password.json()["message"] == unknown_id.json()["message"] == "invalid id or password"

    def test_missing_fields(self, client):
        response = client.post("/api/sign-in", json={"id": "player1"})

        assert response.status_code == 400
        assert response.json()["reason"] == "INVALID_INPUT"


class TestAccessGuard:
    def test_missing_cookie(self, client):
        response = client.get("/api/characters")

        assert response.status_code == 401
        assert response.json()["reason"] == "MISSING_TOKEN"

    def test_expired_session_clears_cookie(self, client, sign_up, session_authority):
        sign_up("player1")
        expired = SessionAuthority(
            session_authority.secret,
            lifetime_seconds=-60,
            audience=session_authority.audience,
            algorithm=session_authority.algorithm,
        )
        client.cookies.set("authorization", f"Bearer {expired.issue('player1')}")

        response = client.get("/api/characters")

        assert response.status_code == 401
        assert response.json()["message"] == "session expired"
        assert response.json()["reason"] == "EXPIRED"
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("authorization=")
        assert "Max-Age=0" in set_cookie

    def test_wrong_scheme(self, client, sign_up, session_authority):
        sign_up("player1")
        client.cookies.set("authorization", f"Token {session_authority.issue('player1')}")

        response = client.get("/api/characters")

        assert response.status_code == 401
        assert response.json()["reason"] == "WRONG_SCHEME"

    def test_tampered_token(self, client, sign_up, session_authority):
        sign_up("player1")
        token = session_authority.issue("player1")
        client.cookies.set("authorization", f"Bearer {token[:-4]}AAAA")

        response = client.get("/api/characters")

        assert response.status_code == 401
        assert response.json()["reason"] == "MALFORMED"

    def test_valid_token_for_vanished_account(self, client, session_authority):
        """A well-signed token whose account is not in the store is refused."""
        client.cookies.set("authorization", f"Bearer {session_authority.issue('ghost')}")

        response = client.get("/api/characters")

        assert response.status_code == 401
        assert response.json()["reason"] == "UNKNOWN_ACCOUNT"


def test_sign_out_ends_session(client, signed_in_as):
    signed_in_as("player1")
    assert client.get("/api/characters").status_code == 200

    response = client.post("/api/sign-out")

    assert response.status_code == 200
    assert response.json() == {"message": "sign-out complete"}
    assert client.get("/api/characters").status_code == 401
