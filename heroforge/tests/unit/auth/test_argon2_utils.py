"""Tests for Argon2 password hashing utilities."""

from heroforge.auth.argon2_utils import hash_password, needs_rehash, verify_password


class TestArgon2Hashing:
    """Hash generation and verification."""

    def test_hash_password_produces_argon2id(self):
        hashed = hash_password("secret1")

        assert hashed.startswith("$argon2id$")
        assert "secret1" not in hashed

    def test_hashes_are_salted(self):
        """The same password hashes differently each time."""
        assert hash_password("secret1") != hash_password("secret1")

    def test_verify_correct_password(self):
        assert verify_password("secret1", hash_password("secret1")) is True

    def test_verify_wrong_password(self):
        assert verify_password("secret2", hash_password("secret1")) is False

    def test_verify_empty_hash(self):
        assert verify_password("secret1", "") is False

    def test_verify_invalid_hash(self):
        assert verify_password("secret1", "not-a-hash") is False


class TestRehash:
    """Parameter drift detection."""

    def test_current_hash_does_not_need_rehash(self):
        assert needs_rehash(hash_password("secret1")) is False

    def test_foreign_hash_needs_rehash(self):
        assert needs_rehash("$2b$12$abcdefghijklmnopqrstuv") is True
