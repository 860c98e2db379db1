"""Unit tests for digests and password hashing."""

import hashlib

from temporium.core.hashing import (
    DIGEST_HEX_LENGTH,
    EMPTY_DIGEST,
    digest,
    hash_password,
    verify_password,
)


class TestDigest:
    """Tests for the payload digest."""

    def test_empty_input_is_stable(self) -> None:
        """Test that the digest of no bytes is the well-known SHA-256 value."""
        expected = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        assert digest(b"") == expected
        assert EMPTY_DIGEST == expected

    def test_lowercase_hex_of_fixed_width(self) -> None:
        """Test that digests are 64 lowercase hex characters."""
        value = digest(b"temporium")
        assert len(value) == DIGEST_HEX_LENGTH
        assert value == value.lower()
        int(value, 16)

    def test_deterministic(self) -> None:
        """Test that the same bytes always give the same digest."""
        assert digest(b"\x00\x01\x02") == digest(b"\x00\x01\x02")
        assert digest(b"a") != digest(b"b")


class TestPasswordHashing:
    """Tests for username-salted password hashes."""

    def test_salt_wraps_password(self) -> None:
        """Test that the hash is SHA-256 of salt + password + salt."""
        expected = hashlib.sha256(b"bobsecretbob").hexdigest()
        assert hash_password("secret", "bob") == expected

    def test_salt_changes_hash(self) -> None:
        """Test that a different username gives a different hash."""
        assert hash_password("secret", "bob") != hash_password("secret", "bob2")

    def test_verify_password(self) -> None:
        """Test that verification accepts the right password only."""
        stored = hash_password("secret", "bob")
        assert verify_password("secret", stored, "bob")
        assert not verify_password("wrong", stored, "bob")
        assert not verify_password("secret", stored, "alice")

    def test_verify_ignores_hex_case(self) -> None:
        """Test that an uppercase stored hash still verifies."""
        stored = hash_password("secret", "bob").upper()
        assert verify_password("secret", stored, "bob")

    def test_non_ascii_credentials(self) -> None:
        """Test that non-ASCII usernames and passwords hash as UTF-8."""
        expected = hashlib.sha256("юзерпарольюзер".encode()).hexdigest()
        assert hash_password("пароль", "юзер") == expected
