"""Tests for key derivation and login identity resolution.

Tests cover:
- IdentityHasher determinism, salting and distinctness
- PAM environment fallback in resolve_identity
- Minutes parsing and validation
"""

from __future__ import annotations

import hashlib

import pytest

from mfa_cache.constants import PAM_RHOST_ENV, PAM_USER_ENV
from mfa_cache.exceptions import UsageError
from mfa_cache.security.hasher import IdentityHasher, default_salt
from mfa_cache.security.identity import (
    LoginIdentity,
    identity_from_environment,
    resolve_identity,
)
from mfa_cache.utils.validation import is_sha256_hex, parse_minutes, validate_minutes


@pytest.fixture
def hasher() -> IdentityHasher:
    """Hasher with a fixed salt."""
    return IdentityHasher(salt="test-host")


# ============================================================================
# Tests: IdentityHasher
# ============================================================================


class TestIdentityHasher:
    """Tests for IdentityHasher."""

    def test_hash_is_sha256_of_salt_and_value(self, hasher):
        """Digest matches sha256(salt + value), the on-disk layout."""
        expected = hashlib.sha256(b"test-hostdoe").hexdigest()

        assert hasher.hash("doe") == expected

    def test_hash_is_64_lowercase_hex(self, hasher):
        """Digest is a 64-char lowercase hex string."""
        assert is_sha256_hex(hasher.hash("doe"))

    def test_hash_is_stable(self, hasher):
        """Repeated calls return the same digest."""
        assert hasher.hash("doe") == hasher.hash("doe")
        assert IdentityHasher("test-host").hash("doe") == hasher.hash("doe")

    def test_distinct_inputs_give_distinct_hashes(self, hasher):
        """No collisions in a small corpus."""
        corpus = ["doe", "Doe", "doe ", "root", "alice", "bob", "a", "b", "ab", "ba"]
        corpus += [f"user{i}" for i in range(200)]

        digests = {hasher.hash(value) for value in corpus}

        assert len(digests) == len(corpus)

    def test_salt_changes_hash(self):
        """Different hosts produce different keys for the same user."""
        assert IdentityHasher("host-a").hash("doe") != IdentityHasher("host-b").hash("doe")

    def test_empty_string_rejected(self, hasher):
        """Hashing an empty string is a usage error."""
        with pytest.raises(UsageError):
            hasher.hash("")

    def test_identity_key_is_hash_of_user(self, hasher):
        """identity_key(user) == hash(user)."""
        assert hasher.identity_key("doe") == hasher.hash("doe")

    def test_pair_key_is_hash_of_user_and_host(self, hasher):
        """pair_key(user, host) == hash(user + host)."""
        assert hasher.pair_key("doe", "203.0.113.5") == hasher.hash("doe203.0.113.5")

    def test_pair_keys_differ_by_host(self, hasher):
        """Different hosts give different pair keys."""
        assert hasher.pair_key("doe", "203.0.113.5") != hasher.pair_key("doe", "203.0.113.9")

    def test_pair_key_allows_empty_host(self, hasher):
        """Local logins have no remote host."""
        assert hasher.pair_key("doe", "") == hasher.identity_key("doe")

    @pytest.mark.parametrize("method", ["identity_key", "pair_key"])
    def test_empty_user_rejected(self, hasher, method):
        """An empty user is a usage error for both key kinds."""
        args = ("",) if method == "identity_key" else ("", "203.0.113.5")

        with pytest.raises(UsageError):
            getattr(hasher, method)(*args)

    def test_default_salt_is_hostname(self, monkeypatch):
        """The default salt is the host name."""
        monkeypatch.setattr("socket.gethostname", lambda: "box1")

        assert default_salt() == "box1"


# ============================================================================
# Tests: Identity resolution
# ============================================================================


class TestResolveIdentity:
    """Tests for PAM environment fallback."""

    def test_reads_pam_environment(self):
        """PAM_USER and PAM_RHOST are used when nothing is given."""
        env = {PAM_USER_ENV: "doe", PAM_RHOST_ENV: "203.0.113.5"}

        assert resolve_identity(None, None, env) == LoginIdentity("doe", "203.0.113.5")

    def test_missing_rhost_means_local_login(self):
        """Unset PAM_RHOST gives an empty remote host."""
        assert identity_from_environment({PAM_USER_ENV: "doe"}) == LoginIdentity("doe", "")

    def test_missing_user_is_usage_error(self):
        """Without PAM_USER there is no identity."""
        with pytest.raises(UsageError):
            resolve_identity(None, None, {PAM_RHOST_ENV: "203.0.113.5"})

    def test_explicit_values_win(self):
        """Positional values override the environment."""
        env = {PAM_USER_ENV: "root", PAM_RHOST_ENV: "198.51.100.1"}

        assert resolve_identity("doe", "203.0.113.5", env) == LoginIdentity("doe", "203.0.113.5")

    def test_explicit_empty_user_rejected(self):
        """An empty explicit user is a usage error."""
        with pytest.raises(UsageError):
            resolve_identity("", "203.0.113.5", {})


# ============================================================================
# Tests: Validation
# ============================================================================


class TestMinutes:
    """Tests for minutes parsing and validation."""

    @pytest.mark.parametrize("text,expected", [("0", 0), ("60", 60), (" 15 ", 15)])
    def test_parse_valid(self, text, expected):
        assert parse_minutes(text) == expected

    @pytest.mark.parametrize("text", ["", "-1", "1.5", "abc", "60m", "١٢"])
    def test_parse_malformed(self, text):
        """Malformed minutes are never treated as zero."""
        with pytest.raises(UsageError):
            parse_minutes(text)

    @pytest.mark.parametrize("value", [-1, 1.0, "60", True, None])
    def test_validate_rejects(self, value):
        with pytest.raises(UsageError):
            validate_minutes(value)

    def test_validate_accepts_zero(self):
        assert validate_minutes(0) == 0


class TestIsSha256Hex:
    """Tests for is_sha256_hex."""

    def test_accepts_lowercase_digest(self):
        assert is_sha256_hex("a" * 64) is True

    @pytest.mark.parametrize("value", ["A" * 64, "a" * 63, "a" * 65, "g" * 64, "lost+found"])
    def test_rejects_other_names(self, value):
        assert is_sha256_hex(value) is False
