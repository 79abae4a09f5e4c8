"""Salted key derivation for the token store.

Keys are SHA-256 hex digests of ``salt + value``. The salt defaults to the
host name so that cache directories copied between hosts do not match.
Keys are not reversible; the store never holds a username in clear.
"""

from __future__ import annotations

import hashlib
import socket

from mfa_cache.exceptions import UsageError

__all__ = [
    "IdentityHasher",
    "default_salt",
]


def default_salt() -> str:
    """Return the local host name, the process-wide salt."""
    return socket.gethostname()


class IdentityHasher:
    """Derives Identity Keys and Pair Keys.

    The salt is injected at construction, so tests can use a fixed value
    instead of the real host name.

    Usage:
        hasher = IdentityHasher(salt="host1")
        hasher.identity_key("doe")
        hasher.pair_key("doe", "203.0.113.5")
    """

    def __init__(self, salt: str) -> None:
        self._salt = salt

    @property
    def salt(self) -> str:
        return self._salt

    def hash(self, value: str) -> str:
        """Hash a string with the salt.

        Args:
            value: Non-empty string (typically a username).

        Returns:
            64-char lowercase hex digest.

        Raises:
            UsageError: If value is empty.
        """
        if not value:
            raise UsageError("Cannot hash an empty string")
        return hashlib.sha256(f"{self._salt}{value}".encode("utf-8")).hexdigest()

    def identity_key(self, user: str) -> str:
        """Key for a user's namespace directory."""
        if not user:
            raise UsageError("User must not be empty")
        return self.hash(user)

    def pair_key(self, user: str, remote_host: str) -> str:
        """Key for one (user, remote host) marker.

        The remote host may be empty for local logins. The marker path also
        contains the identity key, so the plain concatenation cannot make two
        different pairs share a path.
        """
        if not user:
            raise UsageError("User must not be empty")
        return self.hash(f"{user}{remote_host}")
