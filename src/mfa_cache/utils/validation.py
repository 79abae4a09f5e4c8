"""Validation utilities for mfa-cache.

Provides reusable validation functions for keys and CLI values.
"""

from __future__ import annotations

from mfa_cache.exceptions import UsageError

__all__ = [
    "SHA256_HEX_LENGTH",
    "is_sha256_hex",
    "parse_minutes",
    "validate_minutes",
]

# SHA-256 hash is 256 bits = 32 bytes = 64 hex characters
SHA256_HEX_LENGTH: int = 64

# Valid hexadecimal characters (lowercase)
_SHA256_VALID_CHARS: frozenset[str] = frozenset("0123456789abcdef")


def is_sha256_hex(value: str) -> bool:
    """Check whether a name looks like a key produced by IdentityHasher.

    Only lowercase digests are accepted, since that is what the hasher
    writes. Used to skip foreign entries under the cache root.

    Args:
        value: Directory or file name.

    Returns:
        True if value is exactly 64 lowercase hex characters.
    """
    if len(value) != SHA256_HEX_LENGTH:
        return False
    return all(c in _SHA256_VALID_CHARS for c in value)


def validate_minutes(value: object) -> int:
    """Validate a TTL window passed programmatically.

    Args:
        value: Candidate number of minutes.

    Returns:
        The value, unchanged.

    Raises:
        UsageError: If value is not a non-negative int (bools are rejected).
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise UsageError(f"Minutes must be an integer, got {value!r}")
    if value < 0:
        raise UsageError(f"Minutes must not be negative, got {value}")
    return value


def parse_minutes(value: str) -> int:
    """Parse a TTL window given on the command line.

    Malformed input is a usage error, never silently treated as zero.

    Example:
        >>> parse_minutes("60")
        60
    """
    text = value.strip()
    if not text.isdigit() or not text.isascii():
        raise UsageError(f"Minutes must be a non-negative integer, got {value!r}")
    return int(text)
