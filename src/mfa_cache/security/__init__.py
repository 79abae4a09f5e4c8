"""Security module for key derivation and login identity.

This module provides:
- Salted key derivation for users and (user, host) pairs
- Identity resolution from the PAM ambient context
"""

from mfa_cache.security.hasher import IdentityHasher, default_salt
from mfa_cache.security.identity import (
    LoginIdentity,
    identity_from_environment,
    resolve_identity,
)

__all__ = [
    # Key derivation
    "IdentityHasher",
    "default_salt",
    # Identity
    "LoginIdentity",
    "identity_from_environment",
    "resolve_identity",
]
