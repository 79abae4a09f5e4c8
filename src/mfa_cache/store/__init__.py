"""Token store backends.

This module provides:
- TokenStore: protocol consumed by the cache operations
- FilesystemTokenStore: production store, <root>/<identity key>/<pair key>
- InMemoryTokenStore: dict-backed store for tests
"""

from mfa_cache.store.base import TokenStore
from mfa_cache.store.filesystem import FilesystemTokenStore
from mfa_cache.store.memory import InMemoryTokenStore

__all__ = [
    "TokenStore",
    "FilesystemTokenStore",
    "InMemoryTokenStore",
]
