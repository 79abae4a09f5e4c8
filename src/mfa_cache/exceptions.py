"""Exceptions for mfa-cache.

Missing namespaces or markers are not errors: Check reports them as an
Invalid result and Remove as an empty plan.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mfa_cache.cache import RemovalPlan

__all__ = [
    "CacheError",
    "CacheStorageError",
    "MultipleTargetsError",
    "UsageError",
]


class CacheError(Exception):
    """Base class for all mfa-cache errors."""


class UsageError(CacheError, ValueError):
    """Wrong argument count, shape or value."""


class MultipleTargetsError(CacheError):
    """Remove would affect more than one marker or namespace without force.

    Raised before any deletion, so the store is unchanged.

    Attributes:
        plan: The enumerated targets that caused the refusal.
    """

    def __init__(self, plan: "RemovalPlan") -> None:
        self.plan = plan
        super().__init__(
            f"Multiple files or directories to remove "
            f"({len(plan.markers)} tokens, {len(plan.namespaces)} users). "
            "Use '--force' to proceed."
        )


class CacheStorageError(CacheError, OSError):
    """Unexpected I/O failure in the token store."""
