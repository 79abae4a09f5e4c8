"""Cache operations: Check, Add and Remove.

The PAM stack calls check before presenting the multi-factor challenge and
skips the challenge when it succeeds. After a successful challenge it calls
add. remove is an operator action that revokes cached trust.

Expiry is lazy: there is no sweeper, a stale marker is deleted by the Check
that finds it. Check and a concurrent Add can race (Check decides a marker is
stale, Add finds it present and does nothing, Check deletes it). The next
login then gets the challenge again, which is the safe direction.

Example:
    cache = TokenCache(FilesystemTokenStore("/var/tmp/2fa"), IdentityHasher("host1"))
    cache.add("doe", "203.0.113.5")
    cache.check("doe", "203.0.113.5", 60).valid   # True
    cache.check("doe", "203.0.113.9", 60).valid   # False
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from mfa_cache.exceptions import MultipleTargetsError, UsageError
from mfa_cache.security.hasher import IdentityHasher
from mfa_cache.store.base import TokenStore
from mfa_cache.telemetry.audit_logger import CacheAuditLogger, create_audit_logger
from mfa_cache.utils.logging.logger_setup import get_system_logger
from mfa_cache.utils.validation import validate_minutes

__all__ = [
    "AddResult",
    "CheckReason",
    "CheckResult",
    "RemovalPlan",
    "RemovalResult",
    "TokenCache",
]

logger = get_system_logger()


class CheckReason(str, Enum):
    """Why a Check came out the way it did."""

    FRESH = "fresh"
    EXPIRED = "expired"
    NO_CACHE_ROOT = "no_cache_root"
    NO_NAMESPACE = "no_namespace"
    NO_MARKER = "no_marker"


@dataclass(frozen=True)
class CheckResult:
    """Outcome of a Check.

    Attributes:
        valid: True only when a fresh marker exists.
        reason: Detail for logging; callers gate on valid alone.
        age_minutes: Marker age when one was found.
    """

    valid: bool
    reason: CheckReason
    age_minutes: int | None = None


@dataclass(frozen=True)
class AddResult:
    """Outcome of an Add. created is False when the marker already existed."""

    identity_key: str
    pair_key: str
    created: bool


@dataclass(frozen=True)
class RemovalPlan:
    """Targets enumerated by Remove before anything is deleted.

    Attributes:
        namespaces: Identity keys of namespace directories to remove.
        markers: (identity key, pair key) of markers to delete.
    """

    namespaces: tuple[str, ...] = ()
    markers: tuple[tuple[str, str], ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.namespaces and not self.markers

    @property
    def needs_force(self) -> bool:
        """More than one namespace or more than one marker."""
        return len(self.namespaces) > 1 or len(self.markers) > 1


@dataclass(frozen=True)
class RemovalResult:
    """Outcome of a Remove."""

    plan: RemovalPlan
    markers_removed: int = 0
    namespaces_removed: int = 0
    kept_namespaces: tuple[str, ...] = ()


class TokenCache:
    """Check/Add/Remove over a TokenStore.

    Args:
        store: Storage backend.
        hasher: Key derivation with the host salt.
        audit: Audit logger (defaults to a no-op logger).
        clock: Current time in seconds, injectable for tests.
    """

    def __init__(
        self,
        store: TokenStore,
        hasher: IdentityHasher,
        audit: CacheAuditLogger | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._hasher = hasher
        self._audit = audit if audit is not None else create_audit_logger(None)
        self._clock = clock

    @property
    def store(self) -> TokenStore:
        return self._store

    @property
    def hasher(self) -> IdentityHasher:
        return self._hasher

    # -------------------------------------------------------------------------
    # Check
    # -------------------------------------------------------------------------

    def check(self, user: str, remote_host: str, max_minutes: int) -> CheckResult:
        """Decide whether a cached success is fresh enough to skip the challenge.

        A marker whose age in whole minutes exceeds max_minutes is deleted
        (lazy eviction), together with its namespace if that leaves it empty.
        A fresh marker is left untouched: trust does not slide.

        Args:
            user: Account name.
            remote_host: Originating host (may be empty).
            max_minutes: Freshness window, a non-negative int.

        Returns:
            CheckResult; valid is False for every missing piece of state,
            including a missing cache root.

        Raises:
            UsageError: If max_minutes is malformed or user is empty.
            CacheStorageError: On unexpected I/O failure.
        """
        validate_minutes(max_minutes)
        identity_key = self._hasher.identity_key(user)

        if not self._store.root_exists():
            return self._invalid(CheckReason.NO_CACHE_ROOT, max_minutes)
        if not self._store.namespace_exists(identity_key):
            return self._invalid(CheckReason.NO_NAMESPACE, max_minutes, identity_key)

        pair_key = self._hasher.pair_key(user, remote_host)
        age = self._store.marker_age(identity_key, pair_key, now=self._clock())
        if age is None:
            return self._invalid(CheckReason.NO_MARKER, max_minutes, identity_key, pair_key)

        if age > max_minutes:
            self._store.delete_marker(identity_key, pair_key)
            self._store.delete_namespace_if_empty(identity_key)
            logger.info("Evicted token aged %d min (window %d min)", age, max_minutes)
            self._audit.log_token_expired(
                identity_key=identity_key,
                pair_key=pair_key,
                age_minutes=age,
                max_minutes=max_minutes,
            )
            return CheckResult(valid=False, reason=CheckReason.EXPIRED, age_minutes=age)

        self._audit.log_token_valid(
            identity_key=identity_key,
            pair_key=pair_key,
            age_minutes=age,
            max_minutes=max_minutes,
        )
        return CheckResult(valid=True, reason=CheckReason.FRESH, age_minutes=age)

    def _invalid(
        self,
        reason: CheckReason,
        max_minutes: int,
        identity_key: str | None = None,
        pair_key: str | None = None,
    ) -> CheckResult:
        logger.debug("No valid token: %s", reason.value)
        self._audit.log_token_invalid(
            reason=reason.value,
            max_minutes=max_minutes,
            identity_key=identity_key,
            pair_key=pair_key,
        )
        return CheckResult(valid=False, reason=reason)

    # -------------------------------------------------------------------------
    # Add
    # -------------------------------------------------------------------------

    def add(self, user: str, remote_host: str) -> AddResult:
        """Record a successful challenge for (user, remote_host).

        Create-if-absent: a duplicate Add keeps the original timestamp, so
        repeated logins inside the window do not extend it.

        Raises:
            UsageError: If user is empty.
            CacheStorageError: On unexpected I/O failure.
        """
        identity_key = self._hasher.identity_key(user)
        pair_key = self._hasher.pair_key(user, remote_host)
        self._store.ensure_namespace(identity_key)
        created = self._store.create_marker_if_absent(identity_key, pair_key)
        if created:
            logger.info("Added token")
        else:
            logger.debug("Token already present, timestamp kept")
        self._audit.log_token_added(identity_key=identity_key, pair_key=pair_key, created=created)
        return AddResult(identity_key=identity_key, pair_key=pair_key, created=created)

    # -------------------------------------------------------------------------
    # Remove
    # -------------------------------------------------------------------------

    def plan_removal(self, user: str | None = None, remote_host: str | None = None) -> RemovalPlan:
        """Enumerate what a Remove would delete, without deleting.

        - no user: every namespace and all of their markers
        - user only: that user's namespace and its markers
        - user and remote_host: that one marker

        Targets that do not exist are left out of the plan.

        Raises:
            UsageError: If remote_host is given without user, or user is empty.
        """
        if user is None:
            if remote_host is not None:
                raise UsageError("A remote host needs a user")
            namespaces = tuple(self._store.list_namespaces())
            return RemovalPlan(namespaces=namespaces, markers=self._markers_in(namespaces))

        identity_key = self._hasher.identity_key(user)
        if remote_host is None:
            if not self._store.namespace_exists(identity_key):
                return RemovalPlan()
            namespaces = (identity_key,)
            return RemovalPlan(namespaces=namespaces, markers=self._markers_in(namespaces))

        pair_key = self._hasher.pair_key(user, remote_host)
        if self._store.marker_age(identity_key, pair_key, now=self._clock()) is None:
            return RemovalPlan()
        return RemovalPlan(markers=((identity_key, pair_key),))

    def _markers_in(self, namespaces: tuple[str, ...]) -> tuple[tuple[str, str], ...]:
        return tuple(
            (identity_key, pair_key)
            for identity_key in namespaces
            for pair_key in self._store.list_markers(identity_key)
        )

    def remove(
        self,
        user: str | None = None,
        remote_host: str | None = None,
        *,
        force: bool = False,
    ) -> RemovalResult:
        """Revoke cached trust.

        The whole target set is enumerated first. Without force, a plan with
        more than one namespace or more than one marker is refused before
        anything is deleted.

        Markers are deleted first, then namespaces; a namespace that gained a
        marker in the meantime is kept.

        Raises:
            MultipleTargetsError: Unforced Remove with multiple targets.
            UsageError: Bad argument shape.
            CacheStorageError: On unexpected I/O failure.
        """
        plan = self.plan_removal(user, remote_host)
        if plan.needs_force and not force:
            self._audit.log_remove_refused(markers=len(plan.markers), namespaces=len(plan.namespaces))
            raise MultipleTargetsError(plan)

        markers_removed = sum(
            1 for identity_key, pair_key in plan.markers if self._store.delete_marker(identity_key, pair_key)
        )
        kept: list[str] = []
        namespaces_removed = 0
        for identity_key in plan.namespaces:
            if self._store.delete_namespace_if_empty(identity_key):
                namespaces_removed += 1
            elif self._store.namespace_exists(identity_key):
                kept.append(identity_key)

        if kept:
            logger.warning("%d namespace(s) not empty after removal, kept", len(kept))
        logger.info("Removed %d token(s), %d namespace(s)", markers_removed, namespaces_removed)
        self._audit.log_tokens_removed(markers=markers_removed, namespaces=namespaces_removed, forced=force)
        return RemovalResult(
            plan=plan,
            markers_removed=markers_removed,
            namespaces_removed=namespaces_removed,
            kept_namespaces=tuple(kept),
        )
