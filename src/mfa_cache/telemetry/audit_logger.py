"""Audit logger for cache operations.

Logs cache events to the configured audit JSONL file:
- Check outcomes (valid, invalid, expired with eviction)
- Token grants (add)
- Revocations and refused revocations (remove)

The audit trail is best effort: a failed write is reported on the system
logger and never changes whether a login is let through.
"""

from __future__ import annotations

import logging
from pathlib import Path

from mfa_cache.constants import AUDIT_KEY_PREFIX_LENGTH, AUDIT_LOGGER_NAME
from mfa_cache.telemetry.models import CacheEvent
from mfa_cache.utils.logging.logger_setup import AuditFileHandler, setup_audit_logger


def _short(key: str | None) -> str | None:
    return key[:AUDIT_KEY_PREFIX_LENGTH] if key else None


class CacheAuditLogger:
    """Audit logger for cache events.

    Usage:
        audit = create_audit_logger(Path("/var/log/mfa-cache/audit.jsonl"))
        audit.log_token_added(identity_key=..., pair_key=..., created=True)
    """

    def __init__(self, logger: logging.Logger) -> None:
        """Initialize audit logger.

        Args:
            logger: Logger with a JSONL handler (or a NullHandler).
        """
        self._logger = logger

    def _log_event(self, event: CacheEvent) -> bool:
        """Write an event.

        Returns:
            True if written, False if the handler failed.
        """
        event_data = event.model_dump(mode="json", exclude={"time"}, exclude_none=True)
        failures_before = self._failure_count()
        self._logger.info(event_data)
        return self._failure_count() == failures_before

    def _failure_count(self) -> int:
        """Write failures recorded by this logger's AuditFileHandlers."""
        return sum(h.failures for h in self._logger.handlers if isinstance(h, AuditFileHandler))

    def log_token_valid(self, *, identity_key: str, pair_key: str, age_minutes: int, max_minutes: int) -> bool:
        """Log a Check that let the login skip the challenge."""
        return self._log_event(
            CacheEvent(
                event_type="token_valid",
                status="Success",
                identity_key=_short(identity_key),
                pair_key=_short(pair_key),
                reason="fresh",
                age_minutes=age_minutes,
                max_minutes=max_minutes,
            )
        )

    def log_token_invalid(
        self,
        *,
        reason: str,
        max_minutes: int,
        identity_key: str | None = None,
        pair_key: str | None = None,
    ) -> bool:
        """Log a Check that found no usable marker."""
        return self._log_event(
            CacheEvent(
                event_type="token_invalid",
                status="Failure",
                identity_key=_short(identity_key),
                pair_key=_short(pair_key),
                reason=reason,
                max_minutes=max_minutes,
            )
        )

    def log_token_expired(self, *, identity_key: str, pair_key: str, age_minutes: int, max_minutes: int) -> bool:
        """Log a Check that evicted a stale marker."""
        return self._log_event(
            CacheEvent(
                event_type="token_expired",
                status="Failure",
                identity_key=_short(identity_key),
                pair_key=_short(pair_key),
                reason="expired",
                age_minutes=age_minutes,
                max_minutes=max_minutes,
            )
        )

    def log_token_added(self, *, identity_key: str, pair_key: str, created: bool) -> bool:
        """Log an Add. created=False means a marker was already present."""
        return self._log_event(
            CacheEvent(
                event_type="token_added",
                status="Success",
                identity_key=_short(identity_key),
                pair_key=_short(pair_key),
                reason="created" if created else "exists",
            )
        )

    def log_tokens_removed(self, *, markers: int, namespaces: int, forced: bool) -> bool:
        """Log a completed Remove."""
        return self._log_event(
            CacheEvent(
                event_type="tokens_removed",
                status="Success",
                markers=markers,
                namespaces=namespaces,
                forced=forced,
            )
        )

    def log_remove_refused(self, *, markers: int, namespaces: int) -> bool:
        """Log a Remove refused by the multiple-targets guard."""
        return self._log_event(
            CacheEvent(
                event_type="remove_refused",
                status="Failure",
                reason="multiple_targets",
                markers=markers,
                namespaces=namespaces,
                forced=False,
            )
        )


def create_audit_logger(log_path: Path | None = None) -> CacheAuditLogger:
    """Create an audit logger.

    A disabled logger uses its own logger name, so creating one never
    detaches the handler of an enabled audit logger.

    Args:
        log_path: Path to the audit .jsonl file, or None for a no-op logger.

    Returns:
        CacheAuditLogger writing to log_path.
    """
    if log_path is None:
        return CacheAuditLogger(setup_audit_logger(f"{AUDIT_LOGGER_NAME}.disabled", None))
    return CacheAuditLogger(setup_audit_logger(AUDIT_LOGGER_NAME, log_path))
