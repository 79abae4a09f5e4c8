"""Audit logging for cache operations."""

from mfa_cache.telemetry.audit_logger import CacheAuditLogger, create_audit_logger
from mfa_cache.telemetry.models import CacheEvent

__all__ = [
    "CacheAuditLogger",
    "CacheEvent",
    "create_audit_logger",
]
