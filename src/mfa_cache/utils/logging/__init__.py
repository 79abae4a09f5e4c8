"""Logger setup for mfa-cache."""

from mfa_cache.utils.logging.logger_setup import (
    AuditFileHandler,
    ISO8601JSONFormatter,
    get_system_logger,
    setup_audit_logger,
    setup_system_logger,
)

__all__ = [
    "AuditFileHandler",
    "ISO8601JSONFormatter",
    "get_system_logger",
    "setup_audit_logger",
    "setup_system_logger",
]
