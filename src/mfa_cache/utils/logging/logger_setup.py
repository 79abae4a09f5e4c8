"""Logger configuration.

Two loggers are used:
- system (mfa-cache.system): plain text on stderr, for operators and for the
  PAM log when pam_exec is run with log=
- audit (mfa-cache.audit.cache): JSONL file, one event per line, enabled when
  logging.audit_log is configured

Both loggers set propagate=False so the host application's root logger
configuration never duplicates or swallows them.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import IO

from mfa_cache.constants import SYSTEM_LOGGER_NAME

__all__ = [
    "AuditFileHandler",
    "ISO8601JSONFormatter",
    "get_system_logger",
    "setup_audit_logger",
    "setup_system_logger",
]

_SYSTEM_FORMAT = "mfa-cache: %(levelname)s: %(message)s"


class ISO8601JSONFormatter(logging.Formatter):
    """Format dict log messages as a single JSON line.

    The record's creation time is added as an ISO-8601 UTC "time" field,
    placed first. Non-dict messages are logged under "message".
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, object] = {"time": timestamp.isoformat(timespec="milliseconds")}
        if isinstance(record.msg, dict):
            entry.update(record.msg)
        else:
            entry["message"] = record.getMessage()
        return json.dumps(entry, default=str)


class AuditFileHandler(logging.FileHandler):
    """JSONL file handler that reports write failures on the system logger.

    logging.Handler.handleError would print a traceback to stderr, which
    pam_exec copies into the PAM log. Instead the failure is counted, so
    callers can tell that a record was lost, and logged as one warning line.

    Attributes:
        failures: Number of records that could not be written.
    """

    def __init__(self, filename: Path, encoding: str = "utf-8") -> None:
        super().__init__(filename, mode="a", encoding=encoding)
        self.failures = 0

    def _report_failure(self, error: BaseException | None) -> None:
        self.failures += 1
        get_system_logger().warning("Audit log write failed (%s): %s", self.baseFilename, error)

    def handleError(self, record: logging.LogRecord) -> None:
        self._report_failure(sys.exc_info()[1])

    def flush(self) -> None:
        # Buffered bytes from a failed write are retried (and fail) on every
        # flush, including the one in close().
        try:
            super().flush()
        except OSError as e:
            self._report_failure(e)

    def close(self) -> None:
        try:
            super().close()
        except OSError as e:
            self._report_failure(e)


def get_system_logger() -> logging.Logger:
    """Return the system logger (configure it with setup_system_logger)."""
    return logging.getLogger(SYSTEM_LOGGER_NAME)


def setup_system_logger(log_level: str = "WARNING", stream: IO[str] | None = None) -> logging.Logger:
    """Configure the system logger to write to stderr.

    Idempotent: existing handlers are replaced, so repeated CLI invocations
    in one process (tests) do not stack handlers.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING).
        stream: Output stream (defaults to sys.stderr at call time).

    Returns:
        Configured logger.
    """
    logger = get_system_logger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(_SYSTEM_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(log_level)
    logger.propagate = False
    return logger


def setup_audit_logger(name: str, log_path: Path | None) -> logging.Logger:
    """Configure a JSONL audit logger.

    Creates parent directories of log_path if needed. With log_path None the
    logger gets a NullHandler, so audit calls are no-ops.

    Args:
        name: Logger name.
        log_path: Path to the .jsonl file, or None to disable.

    Returns:
        Configured logger.

    Raises:
        OSError: If the log directory or file cannot be opened.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.INFO)
    logger.propagate = False

    if log_path is None:
        logger.addHandler(logging.NullHandler())
        return logger

    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = AuditFileHandler(log_path)
    handler.setFormatter(ISO8601JSONFormatter())
    logger.addHandler(handler)
    return logger
