"""Shared CLI state: configuration, loggers and the TokenCache.

The group callback stores a CliState on the click context; commands build
what they need from it lazily, so --help and --version never touch the
config file or the cache directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import click

from mfa_cache.cache import TokenCache
from mfa_cache.config import AppConfig
from mfa_cache.exceptions import UsageError
from mfa_cache.security.hasher import IdentityHasher
from mfa_cache.store.filesystem import FilesystemTokenStore
from mfa_cache.telemetry.audit_logger import create_audit_logger
from mfa_cache.utils.logging.logger_setup import setup_system_logger


@dataclass
class CliState:
    """Options given to the top-level group.

    Attributes:
        config_path: Explicit config file, or None for the default location.
        cache_dir: Overrides config.cache_dir when set.
    """

    config_path: Path | None = None
    cache_dir: Path | None = None
    _config: AppConfig | None = field(default=None, init=False, repr=False)

    def load_config(self) -> AppConfig:
        """Load configuration once.

        Raises:
            click.ClickException: If the config file is missing or invalid.
        """
        if self._config is None:
            try:
                config = AppConfig.load_or_default(self.config_path)
            except (FileNotFoundError, ValueError) as e:
                raise click.ClickException(f"Failed to load configuration: {e}") from e
            if self.cache_dir is not None:
                config = config.model_copy(update={"cache_dir": str(self.cache_dir)})
            self._config = config
        return self._config

    def hasher(self) -> IdentityHasher:
        return IdentityHasher(self.load_config().resolved_salt())

    def build_cache(self) -> TokenCache:
        """Create the TokenCache and configure logging for a cache command.

        Raises:
            click.ClickException: If the config or the audit log is unusable.
        """
        config = self.load_config()
        setup_system_logger(config.logging.log_level)
        audit_path = Path(config.logging.audit_log) if config.logging.audit_log else None
        try:
            audit = create_audit_logger(audit_path)
        except OSError as e:
            raise click.ClickException(f"Cannot open audit log {audit_path}: {e}") from e
        return TokenCache(
            store=FilesystemTokenStore(config.cache_dir),
            hasher=self.hasher(),
            audit=audit,
        )


pass_state = click.make_pass_decorator(CliState, ensure=True)


def usage_error(error: UsageError) -> click.UsageError:
    """Convert a UsageError into click's, which exits with status 2."""
    return click.UsageError(str(error), ctx=click.get_current_context(silent=True))
