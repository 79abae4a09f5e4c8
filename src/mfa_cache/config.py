"""Application configuration for mfa-cache.

Defines configuration models for the cache store, the trust window and
logging. The config file is optional: without one, built-in defaults apply.
It lives at the system config location (via platformdirs.site_config_dir),
because the PAM stack runs the tool as root, not as the logging-in user.

Example usage:
    # Load from config file
    config = AppConfig.load_from_files(config_path)

    # Save new configuration
    config.save_to_file(config_path)
"""

import json
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from mfa_cache.constants import (
    CONFIG_DIR,
    CONFIG_FILENAME,
    DEFAULT_CACHE_DIR,
    DEFAULT_TTL_MINUTES,
)
from mfa_cache.security.hasher import default_salt
from mfa_cache.utils.file_helpers import load_validated_json, require_file_exists


def get_config_path() -> Path:
    """Return the default config file path."""
    return Path(CONFIG_DIR) / CONFIG_FILENAME


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging configuration settings.

    Attributes:
        log_level: Level of the stderr system logger. pam_exec captures
            stderr into the PAM log when run with log=, so the default
            stays quiet.
        audit_log: Path to a JSONL audit trail of cache operations, or None
            to disable it.
    """

    log_level: Literal["DEBUG", "INFO", "WARNING"] = "WARNING"
    audit_log: str | None = None


# =============================================================================
# Application Configuration
# =============================================================================


class AppConfig(BaseModel):
    """Main application configuration for mfa-cache.

    Attributes:
        cache_dir: Root of the token store.
        ttl_minutes: Freshness window used when check is not given one.
        salt: Hash salt. None means the host name, which is what existing
            caches on this host were written with.
        logging: Logging configuration.
    """

    cache_dir: str = DEFAULT_CACHE_DIR
    ttl_minutes: int = Field(default=DEFAULT_TTL_MINUTES, ge=0)
    salt: Annotated[str, Field(min_length=1)] | None = None
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def resolved_salt(self) -> str:
        """Configured salt, or the host name."""
        return self.salt if self.salt is not None else default_salt()

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to JSON file.

        Creates parent directories if they don't exist.

        Args:
            config_path: Path where mfa_cache_config.json should be saved.
        """
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(), f, indent=2)

        config_path.chmod(0o644)

    @classmethod
    def load_from_files(cls, config_path: Path) -> "AppConfig":
        """Load configuration from JSON file.

        Args:
            config_path: Path to the config file (mfa_cache_config.json).

        Returns:
            AppConfig instance with loaded configuration.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            ValueError: If config file is invalid.
        """
        require_file_exists(config_path, file_type="configuration")
        return load_validated_json(
            config_path,
            cls,
            file_type="config",
            recovery_hint="Run 'mfa-cache config init --force' to reset it.",
            encoding="utf-8",
        )

    @classmethod
    def load_or_default(cls, config_path: Path | None = None) -> "AppConfig":
        """Load the config file, or defaults if it does not exist.

        Args:
            config_path: Explicit path, or None for the default location.
                An explicit path must exist.

        Raises:
            FileNotFoundError: If an explicit config_path doesn't exist.
            ValueError: If the config file is invalid.
        """
        if config_path is None:
            default_path = get_config_path()
            if not default_path.exists():
                return cls()
            config_path = default_path
        return cls.load_from_files(config_path)
