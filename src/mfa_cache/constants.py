"""Application-wide constants for mfa-cache.

Constants that define application behavior.
For user-configurable settings per deployment, see config.py.
"""

from platformdirs import site_config_dir

# ============================================================================
# Cache Storage
# ============================================================================

# Root of the two-level store: <cache_dir>/<identity key>/<pair key>
DEFAULT_CACHE_DIR: str = "/var/tmp/2fa"

# Permissions for namespace directories and marker files
NAMESPACE_DIR_MODE: int = 0o700
MARKER_FILE_MODE: int = 0o600

# ============================================================================
# Trust Window
# ============================================================================

# Default freshness window when the caller does not pass one (minutes)
DEFAULT_TTL_MINUTES: int = 60

SECONDS_PER_MINUTE: int = 60

# ============================================================================
# PAM Ambient Context
# ============================================================================

# Set by pam_exec.so for the invoked program
PAM_USER_ENV: str = "PAM_USER"
PAM_RHOST_ENV: str = "PAM_RHOST"

# ============================================================================
# Configuration
# ============================================================================

APP_NAME: str = "mfa-cache"

# System-wide config location (e.g. /etc/xdg/mfa-cache on Linux).
# PAM runs as root, so a per-user config dir would not be consulted.
CONFIG_DIR: str = site_config_dir(APP_NAME)
CONFIG_FILENAME: str = "mfa_cache_config.json"

CONFIG_ENV: str = "MFA_CACHE_CONFIG"
CACHE_DIR_ENV: str = "MFA_CACHE_DIR"

# ============================================================================
# Logging
# ============================================================================

SYSTEM_LOGGER_NAME: str = "mfa-cache.system"
AUDIT_LOGGER_NAME: str = "mfa-cache.audit.cache"

# Keys in audit events are truncated to this many hex chars
AUDIT_KEY_PREFIX_LENGTH: int = 12
