"""Filesystem token store.

Layout:
    <root>/
    └── <identity key>/          # one per user, mode 0700
        ├── <pair key>           # empty marker, mode 0600, mtime = grant time
        └── <pair key>

The store does no locking. Concurrent logins share the directory tree, so
every primitive treats "already exists" and "already gone" as success.
Other OSErrors are wrapped in CacheStorageError and propagate.
"""

from __future__ import annotations

import errno
import logging
from pathlib import Path

from mfa_cache.constants import (
    MARKER_FILE_MODE,
    NAMESPACE_DIR_MODE,
    SECONDS_PER_MINUTE,
    SYSTEM_LOGGER_NAME,
)
from mfa_cache.exceptions import CacheStorageError
from mfa_cache.utils.validation import is_sha256_hex

logger = logging.getLogger(SYSTEM_LOGGER_NAME)

# rmdir on a non-empty directory: ENOTEMPTY on Linux, EEXIST on some Unixes
_NOT_EMPTY_ERRNOS = frozenset({errno.ENOTEMPTY, errno.EEXIST})


class FilesystemTokenStore:
    """Token store backed by a directory of directories.

    Args:
        root: Cache root directory. It is created by the first Add, never
            by a Check.
    """

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    # -------------------------------------------------------------------------
    # Path construction
    # -------------------------------------------------------------------------

    def namespace_dir(self, identity_key: str) -> Path:
        return self._root / identity_key

    def marker_path(self, identity_key: str, pair_key: str) -> Path:
        return self._root / identity_key / pair_key

    # -------------------------------------------------------------------------
    # TokenStore protocol
    # -------------------------------------------------------------------------

    def root_exists(self) -> bool:
        return self._root.is_dir()

    def namespace_exists(self, identity_key: str) -> bool:
        return self.namespace_dir(identity_key).is_dir()

    def ensure_namespace(self, identity_key: str) -> None:
        path = self.namespace_dir(identity_key)
        try:
            path.mkdir(mode=NAMESPACE_DIR_MODE, parents=True, exist_ok=True)
        except OSError as e:
            raise CacheStorageError(f"Cannot create namespace {path}: {e}") from e

    def create_marker_if_absent(self, identity_key: str, pair_key: str) -> bool:
        path = self.marker_path(identity_key, pair_key)
        try:
            return self._touch_exclusive(path)
        except FileNotFoundError:
            # A concurrent Check evicted the last marker and removed the
            # namespace between ensure_namespace and here.
            logger.debug("Namespace vanished before marker create, retrying: %s", path.parent)
            self.ensure_namespace(identity_key)
            try:
                return self._touch_exclusive(path)
            except OSError as e:
                raise CacheStorageError(f"Cannot create marker {path}: {e}") from e
        except OSError as e:
            raise CacheStorageError(f"Cannot create marker {path}: {e}") from e

    def marker_age(self, identity_key: str, pair_key: str, *, now: float) -> int | None:
        path = self.marker_path(identity_key, pair_key)
        try:
            mtime = path.stat().st_mtime
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheStorageError(f"Cannot stat marker {path}: {e}") from e
        return int((now - mtime) // SECONDS_PER_MINUTE)

    def delete_marker(self, identity_key: str, pair_key: str) -> bool:
        path = self.marker_path(identity_key, pair_key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise CacheStorageError(f"Cannot delete marker {path}: {e}") from e
        return True

    def delete_namespace_if_empty(self, identity_key: str) -> bool:
        path = self.namespace_dir(identity_key)
        try:
            path.rmdir()
        except FileNotFoundError:
            return False
        except OSError as e:
            if e.errno in _NOT_EMPTY_ERRNOS:
                logger.debug("Namespace not empty, kept: %s", path)
                return False
            raise CacheStorageError(f"Cannot delete namespace {path}: {e}") from e
        return True

    def list_namespaces(self) -> list[str]:
        return sorted(
            entry.name
            for entry in self._iterdir(self._root)
            if is_sha256_hex(entry.name) and entry.is_dir()
        )

    def list_markers(self, identity_key: str) -> list[str]:
        return sorted(
            entry.name
            for entry in self._iterdir(self.namespace_dir(identity_key))
            if is_sha256_hex(entry.name) and entry.is_file()
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _touch_exclusive(path: Path) -> bool:
        """Create path with O_EXCL semantics; False if it already exists."""
        try:
            path.touch(mode=MARKER_FILE_MODE, exist_ok=False)
        except FileExistsError:
            return False
        return True

    @staticmethod
    def _iterdir(path: Path) -> list[Path]:
        """List a directory, treating a missing one as empty."""
        try:
            return list(path.iterdir())
        except (FileNotFoundError, NotADirectoryError):
            return []
        except OSError as e:
            raise CacheStorageError(f"Cannot list {path}: {e}") from e
