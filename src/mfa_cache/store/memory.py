"""In-memory token store for tests.

Holds ``{identity_key: {pair_key: mtime}}``. Marker timestamps come from an
injectable clock so tests can age markers without sleeping.
"""

from __future__ import annotations

import time
from typing import Callable

from mfa_cache.constants import SECONDS_PER_MINUTE


class InMemoryTokenStore:
    """Dict-backed TokenStore.

    Args:
        clock: Returns the current time in seconds, used as marker mtime.
        root_exists: Whether the store starts initialized. An uninitialized
            store becomes initialized on the first ensure_namespace().
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        *,
        root_exists: bool = True,
    ) -> None:
        self._clock = clock
        self._root_exists = root_exists
        self._namespaces: dict[str, dict[str, float]] = {}

    def root_exists(self) -> bool:
        return self._root_exists

    def namespace_exists(self, identity_key: str) -> bool:
        return identity_key in self._namespaces

    def ensure_namespace(self, identity_key: str) -> None:
        self._root_exists = True
        self._namespaces.setdefault(identity_key, {})

    def create_marker_if_absent(self, identity_key: str, pair_key: str) -> bool:
        markers = self._namespaces.setdefault(identity_key, {})
        self._root_exists = True
        if pair_key in markers:
            return False
        markers[pair_key] = self._clock()
        return True

    def marker_age(self, identity_key: str, pair_key: str, *, now: float) -> int | None:
        mtime = self._namespaces.get(identity_key, {}).get(pair_key)
        if mtime is None:
            return None
        return int((now - mtime) // SECONDS_PER_MINUTE)

    def delete_marker(self, identity_key: str, pair_key: str) -> bool:
        markers = self._namespaces.get(identity_key)
        if markers is None or pair_key not in markers:
            return False
        del markers[pair_key]
        return True

    def delete_namespace_if_empty(self, identity_key: str) -> bool:
        if self._namespaces.get(identity_key) != {}:
            return False
        del self._namespaces[identity_key]
        return True

    def list_namespaces(self) -> list[str]:
        return sorted(self._namespaces)

    def list_markers(self, identity_key: str) -> list[str]:
        return sorted(self._namespaces.get(identity_key, {}))

    # -------------------------------------------------------------------------
    # Test helpers
    # -------------------------------------------------------------------------

    def set_mtime(self, identity_key: str, pair_key: str, mtime: float) -> None:
        """Backdate (or postdate) an existing marker."""
        self._namespaces[identity_key][pair_key] = mtime

    def get_mtime(self, identity_key: str, pair_key: str) -> float | None:
        return self._namespaces.get(identity_key, {}).get(pair_key)
