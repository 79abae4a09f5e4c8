"""Protocol for pluggable token stores.

A store holds content-free markers grouped into per-user namespaces. The only
state of a marker is its existence and its modification time.

Every mutating primitive must be safe against concurrent invocations in other
processes: creating something that already exists and deleting something that
is already gone both succeed.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TokenStore(Protocol):
    """Storage primitives used by TokenCache."""

    def root_exists(self) -> bool:
        """Whether the store has been initialized at all."""
        ...

    def namespace_exists(self, identity_key: str) -> bool:
        ...

    def ensure_namespace(self, identity_key: str) -> None:
        """Create the namespace (and the root) if missing."""
        ...

    def create_marker_if_absent(self, identity_key: str, pair_key: str) -> bool:
        """Create an empty marker.

        Returns:
            True if a new marker was created, False if one already existed.
        """
        ...

    def marker_age(self, identity_key: str, pair_key: str, *, now: float) -> int | None:
        """Whole minutes since the marker was created, or None if absent."""
        ...

    def delete_marker(self, identity_key: str, pair_key: str) -> bool:
        """Delete a marker. Returns False if it was already gone."""
        ...

    def delete_namespace_if_empty(self, identity_key: str) -> bool:
        """Delete a namespace if it holds no markers.

        Returns:
            True if the namespace was removed, False if it was missing or
            still had entries.
        """
        ...

    def list_namespaces(self) -> list[str]:
        """Identity keys of all namespaces, sorted."""
        ...

    def list_markers(self, identity_key: str) -> list[str]:
        """Pair keys of all marker files in a namespace, sorted.

        Entries not named like a pair key, and subdirectories, are not markers.
        """
        ...
