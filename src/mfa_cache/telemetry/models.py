"""Audit event models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

CacheEventType = Literal[
    "token_valid",
    "token_invalid",
    "token_expired",
    "token_added",
    "tokens_removed",
    "remove_refused",
]


class CacheEvent(BaseModel):
    """One audit record for a cache operation.

    Identity and pair keys are stored truncated; the username and remote
    host never appear in the audit trail.

    Attributes:
        time: Set by the formatter at write time, excluded from dumps.
        event_type: What happened.
        status: Success or Failure from the caller's point of view.
        identity_key: Truncated identity key, if the event concerns one user.
        pair_key: Truncated pair key, if the event concerns one marker.
        reason: Check outcome reason (fresh, expired, no_marker, ...).
        age_minutes: Marker age observed by Check.
        max_minutes: TTL window requested by Check.
        markers: Number of markers involved (Remove).
        namespaces: Number of namespaces involved (Remove).
        forced: Whether Remove was forced.
    """

    time: datetime | None = None
    event_type: CacheEventType
    status: Literal["Success", "Failure"]
    identity_key: str | None = None
    pair_key: str | None = None
    reason: str | None = None
    age_minutes: int | None = None
    max_minutes: int | None = Field(default=None, ge=0)
    markers: int | None = None
    namespaces: int | None = None
    forced: bool | None = None
