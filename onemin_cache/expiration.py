"""Cache entries and expiration checks."""

from __future__ import annotations

from dataclasses import dataclass
from time import monotonic
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    data: Any
    expires_at: float | None = None


def monotonic_ms() -> float:
    """Return a monotonic timestamp in milliseconds."""
    return monotonic() * 1000.0


def is_expired(expires_at: float | None, now: float | None = None) -> bool:
    """Return True if *expires_at* is set and *now* is strictly past it.

    Entries without an expiration timestamp never expire.
    """
    if expires_at is None:
        return False
    if now is None:
        now = monotonic_ms()
    return now > expires_at
