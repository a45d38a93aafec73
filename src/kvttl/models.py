"""Errors, the cache entry model and TTL helpers."""

from __future__ import annotations

import math
import time
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Passed as a TTL: use the cache's configured default.
DEFAULT_EXPIRATION = 0
# Passed as a TTL: the entry never expires, regardless of the default.
NO_EXPIRATION = -1

Duration = float | int | timedelta


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class KVTTLError(Exception):
    """Base exception for kvttl."""


class KeyNotFoundError(KVTTLError, KeyError):
    """Raised when a key is absent (or, for reads, already expired)."""

    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"key not found: {self.key!r}"


# ---------------------------------------------------------------------------
# Durations
# ---------------------------------------------------------------------------

def to_seconds(duration: Duration) -> float:
    """Normalise a duration given as seconds or a timedelta to float seconds."""
    if isinstance(duration, timedelta):
        return duration.total_seconds()
    return float(duration)


def to_nanoseconds(duration: Duration) -> int:
    """Convert a duration to whole nanoseconds.

    Infinite and NaN durations map to ``NO_EXPIRATION``. Positive durations
    round up to at least 1ns so they never collapse into ``DEFAULT_EXPIRATION``.
    """
    if isinstance(duration, timedelta):
        # Integer arithmetic keeps microsecond precision exact
        return (duration // timedelta(microseconds=1)) * 1_000
    seconds = float(duration)
    if not math.isfinite(seconds):
        return NO_EXPIRATION
    if seconds > 0:
        return max(1, int(seconds * 1_000_000_000))
    return int(seconds * 1_000_000_000)


def now_ns() -> int:
    return time.time_ns()


# ---------------------------------------------------------------------------
# Entry
# ---------------------------------------------------------------------------

class Item(BaseModel):
    """A single stored value with its creation time and expiration instant.

    ``expiration`` is nanoseconds since the Unix epoch; 0 means the item
    never expires.
    """

    model_config = ConfigDict(frozen=True)

    value: Any = None
    created: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    expiration: int = Field(0, ge=0)

    def expired(self, now: int | None = None) -> bool:
        if self.expiration == 0:
            return False
        if now is None:
            now = now_ns()
        return now > self.expiration

    @property
    def expires_at(self) -> datetime | None:
        if self.expiration == 0:
            return None
        try:
            return datetime.fromtimestamp(self.expiration / 1_000_000_000, tz=timezone.utc)
        except (OverflowError, ValueError, OSError):
            # Beyond what datetime can represent
            return datetime.max.replace(tzinfo=timezone.utc)
