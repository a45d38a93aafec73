"""Thread-safe in-memory key-value cache with per-entry TTL."""

from __future__ import annotations

import logging
import math
import weakref
from datetime import datetime, timezone
from typing import Generic, TypeVar

from kvttl.config import CacheSettings
from kvttl.models import (
    DEFAULT_EXPIRATION,
    Duration,
    Item,
    KeyNotFoundError,
    now_ns,
    to_nanoseconds,
    to_seconds,
)
from kvttl.store.janitor import Janitor
from kvttl.store.rwlock import RWLock

logger = logging.getLogger(__name__)

V = TypeVar("V")


class Cache(Generic[V]):
    """Key-value store where each entry may carry an expiration instant.

    Expired entries are hidden from reads immediately but stay in memory
    until removed by ``delete``, ``delete_expired`` or the background
    janitor, which runs only when ``cleanup_interval`` is positive.
    """

    def __init__(
        self,
        default_expiration: Duration = DEFAULT_EXPIRATION,
        cleanup_interval: Duration = 0,
    ):
        self._items: dict[str, Item] = {}
        self._lock = RWLock()
        self._default_expiration = to_nanoseconds(default_expiration)
        self._cleanup_interval = to_seconds(cleanup_interval)
        self._closed = False
        self._janitor: Janitor | None = None

        # An infinite interval never wakes, so it disables the sweep like 0
        if self._cleanup_interval > 0 and math.isfinite(self._cleanup_interval):
            self._janitor = Janitor(self, self._cleanup_interval)
            self._janitor.start()
            # Stop the sweep once this cache is garbage collected
            weakref.finalize(self, self._janitor.stop, False)

    @classmethod
    def from_settings(cls, settings: CacheSettings) -> Cache:
        return cls(
            default_expiration=settings.default_ttl_seconds,
            cleanup_interval=settings.cleanup_interval_seconds,
        )

    # -- writes -------------------------------------------------------------

    def set(self, key: str, value: V, ttl: Duration = DEFAULT_EXPIRATION) -> None:
        """Store ``value`` under ``key``, replacing any previous entry.

        A ``ttl`` of 0 uses the cache default; a negative ``ttl`` (or a zero
        ttl with no default configured) stores an entry that never expires.
        """
        duration = to_nanoseconds(ttl)
        if duration == 0:
            duration = self._default_expiration

        expiration = now_ns() + duration if duration > 0 else 0
        item = Item(value=value, created=datetime.now(timezone.utc), expiration=expiration)

        with self._lock.write_locked():
            self._items[key] = item

    def delete(self, key: str) -> None:
        """Remove ``key``. Expired-but-unswept entries are still removable."""
        with self._lock.write_locked():
            if key not in self._items:
                raise KeyNotFoundError(key)
            del self._items[key]

    def delete_expired(self) -> int:
        """Run one sweep pass and return how many entries were removed."""
        now = now_ns()
        with self._lock.read_locked():
            candidates = [k for k, item in self._items.items() if item.expired(now)]

        if not candidates:
            return 0

        removed = 0
        with self._lock.write_locked():
            for key in candidates:
                # May have been refreshed or deleted since the scan
                item = self._items.get(key)
                if item is not None and item.expired(now):
                    del self._items[key]
                    removed += 1
        return removed

    def flush(self) -> None:
        with self._lock.write_locked():
            self._items.clear()

    # -- reads --------------------------------------------------------------

    def _lookup(self, key: str) -> Item | None:
        with self._lock.read_locked():
            item = self._items.get(key)
        if item is None or item.expired():
            return None
        return item

    def get(self, key: str) -> tuple[V | None, bool]:
        """Return ``(value, True)`` for a live key, else ``(None, False)``."""
        item = self._lookup(key)
        if item is None:
            return None, False
        return item.value, True

    def get_item(self, key: str) -> Item:
        """Return a copy of the full entry for a live key."""
        item = self._lookup(key)
        if item is None:
            raise KeyNotFoundError(key)
        return item.model_copy()

    def expire(self, key: str) -> bool:
        """True if ``key`` is absent or expired. Does not remove anything."""
        return self._lookup(key) is None

    def count(self) -> int:
        """Number of stored entries, including expired ones not yet swept."""
        with self._lock.read_locked():
            return len(self._items)

    def items(self) -> dict[str, Item]:
        """Snapshot of all live entries."""
        now = now_ns()
        with self._lock.read_locked():
            return {k: item for k, item in self._items.items() if not item.expired(now)}

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, key: str) -> bool:
        return self._lookup(key) is not None

    # -- lifecycle ----------------------------------------------------------

    @property
    def default_expiration(self) -> float:
        return self._default_expiration / 1_000_000_000

    @property
    def cleanup_interval(self) -> float:
        return self._cleanup_interval

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def sweeping(self) -> bool:
        return self._janitor is not None and self._janitor.running

    def close(self, wait: bool = True, timeout: float | None = None) -> None:
        """Stop the background sweep. Stored entries remain readable."""
        if self._closed:
            return
        self._closed = True
        if self._janitor is not None:
            logger.debug("Closing cache, stopping janitor")
            self._janitor.stop(wait=wait, timeout=timeout)

    def __enter__(self) -> Cache[V]:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
