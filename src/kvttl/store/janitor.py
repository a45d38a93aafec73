"""Background sweep thread that reclaims expired cache entries."""

from __future__ import annotations

import logging
import threading
import weakref
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kvttl.store.cache import Cache

logger = logging.getLogger(__name__)


class Janitor:
    """Periodically calls ``delete_expired()`` on a cache until stopped.

    Only a weak reference to the cache is held, so an unreferenced cache can
    still be collected; the loop exits on its next wake-up once that happens.
    """

    def __init__(self, cache: Cache, interval: float):
        if interval <= 0:
            raise ValueError("janitor interval must be > 0")
        self._cache_ref = weakref.ref(cache)
        self._interval = interval
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            name=f"kvttl-janitor-{id(cache):x}",
            daemon=True,
        )

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def start(self) -> None:
        self._thread.start()

    def stop(self, wait: bool = True, timeout: float | None = None) -> None:
        """Signal the loop to exit and optionally wait for the thread."""
        self._stop_event.set()
        if (
            wait
            and self._thread.is_alive()
            and self._thread is not threading.current_thread()
        ):
            self._thread.join(timeout)

    def _run(self) -> None:
        logger.info("Janitor started (interval=%.3fs)", self._interval)
        while not self._stop_event.wait(self._interval):
            cache = self._cache_ref()
            if cache is None:
                break
            try:
                removed = cache.delete_expired()
            except Exception:
                logger.exception("Sweep pass failed")
            else:
                if removed:
                    logger.debug("Swept %d expired entries", removed)
            del cache
        logger.info("Janitor stopped")
