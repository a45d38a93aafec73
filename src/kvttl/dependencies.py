"""Process-wide settings and shared cache instance."""

from __future__ import annotations

from functools import lru_cache

from kvttl.config import CacheSettings
from kvttl.store.cache import Cache


@lru_cache
def get_settings() -> CacheSettings:
    return CacheSettings()


@lru_cache
def get_cache() -> Cache:
    """Shared cache built from the environment-driven settings."""
    return Cache.from_settings(get_settings())
