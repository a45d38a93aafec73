"""Shared test fixtures."""

from __future__ import annotations

import pytest

from kvttl.config import CacheSettings
from kvttl.store.cache import Cache


@pytest.fixture
def settings() -> CacheSettings:
    return CacheSettings(default_ttl_seconds=0, cleanup_interval_seconds=0)


@pytest.fixture
def cache():
    c: Cache = Cache()
    yield c
    c.close()


@pytest.fixture
def sweeping_cache():
    c: Cache = Cache(default_expiration=0, cleanup_interval=0.05)
    yield c
    c.close()
