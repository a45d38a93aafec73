"""Tests for the Item model, errors and duration helpers."""

from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from kvttl.models import (
    NO_EXPIRATION,
    Item,
    KeyNotFoundError,
    KVTTLError,
    to_nanoseconds,
    to_seconds,
)


class TestItem:
    def test_zero_expiration_never_expires(self):
        item = Item(value="v")
        assert item.expiration == 0
        assert item.expired() is False
        assert item.expired(now=2**62) is False

    def test_expired_strictly_after_instant(self):
        item = Item(value="v", expiration=1_000)
        assert item.expired(now=999) is False
        assert item.expired(now=1_000) is False
        assert item.expired(now=1_001) is True

    def test_negative_expiration_rejected(self):
        with pytest.raises(ValidationError):
            Item(value="v", expiration=-1)

    def test_frozen(self):
        item = Item(value="v")
        with pytest.raises(ValidationError):
            item.value = "other"

    def test_expires_at(self):
        expiration = time.time_ns() + 60_000_000_000
        item = Item(value="v", expiration=expiration)
        assert item.expires_at is not None
        assert item.expires_at.timestamp() == pytest.approx(expiration / 1e9, abs=1e-3)

    def test_expires_at_beyond_datetime_range(self):
        item = Item(value="v", expiration=10**30)
        assert item.expires_at == datetime.max.replace(tzinfo=timezone.utc)

    def test_arbitrary_value(self):
        marker = object()
        assert Item(value=marker).value is marker


class TestDurations:
    def test_seconds(self):
        assert to_seconds(1.5) == 1.5
        assert to_seconds(timedelta(milliseconds=250)) == 0.25

    def test_nanoseconds(self):
        assert to_nanoseconds(2) == 2_000_000_000
        assert to_nanoseconds(0.05) == 50_000_000
        assert to_nanoseconds(timedelta(seconds=1, microseconds=3)) == 1_000_003_000
        assert to_nanoseconds(-1) < 0

    def test_non_finite_nanoseconds(self):
        assert to_nanoseconds(float("inf")) == NO_EXPIRATION
        assert to_nanoseconds(float("-inf")) == NO_EXPIRATION
        assert to_nanoseconds(float("nan")) == NO_EXPIRATION

    def test_positive_rounds_up_to_one_nanosecond(self):
        assert to_nanoseconds(1e-10) == 1
        assert to_nanoseconds(0) == 0


class TestErrors:
    def test_hierarchy(self):
        err = KeyNotFoundError("k")
        assert isinstance(err, KVTTLError)
        assert isinstance(err, KeyError)
        assert err.key == "k"
        assert "k" in str(err)
