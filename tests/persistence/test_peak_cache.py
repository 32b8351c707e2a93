"""Tests for the in-memory peak cache."""

from datetime import datetime, timedelta, timezone

from ath_app.data.models import PeakRecord
from ath_app.persistence.peak_cache import InMemoryPeakCache


T0 = datetime(2025, 1, 1, tzinfo=timezone.utc)
TTL = timedelta(days=7)


class TestInMemoryPeakCache:
    """Test get/put semantics and expiry."""

    def test_miss_then_hit(self):
        """A stored record is returned until it expires."""
        cache = InMemoryPeakCache(clock=lambda: T0)
        record = PeakRecord("AAPL", 260.10, T0)

        assert cache.get("AAPL") is None
        cache.put("AAPL", record, TTL)

        assert cache.get("AAPL") is record
        assert cache.hits == 1
        assert cache.misses == 1

    def test_case_insensitive_keys(self):
        """Symbols are stored upper-cased."""
        cache = InMemoryPeakCache(clock=lambda: T0)
        cache.put("aapl", PeakRecord("AAPL", 1.0, T0), TTL)
        assert cache.get("AAPL") is not None

    def test_expiry(self):
        """Entries are dropped once their TTL elapses."""
        clock = [T0]
        cache = InMemoryPeakCache(clock=lambda: clock[0])
        cache.put("VOO", PeakRecord("VOO", 1.0, T0), TTL)

        clock[0] = T0 + TTL - timedelta(seconds=1)
        assert cache.get("VOO") is not None

        clock[0] = T0 + TTL
        assert cache.get("VOO") is None
        assert len(cache) == 0

    def test_clear(self):
        """clear() removes every entry."""
        cache = InMemoryPeakCache(clock=lambda: T0)
        cache.put("A", PeakRecord("A", 1.0, T0), TTL)
        cache.put("B", PeakRecord("B", 1.0, T0), TTL)

        cache.clear()

        assert len(cache) == 0
