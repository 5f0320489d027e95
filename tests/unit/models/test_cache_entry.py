"""Test cache entry models."""

import pytest
from pydantic import ValidationError

from namefinder.models.cache_entry import MS_PER_DAY, CacheEntry, CacheStats


class TestCacheEntry:
    """Test CacheEntry model."""

    def test_should_compute_age(self, sample_analysis):
        """Test entry age."""
        entry = CacheEntry(key="k", analysis=sample_analysis, timestamp=1000)

        assert entry.age_ms(5000) == 4000
        assert entry.age_ms(500) == 0

    def test_should_expire_at_window_boundary(self, sample_analysis):
        """Test expiry is inclusive of the window length."""
        window = 30 * MS_PER_DAY
        entry = CacheEntry(key="k", analysis=sample_analysis, timestamp=0)

        assert entry.is_expired(window - 1, window) is False
        assert entry.is_expired(window, window) is True

    def test_should_be_immutable(self, sample_analysis):
        """Test entries are frozen."""
        entry = CacheEntry(key="k", analysis=sample_analysis, timestamp=0)

        with pytest.raises(ValidationError):
            entry.timestamp = 5

    def test_should_round_trip_blob(self, sample_analysis):
        """Test blob serialization."""
        entry = CacheEntry(key="k", analysis=sample_analysis, timestamp=42)

        blob = entry.to_blob()
        restored = CacheEntry.from_blob("k", blob)

        assert blob["timestamp"] == 42
        assert "overallMatch" in blob["analysis"]
        assert restored == entry

    def test_should_reject_malformed_blob(self):
        """Test invalid blob."""
        with pytest.raises(ValidationError):
            CacheEntry.from_blob("k", {"analysis": {"name": "x"}, "timestamp": 1})


class TestCacheStats:
    """Test CacheStats model."""

    def test_should_serialize_with_aliases(self):
        """Test camelCase output."""
        stats = CacheStats(
            total_entries=2,
            average_age_days=1.5,
            session_hits=3,
            session_misses=1,
            session_hit_rate=75.0,
        )

        data = stats.model_dump(by_alias=True)

        assert data == {
            "totalEntries": 2,
            "averageAgeDays": 1.5,
            "sessionHits": 3,
            "sessionMisses": 1,
            "sessionHitRate": 75.0,
        }
