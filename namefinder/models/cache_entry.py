"""
Cache entry models.

Sandi Metz Principles:
- Single Responsibility: Cache data structure
- Clear naming: Descriptive fields
- Immutable data: Entries are replaced on write, never mutated
"""

from pydantic import BaseModel, ConfigDict, Field

from namefinder.models.analysis import NameMatchAnalysis

MS_PER_DAY = 24 * 60 * 60 * 1000


class CacheEntry(BaseModel):
    """Stored analysis with the time it was written."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Normalized criteria key")
    analysis: NameMatchAnalysis = Field(..., description="Cached analysis")
    timestamp: int = Field(..., ge=0, description="Write time, epoch milliseconds")

    def age_ms(self, now_ms: int) -> int:
        """
        Entry age at a given time.

        Args:
            now_ms: Current time in epoch milliseconds

        Returns:
            Age in milliseconds (never negative)
        """
        return max(0, now_ms - self.timestamp)

    def is_expired(self, now_ms: int, expiry_ms: float) -> bool:
        """Check whether the entry has outlived the expiry window."""
        return self.age_ms(now_ms) >= expiry_ms

    def to_blob(self) -> dict:
        """Serialize to the persisted blob shape."""
        return {"analysis": self.analysis.to_json_dict(), "timestamp": self.timestamp}

    @classmethod
    def from_blob(cls, key: str, data: dict) -> "CacheEntry":
        """
        Rebuild an entry from its persisted blob shape.

        Raises:
            pydantic.ValidationError: If the blob is malformed
        """
        return cls(key=key, analysis=data.get("analysis"), timestamp=data.get("timestamp"))


class CacheStats(BaseModel):
    """Analysis cache statistics."""

    model_config = ConfigDict(populate_by_name=True)

    total_entries: int = Field(..., ge=0, alias="totalEntries")
    average_age_days: float = Field(..., ge=0, alias="averageAgeDays")
    session_hits: int = Field(..., ge=0, alias="sessionHits")
    session_misses: int = Field(..., ge=0, alias="sessionMisses")
    session_hit_rate: float = Field(
        ..., ge=0, le=100, alias="sessionHitRate", description="Percent"
    )
