"""
Analysis pipeline module.

Contains request coordination components:
- In-flight Deduplication
"""

from namefinder.pipeline.deduplication import DeduplicationStats, InFlightDeduplicator

__all__ = [
    "InFlightDeduplicator",
    "DeduplicationStats",
]
