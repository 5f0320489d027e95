"""
Candidate name sources.
"""

from namefinder.sources.pop_culture import PopCultureSource
from namefinder.sources.popularity import PopularityReader

__all__ = ["PopCultureSource", "PopularityReader"]
