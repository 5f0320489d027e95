"""
Candidate name models.

Sandi Metz Principles:
- Small classes with clear purpose
- Clear naming conventions
"""

from typing import Optional

from pydantic import BaseModel, Field

from namefinder.models.analysis import Gender


class BabyNameCandidate(BaseModel):
    """A name from the popularity data with its ranking."""

    name: str = Field(..., min_length=1, description="Candidate name")
    gender: Gender = Field(..., description="Gender")
    count: int = Field(..., ge=0, description="Births recorded")
    rank: int = Field(..., ge=1, description="Rank by count within gender")
    year: int = Field(..., description="Most recent year the name appeared")


class NamePopularity(BaseModel):
    """Popularity of one name in one year."""

    name: str
    gender: Gender
    year: int
    rank: Optional[int] = Field(None, ge=1, description="None when unranked")
    count: int = Field(0, ge=0)
