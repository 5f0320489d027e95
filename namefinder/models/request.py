"""
Analysis and search request models.

Sandi Metz Principles:
- Small classes focused on data validation
- Clear property names
- Single responsibility per model
"""

from typing import Dict, List, Optional

from pydantic import Field, field_validator

from namefinder.models.analysis import CamelModel, Gender


class AnalysisRequest(CamelModel):
    """One unit of analysis work."""

    name: str = Field(..., min_length=1, max_length=100, examples=["Amelia"])
    gender: Gender = Field(..., description="Male or Female")
    meaning_theme: str = Field("", max_length=2000, examples=["strength"])
    chinese_metaphysics: str = Field("", max_length=2000, examples=["Wood element"])
    chinese_translation: Optional[str] = Field(
        None, max_length=50, description="User-provided Chinese translation"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate and normalize name."""
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v

    @field_validator("chinese_translation")
    @classmethod
    def blank_translation_is_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank translation as not provided."""
        if v is None or not v.strip():
            return None
        return v.strip()


class SearchRequest(CamelModel):
    """Batch search over a candidate name list."""

    names: List[str] = Field(..., min_length=1, max_length=5000)
    gender: Gender = Field(..., description="Male or Female")
    meaning_theme: str = Field("", max_length=2000)
    chinese_metaphysics: str = Field("", max_length=2000)
    target_matches: int = Field(10, description="Clamped to [1, 50]")
    use_prefiltering: bool = Field(True)
    batch_size: int = Field(5, description="Names per provider call")
    chinese_translations: Dict[str, str] = Field(
        default_factory=dict, description="User translations keyed by name"
    )


class FavoriteItem(CamelModel):
    """A saved name with the criteria it was found under."""

    id: Optional[str] = Field(None, description="Client-side favorite ID")
    name: str = Field(..., min_length=1, max_length=100)
    gender: Gender = Field(Gender.MALE, description="Male or Female")
    meaning_theme: str = Field("", max_length=2000)
    chinese_metaphysics: str = Field("", max_length=2000)
    chinese_translation: Optional[str] = Field(None, max_length=50)
    timestamp: Optional[int] = Field(None, ge=0, description="Saved at, epoch ms")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Normalize name."""
        return v.strip()


class NameDetailsRequest(CamelModel):
    """Re-analysis of favorite names under their saved criteria."""

    names: List[str] = Field(..., min_length=1, max_length=200)
    favorite_items: List[FavoriteItem] = Field(default_factory=list)

    def criteria_by_name(self) -> Dict[str, FavoriteItem]:
        """Saved criteria keyed by name; a later item for a name wins."""
        return {item.name: item for item in self.favorite_items}
