"""
Name analysis models.

Sandi Metz Principles:
- Small classes focused on one analysis category each
- Clear naming: Field names mirror the JSON contract (camelCase aliases)
- Immutable data: Results are copied, never mutated in place
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Gender(str, Enum):
    """Gender of a candidate name."""

    MALE = "Male"
    FEMALE = "Female"

    @classmethod
    def from_code(cls, code: str) -> "Gender":
        """
        Map a data-file gender code to a gender.

        Args:
            code: "M" or "F"

        Returns:
            Matching gender

        Raises:
            ValueError: If code is not recognised
        """
        codes = {"M": cls.MALE, "F": cls.FEMALE}
        gender = codes.get(code.strip().upper())
        if gender is None:
            raise ValueError(f"Unknown gender code: {code}")
        return gender

    @property
    def code(self) -> str:
        """Single-letter data-file code."""
        return self.value[0]


class ChineseTranslation(CamelModel):
    """One Chinese rendering of a name."""

    translation: str = Field(..., description="Chinese characters")
    explanation: str = Field(..., description="Meaning and pronunciation")


class CategoryAnalysis(CamelModel):
    """Verdict for a single analysis category."""

    matches: bool = Field(..., description="Whether the category fits the criteria")
    explanation: str = Field(..., description="Reasoning for the verdict")
    score: Optional[float] = Field(None, ge=0, le=10, description="Fit score 0-10")


class CulturalPsychologicalAnalysis(CategoryAnalysis):
    """Cultural symbolism and psychological impact."""

    historical_references: List[str] = Field(default_factory=list)
    psychological_impact: Optional[str] = None


class LiteraryArtisticAnalysis(CategoryAnalysis):
    """Appearances in literature, art, music and media."""

    literary_references: List[str] = Field(default_factory=list)
    artistic_connections: List[str] = Field(default_factory=list)


class LinguisticAnalysis(CategoryAnalysis):
    """Phonetics and pronunciation across languages."""

    phonetics: Optional[str] = None
    pronunciation_variations: List[str] = Field(default_factory=list)


class FiveElementAnalysis(CategoryAnalysis):
    """Five Elements association."""

    associated_element: Optional[str] = None


class NumerologyAnalysis(CategoryAnalysis):
    """Western numerology."""

    life_path_number: Optional[int] = None
    personality_number: Optional[int] = None


class AstrologyAnalysis(CategoryAnalysis):
    """Western astrology."""

    associated_zodiac: Optional[str] = None
    planetary_influence: Optional[str] = None


# Categories every analysis carries (back-filled when missing)
CORE_CATEGORIES = (
    "character_analysis",
    "name_analysis",
    "bazi_analysis",
    "qi_men_dun_jia_analysis",
    "feng_shui_analysis",
)

# Categories an analysis may omit
OPTIONAL_CATEGORIES = (
    "cultural_psychological_analysis",
    "literary_artistic_analysis",
    "linguistic_analysis",
    "five_element_analysis",
    "numerology_analysis",
    "astrology_analysis",
)

ALL_CATEGORIES = CORE_CATEGORIES + OPTIONAL_CATEGORIES

CATEGORY_MODELS = {
    "character_analysis": CategoryAnalysis,
    "name_analysis": CategoryAnalysis,
    "bazi_analysis": CategoryAnalysis,
    "qi_men_dun_jia_analysis": CategoryAnalysis,
    "feng_shui_analysis": CategoryAnalysis,
    "cultural_psychological_analysis": CulturalPsychologicalAnalysis,
    "literary_artistic_analysis": LiteraryArtisticAnalysis,
    "linguistic_analysis": LinguisticAnalysis,
    "five_element_analysis": FiveElementAnalysis,
    "numerology_analysis": NumerologyAnalysis,
    "astrology_analysis": AstrologyAnalysis,
}


class NameMatchAnalysis(CamelModel):
    """Structured verdict on how well a name fits the user's criteria."""

    name: str = Field(..., min_length=1, description="Analyzed name")
    overall_match: bool = Field(False, description="Derived overall verdict")
    origin: Optional[str] = Field(None, description="Origin of the name")
    meaning: Optional[str] = Field(None, description="Meaning of the name")
    meaning_match_score: Optional[float] = None
    meaning_match_reason: Optional[str] = None
    chinese_metaphysics_score: Optional[float] = None
    chinese_metaphysics_reason: Optional[str] = None

    chinese_translations: List[ChineseTranslation] = Field(
        ..., min_length=1, description="Chinese renderings, primary first"
    )

    character_analysis: CategoryAnalysis
    name_analysis: CategoryAnalysis
    bazi_analysis: CategoryAnalysis
    qi_men_dun_jia_analysis: CategoryAnalysis
    feng_shui_analysis: CategoryAnalysis

    cultural_psychological_analysis: Optional[CulturalPsychologicalAnalysis] = None
    literary_artistic_analysis: Optional[LiteraryArtisticAnalysis] = None
    linguistic_analysis: Optional[LinguisticAnalysis] = None
    five_element_analysis: Optional[FiveElementAnalysis] = None
    numerology_analysis: Optional[NumerologyAnalysis] = None
    astrology_analysis: Optional[AstrologyAnalysis] = None

    summary: Optional[str] = None

    def populated_categories(self) -> List[CategoryAnalysis]:
        """Sub-analyses present on this result, in canonical order."""
        categories = (getattr(self, field) for field in ALL_CATEGORIES)
        return [category for category in categories if category is not None]

    def core_categories(self) -> List[CategoryAnalysis]:
        """The five core sub-analyses."""
        return [getattr(self, field) for field in CORE_CATEGORIES]

    @property
    def primary_translation(self) -> str:
        """First (preferred) Chinese translation."""
        return self.chinese_translations[0].translation

    def to_json_dict(self) -> dict:
        """Serialize with contract (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)
