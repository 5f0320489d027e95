"""Test name analysis models."""

import pytest
from pydantic import ValidationError

from namefinder.models.analysis import (
    ALL_CATEGORIES,
    CORE_CATEGORIES,
    CategoryAnalysis,
    ChineseTranslation,
    Gender,
    NameMatchAnalysis,
)


def _analysis(**overrides) -> NameMatchAnalysis:
    fields = {
        "name": "Amelia",
        "chinese_translations": [ChineseTranslation(translation="艾米莉亚", explanation="")],
    }
    for field in CORE_CATEGORIES:
        fields[field] = CategoryAnalysis(matches=True, explanation="fits")
    fields.update(overrides)
    return NameMatchAnalysis(**fields)


class TestGender:
    """Test Gender enum."""

    def test_should_map_data_codes(self):
        """Test data-file codes."""
        assert Gender.from_code("M") is Gender.MALE
        assert Gender.from_code(" f ") is Gender.FEMALE

    def test_should_reject_unknown_code(self):
        """Test unknown code."""
        with pytest.raises(ValueError):
            Gender.from_code("X")

    def test_should_expose_code(self):
        """Test code property."""
        assert Gender.MALE.code == "M"
        assert Gender.FEMALE.code == "F"


class TestCategoryAnalysis:
    """Test CategoryAnalysis model."""

    def test_should_accept_score_in_range(self):
        """Test valid score."""
        assert CategoryAnalysis(matches=True, explanation="x", score=10).score == 10

    def test_should_reject_score_out_of_range(self):
        """Test score bounds."""
        with pytest.raises(ValidationError):
            CategoryAnalysis(matches=True, explanation="x", score=11)


class TestNameMatchAnalysis:
    """Test NameMatchAnalysis model."""

    def test_should_require_a_translation(self):
        """Test translations are never empty."""
        with pytest.raises(ValidationError):
            _analysis(chinese_translations=[])

    def test_should_require_core_categories(self):
        """Test core categories are mandatory."""
        fields = {
            "name": "Amelia",
            "chinese_translations": [{"translation": "艾", "explanation": ""}],
        }
        with pytest.raises(ValidationError):
            NameMatchAnalysis(**fields)

    def test_should_list_populated_categories(self):
        """Test populated categories skip absent optional ones."""
        analysis = _analysis(
            numerology_analysis={"matches": False, "explanation": "no"}
        )

        populated = analysis.populated_categories()

        assert len(populated) == len(CORE_CATEGORIES) + 1
        assert populated[-1].matches is False

    def test_should_return_core_categories(self):
        """Test core categories accessor."""
        assert len(_analysis().core_categories()) == 5

    def test_should_expose_primary_translation(self):
        """Test primary translation."""
        assert _analysis().primary_translation == "艾米莉亚"

    def test_should_serialize_with_camel_case(self):
        """Test contract field names."""
        data = _analysis(numerology_analysis={
            "matches": True, "explanation": "x", "lifePathNumber": 7,
        }).to_json_dict()

        assert "overallMatch" in data
        assert "chineseTranslations" in data
        assert "qiMenDunJiaAnalysis" in data
        assert data["numerologyAnalysis"]["lifePathNumber"] == 7

    def test_should_accept_camel_case_input(self):
        """Test parsing contract field names."""
        data = _analysis().to_json_dict()

        parsed = NameMatchAnalysis.model_validate(data)

        assert parsed.bazi_analysis.matches is True
        assert set(ALL_CATEGORIES) >= set(CORE_CATEGORIES)
