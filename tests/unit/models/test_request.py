"""Test request and LLM models."""

import pytest
from pydantic import ValidationError

from namefinder.models.analysis import Gender
from namefinder.models.llm import CompletionRequest, LLMResponse, ParsedContent, ParseFailure
from namefinder.models.request import (
    AnalysisRequest,
    FavoriteItem,
    NameDetailsRequest,
    SearchRequest,
)


class TestAnalysisRequest:
    """Test AnalysisRequest model."""

    def test_should_accept_camel_case_payload(self):
        """Test contract field names."""
        request = AnalysisRequest.model_validate({
            "name": " Amelia ",
            "gender": "Female",
            "meaningTheme": "strength",
            "chineseMetaphysics": "Wood",
            "chineseTranslation": "艾米莉亚",
        })

        assert request.name == "Amelia"
        assert request.gender is Gender.FEMALE
        assert request.meaning_theme == "strength"
        assert request.chinese_translation == "艾米莉亚"

    def test_should_reject_blank_name(self):
        """Test blank name."""
        with pytest.raises(ValidationError):
            AnalysisRequest(name="   ", gender="Male")

    def test_should_reject_unknown_gender(self):
        """Test gender validation."""
        with pytest.raises(ValidationError):
            AnalysisRequest(name="Noah", gender="Other")

    def test_should_treat_blank_translation_as_missing(self):
        """Test blank translation."""
        request = AnalysisRequest(name="Noah", gender="Male", chinese_translation="  ")

        assert request.chinese_translation is None


class TestSearchRequest:
    """Test SearchRequest model."""

    def test_should_apply_defaults(self):
        """Test default search options."""
        request = SearchRequest(names=["Amelia"], gender="Female")

        assert request.target_matches == 10
        assert request.batch_size == 5
        assert request.use_prefiltering is True
        assert request.chinese_translations == {}

    def test_should_reject_empty_name_list(self):
        """Test empty names."""
        with pytest.raises(ValidationError):
            SearchRequest(names=[], gender="Female")


class TestNameDetailsRequest:
    """Test favorite re-analysis request."""

    def test_should_default_favorite_criteria(self):
        """Test favorite defaults."""
        item = FavoriteItem(name=" Liam ")

        assert item.name == "Liam"
        assert item.gender is Gender.MALE
        assert item.meaning_theme == ""
        assert item.chinese_translation is None

    def test_should_key_criteria_by_name(self):
        """Test later favorites win."""
        request = NameDetailsRequest.model_validate({
            "names": ["Amelia"],
            "favoriteItems": [
                {"name": "Amelia", "gender": "Female", "meaningTheme": "light"},
                {"name": "Amelia", "gender": "Female", "meaningTheme": "strength"},
            ],
        })

        saved = request.criteria_by_name()

        assert list(saved) == ["Amelia"]
        assert saved["Amelia"].meaning_theme == "strength"

    def test_should_allow_missing_favorites(self):
        """Test names without favorites."""
        request = NameDetailsRequest(names=["Noah"])

        assert request.criteria_by_name() == {}

    def test_should_reject_empty_names(self):
        """Test empty names."""
        with pytest.raises(ValidationError):
            NameDetailsRequest(names=[])


class TestLLMModels:
    """Test LLM request/response models."""

    def test_should_fall_back_to_defaults(self):
        """Test request defaults."""
        request = CompletionRequest(system_prompt="s", user_prompt="u")

        assert request.get_model("gpt-4o") == "gpt-4o"
        assert request.get_max_tokens(4000) == 4000
        assert request.get_temperature(0.7) == 0.7

    def test_should_keep_zero_temperature(self):
        """Test explicit zero temperature."""
        request = CompletionRequest(system_prompt="s", user_prompt="u", temperature=0.0)

        assert request.get_temperature(0.7) == 0.0

    def test_should_total_tokens(self):
        """Test token total."""
        response = LLMResponse(content="x", prompt_tokens=3, completion_tokens=4, model="m")

        assert response.total_tokens == 7

    def test_should_tag_parse_outcomes(self):
        """Test parse outcome flags."""
        assert ParsedContent(data={}).ok is True
        assert ParseFailure(raw="x", message="bad").ok is False
