"""Test LLM response parser."""

from namefinder.llm.response_parser import LLMResponseParser
from namefinder.models.llm import ParsedContent, ParseFailure


class TestStripCodeFence:
    """Test markdown fence removal."""

    def test_should_strip_json_fence(self):
        """Test ```json fences."""
        content = '```json\n{"a": 1}\n```'

        assert LLMResponseParser.strip_code_fence(content) == '{"a": 1}'

    def test_should_strip_bare_fence(self):
        """Test ``` fences."""
        assert LLMResponseParser.strip_code_fence("```\n[1]\n```") == "[1]"

    def test_should_keep_unfenced_content(self):
        """Test content without fences."""
        assert LLMResponseParser.strip_code_fence('  {"a": 1} ') == '{"a": 1}'


class TestParseJsonContent:
    """Test JSON decoding into tagged outcomes."""

    def test_should_parse_plain_json(self):
        """Test plain JSON."""
        outcome = LLMResponseParser.parse_json_content('{"name": "Amelia"}')

        assert isinstance(outcome, ParsedContent)
        assert outcome.data == {"name": "Amelia"}

    def test_should_parse_fenced_json(self):
        """Test fenced JSON."""
        outcome = LLMResponseParser.parse_json_content('Here:\n```json\n[1, 2]\n```')

        assert isinstance(outcome, ParsedContent)
        assert outcome.data == [1, 2]

    def test_should_fail_on_invalid_json(self):
        """Test invalid JSON keeps the raw text."""
        outcome = LLMResponseParser.parse_json_content("not json")

        assert isinstance(outcome, ParseFailure)
        assert outcome.raw == "not json"
        assert "Invalid JSON" in outcome.message

    def test_should_fail_on_empty_content(self):
        """Test empty content."""
        outcome = LLMResponseParser.parse_json_content("")

        assert isinstance(outcome, ParseFailure)
        assert outcome.ok is False


class TestParseNameList:
    """Test plain-text name lists."""

    def test_should_split_commas(self):
        """Test comma-separated names."""
        assert LLMResponseParser.parse_name_list("Amelia, Liam ,Noah") == [
            "Amelia",
            "Liam",
            "Noah",
        ]

    def test_should_split_lines_and_strip_bullets(self):
        """Test bulleted lines."""
        content = '- Amelia\n* "Liam"\n\n• Noah'

        assert LLMResponseParser.parse_name_list(content) == ["Amelia", "Liam", "Noah"]

    def test_should_return_empty_for_blank(self):
        """Test blank content."""
        assert LLMResponseParser.parse_name_list("  ") == []


class TestExtractList:
    """Test list payload extraction."""

    def test_should_accept_bare_list(self):
        """Test top-level list."""
        assert LLMResponseParser.extract_list([1, 2], "results") == [1, 2]

    def test_should_prefer_named_key(self):
        """Test preferred keys."""
        data = {"other": [0], "results": [1]}

        assert LLMResponseParser.extract_list(data, "results") == [1]

    def test_should_fall_back_to_first_list(self):
        """Test first list-valued field."""
        data = {"count": 2, "items": ["a", "b"]}

        assert LLMResponseParser.extract_list(data, "results") == ["a", "b"]

    def test_should_return_empty_for_scalars(self):
        """Test non-container data."""
        assert LLMResponseParser.extract_list("text") == []
        assert LLMResponseParser.extract_list({"a": 1}) == []

    def test_should_extract_string_names(self):
        """Test string list extraction."""
        data = {"names": [" Arya ", "", 3, "Neo"]}

        assert LLMResponseParser.extract_string_list(data) == ["Arya", "Neo"]
