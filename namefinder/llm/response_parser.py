"""
LLM response parser.

Sandi Metz Principles:
- Single Responsibility: Decode provider content into usable data
- Small methods: Each method < 10 lines
- Clear naming: Self-documenting code
"""

import json
import re
from typing import Any, List

from namefinder.models.llm import ParsedContent, ParseFailure, ParseOutcome

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


class LLMResponseParser:
    """
    Parser for LLM provider content.

    Providers return free text: JSON, JSON wrapped in a markdown fence,
    or plain comma-separated names.
    """

    @staticmethod
    def strip_code_fence(content: str) -> str:
        """
        Remove a surrounding markdown code fence.

        Args:
            content: Raw provider content

        Returns:
            Fenced body when a fence is present, otherwise the trimmed content
        """
        match = _FENCE_PATTERN.search(content or "")
        if match:
            return match.group(1).strip()
        return (content or "").strip()

    @staticmethod
    def parse_json_content(content: str) -> ParseOutcome:
        """
        Decode provider content as JSON.

        Args:
            content: Raw provider content

        Returns:
            ParsedContent on success, ParseFailure carrying the raw text otherwise
        """
        body = LLMResponseParser.strip_code_fence(content)
        if not body:
            return ParseFailure(raw=content or "", message="Empty response content")

        try:
            return ParsedContent(data=json.loads(body))
        except json.JSONDecodeError as e:
            return ParseFailure(raw=content, message=f"Invalid JSON: {e.msg}")

    @staticmethod
    def parse_name_list(content: str) -> List[str]:
        """
        Split a plain-text name list.

        Args:
            content: Comma or newline separated names

        Returns:
            Non-empty trimmed names in response order
        """
        body = LLMResponseParser.strip_code_fence(content)
        parts = re.split(r"[,\n]", body)
        names = (part.strip().lstrip("-*• ").strip().strip("\"'").strip() for part in parts)
        return [name for name in names if name]

    @staticmethod
    def extract_list(data: Any, *keys: str) -> List[Any]:
        """
        Find the list payload in decoded JSON.

        Accepts a bare list, an object holding one of ``keys``, or an
        object whose first list-valued field holds the payload.

        Args:
            data: Decoded JSON
            *keys: Preferred field names, checked in order

        Returns:
            The list payload, or an empty list if none is found
        """
        if isinstance(data, list):
            return data
        if not isinstance(data, dict):
            return []

        for key in keys:
            if isinstance(data.get(key), list):
                return data[key]
        return next((value for value in data.values() if isinstance(value, list)), [])

    @staticmethod
    def extract_string_list(data: Any) -> List[str]:
        """
        Extract a list of strings (e.g. names) from decoded JSON.

        Args:
            data: Decoded JSON

        Returns:
            String items of the list payload, trimmed, blanks dropped
        """
        items = LLMResponseParser.extract_list(data, "names")
        strings = (item.strip() for item in items if isinstance(item, str))
        return [item for item in strings if item]
