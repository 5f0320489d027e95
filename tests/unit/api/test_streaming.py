"""Test server-sent event formatting."""

import json

from namefinder.api.streaming import format_event


def test_should_format_data_event():
    """Test event framing."""
    event = format_event({"complete": True})

    assert event.startswith("data: ")
    assert event.endswith("\n\n")
    assert json.loads(event[len("data: "):]) == {"complete": True}


def test_should_keep_chinese_text_readable():
    """Test non-ASCII output."""
    assert "艾米莉亚" in format_event({"translation": "艾米莉亚"})
