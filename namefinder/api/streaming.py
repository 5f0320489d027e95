"""
Server-sent event helpers.
"""

import json
from typing import Any

SSE_HEADERS = {"Cache-Control": "no-cache", "Connection": "keep-alive"}


def format_event(data: Any) -> str:
    """Encode one ``data:`` event."""
    return f"data: {json.dumps(data, ensure_ascii=False)}\n\n"
