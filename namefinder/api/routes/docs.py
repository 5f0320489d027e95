"""
API Documentation configuration.

OpenAPI metadata for the NameFinder API.

Sandi Metz Principles:
- Single Responsibility: API documentation
- Clear naming: Descriptive tags and descriptions
"""

# API Tags metadata for OpenAPI documentation
TAGS_METADATA = [
    {
        "name": "health",
        "description": "Health check endpoints for monitoring service status.",
    },
    {
        "name": "analysis",
        "description": "Single-name analysis and batch name search, plain or streamed.",
    },
    {
        "name": "names",
        "description": "Candidate names from popularity data and pop culture.",
    },
    {
        "name": "admin",
        "description": "Analysis cache inspection and clearing.",
    },
]


# API Description
API_DESCRIPTION = """
# NameFinder API

Finds baby names whose meaning and Chinese-metaphysics profile match your criteria.

## Features

- **Name analysis**: Structured verdicts across character, BaZi, Qi Men Dun Jia,
  Feng Shui, Five Elements, numerology, astrology and more
- **Batch search**: Chunked analysis with theme prefiltering and early exit
  once enough names match
- **Analysis cache**: Results are reused for 30 days, persisted in Redis
- **Candidate sources**: Yearly popularity rankings and pop-culture names

## Streaming

`/api/v1/search/stream` and `/api/v1/names/stream` return `text/event-stream`
responses with one JSON document per `data:` event.
"""
