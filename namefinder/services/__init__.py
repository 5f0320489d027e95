"""
Services module.

Contains business logic services for the application.
"""

from namefinder.services.search_service import (
    NameSearchService,
    SearchProgress,
    SearchResult,
)

__all__ = ["NameSearchService", "SearchProgress", "SearchResult"]
