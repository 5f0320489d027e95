"""
API Routes module.

Contains all API endpoint routers.
"""

from namefinder.api.routes import admin, analysis, docs, health, names

__all__ = ["admin", "analysis", "docs", "health", "names"]
