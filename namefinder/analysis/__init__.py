"""
Name analysis module.

Contains the analysis components:
- Single-name Analyzer (analyzer)
- Batch Analyzer (batch_analyzer)
- Theme Prefilter (prefilter)
- Normalization and scoring, re-exported here
"""

from namefinder.analysis.scoring import (
    apply_user_translation,
    compute_overall_match,
    create_error_analysis,
    normalize_analysis,
    recompute_overall_match,
)

__all__ = [
    "apply_user_translation",
    "compute_overall_match",
    "create_error_analysis",
    "normalize_analysis",
    "recompute_overall_match",
]
