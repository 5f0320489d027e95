"""
Analysis normalization and overall-match scoring.

Provider output is untrusted: every analysis passes through here so that
the category verdicts are well-formed, translations are never empty and
``overallMatch`` is derived from the categories rather than copied.

Sandi Metz Principles:
- Single Responsibility: Shape and score analyses
- Pure functions: Inputs are never mutated
- Small methods: Each function does one thing
"""

import math
from numbers import Real
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from namefinder.config import config
from namefinder.models.analysis import (
    ALL_CATEGORIES,
    CATEGORY_MODELS,
    CORE_CATEGORIES,
    CategoryAnalysis,
    ChineseTranslation,
    NameMatchAnalysis,
)
from namefinder.utils.logger import get_logger

logger = get_logger(__name__)

MISSING_CATEGORY_TEXT = "No analysis was provided for this category."
CORE_MATCH_THRESHOLD = 3

_TRUE_STRINGS = {"true", "yes", "y", "1"}


def _camel(field: str) -> str:
    head, *rest = field.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _lookup(raw: Dict[str, Any], field: str) -> Any:
    """Read a field by its contract (camelCase) or snake_case name."""
    value = raw.get(_camel(field))
    return raw.get(field) if value is None else value


def coerce_bool(value: Any) -> bool:
    """Interpret a loosely typed ``matches`` flag."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if isinstance(value, Real):
        return value != 0
    return False


def coerce_score(value: Any) -> Optional[float]:
    """Keep a score only if it is a number within 0..10."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    score = float(value)
    if math.isnan(score) or score < 0 or score > 10:
        return None
    return score


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_category(value: Any, field: str) -> Optional[CategoryAnalysis]:
    """
    Build a category verdict from raw provider data.

    Returns:
        Category model, or None if the value is not an object
    """
    if not isinstance(value, dict):
        return None

    model = CATEGORY_MODELS[field]
    base = {
        "matches": coerce_bool(value.get("matches")),
        "explanation": _optional_text(value.get("explanation")) or MISSING_CATEGORY_TEXT,
        "score": coerce_score(value.get("score")),
    }
    try:
        return model.model_validate({**value, **base})
    except PydanticValidationError:
        logger.debug("Dropping malformed category details", category=field)
        return model(**base)


def placeholder_translations(name: str, reason: str = "") -> List[ChineseTranslation]:
    """
    Deterministic stand-in translations.

    Args:
        name: Analyzed name
        reason: Optional clause appended to each explanation

    Returns:
        Two placeholder translations
    """
    suffix = f"，{reason}" if reason else ""
    return [
        ChineseTranslation(
            translation=f"{name}的中文翻译1",
            explanation=f"这是{name}的默认中文翻译{suffix}。",
        ),
        ChineseTranslation(
            translation=f"{name}的中文翻译2",
            explanation=f"这是{name}的另一个默认中文翻译{suffix}。",
        ),
    ]


def user_translation_entry(name: str, translation: str) -> ChineseTranslation:
    """Translation entry for a user-supplied rendering."""
    return ChineseTranslation(
        translation=translation,
        explanation=f'User-provided Chinese translation for "{name}".',
    )


def _coerce_translations(value: Any, name: str) -> List[ChineseTranslation]:
    items = value if isinstance(value, list) else []
    translations = []
    for item in items:
        if isinstance(item, str):
            item = {"translation": item}
        if not isinstance(item, dict):
            continue
        text = _optional_text(item.get("translation"))
        if text:
            explanation = _optional_text(item.get("explanation")) or ""
            translations.append(ChineseTranslation(translation=text, explanation=explanation))

    return translations or placeholder_translations(name, "因为分析结果没有提供翻译")


def normalize_analysis(
    raw: Dict[str, Any], name: str, rule: Optional[str] = None
) -> NameMatchAnalysis:
    """
    Turn raw provider JSON into a consistent analysis.

    Core categories missing or malformed are back-filled as non-matching;
    optional categories that are malformed are dropped.

    Args:
        raw: Decoded provider object (camelCase or snake_case keys)
        name: Requested name (the provider's spelling is not trusted)
        rule: Overall-match rule (defaults to configuration)

    Returns:
        Normalized analysis with recomputed overallMatch
    """
    fields: Dict[str, Any] = {"name": name}
    for field in ALL_CATEGORIES:
        category = _coerce_category(_lookup(raw, field), field)
        if category is None and field in CORE_CATEGORIES:
            category = CategoryAnalysis(matches=False, explanation=MISSING_CATEGORY_TEXT)
        fields[field] = category

    for field in ("origin", "meaning", "summary", "meaning_match_reason", "chinese_metaphysics_reason"):
        fields[field] = _optional_text(_lookup(raw, field))
    for field in ("meaning_match_score", "chinese_metaphysics_score"):
        fields[field] = coerce_score(_lookup(raw, field))

    fields["chinese_translations"] = _coerce_translations(
        _lookup(raw, "chinese_translations"), name
    )
    return recompute_overall_match(NameMatchAnalysis(**fields), rule)


def matches_half_rule(analysis: NameMatchAnalysis) -> bool:
    """At least half (rounded up) of the populated categories match."""
    populated = analysis.populated_categories()
    if not populated:
        return False
    matched = sum(1 for category in populated if category.matches)
    return matched >= math.ceil(len(populated) / 2)


def matches_core_rule(analysis: NameMatchAnalysis) -> bool:
    """At least three of the five core categories match."""
    matched = sum(1 for category in analysis.core_categories() if category.matches)
    return matched >= CORE_MATCH_THRESHOLD


OVERALL_MATCH_RULES = {
    "half": matches_half_rule,
    "core": matches_core_rule,
}


def compute_overall_match(analysis: NameMatchAnalysis, rule: Optional[str] = None) -> bool:
    """
    Derive the overall verdict from the category verdicts.

    Args:
        analysis: Analysis to score
        rule: Rule name ("half" or "core"); defaults to configuration

    Returns:
        Overall match
    """
    return OVERALL_MATCH_RULES[rule or config.overall_match_rule](analysis)


def recompute_overall_match(
    analysis: NameMatchAnalysis, rule: Optional[str] = None
) -> NameMatchAnalysis:
    """
    Return a copy with ``overall_match`` derived from the categories.

    Applying it twice gives the same result as applying it once.
    """
    overall = compute_overall_match(analysis, rule)
    if overall == analysis.overall_match:
        return analysis
    return analysis.model_copy(update={"overall_match": overall})


def apply_user_translation(
    analysis: NameMatchAnalysis, translation: Optional[str]
) -> NameMatchAnalysis:
    """
    Put a user-supplied translation first.

    Previous translations that differ from it are kept after it.

    Args:
        analysis: Source analysis (not modified)
        translation: User translation, or None

    Returns:
        Analysis with the user translation first
    """
    if not translation or analysis.primary_translation == translation:
        return analysis

    kept = [t for t in analysis.chinese_translations if t.translation != translation]
    translations = [user_translation_entry(analysis.name, translation)] + kept
    return analysis.model_copy(update={"chinese_translations": translations})


def create_error_analysis(
    name: str,
    message: str,
    user_translation: Optional[str] = None,
) -> NameMatchAnalysis:
    """
    Fully populated stand-in analysis for a failed computation.

    Every category is non-matching and explains the failure.

    Args:
        name: Analyzed name
        message: Error text used as every explanation
        user_translation: User translation to keep first

    Returns:
        Error analysis with overallMatch False
    """
    translations = placeholder_translations(name, "因为分析过程中发生错误")
    if user_translation:
        translations = [user_translation_entry(name, user_translation), translations[1]]

    categories = {
        field: CATEGORY_MODELS[field](matches=False, explanation=message, score=0)
        for field in ALL_CATEGORIES
    }
    return NameMatchAnalysis(
        name=name,
        overall_match=False,
        origin="Unknown (error occurred)",
        meaning="Unknown (error occurred)",
        meaning_match_score=0,
        meaning_match_reason=message,
        chinese_metaphysics_score=0,
        chinese_metaphysics_reason="Error during analysis",
        chinese_translations=translations,
        summary=message,
        **categories,
    )
