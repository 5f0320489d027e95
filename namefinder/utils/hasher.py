"""
Cache key generation utilities.

Sandi Metz Principles:
- Single Responsibility: Key generation
- Small functions: Each does one thing
- Pure functions: No side effects
"""


def normalize_text(text: str) -> str:
    """
    Normalize free text for key comparison.

    Args:
        text: Input text

    Returns:
        Lowercased text (None treated as empty)
    """
    return (text or "").lower()


def generate_cache_key(
    name: str, gender: str, meaning_theme: str, chinese_metaphysics: str
) -> str:
    """
    Generate the analysis cache key.

    The key is the case-insensitive concatenation of the four criteria,
    so "Amelia" and "amelia" under the same criteria share an entry.

    Args:
        name: Candidate name
        gender: "Male" or "Female"
        meaning_theme: Desired meaning/theme
        chinese_metaphysics: Desired metaphysics alignment

    Returns:
        Cache key
    """
    parts = [name, gender, meaning_theme, chinese_metaphysics]
    return normalize_text("_".join(part or "" for part in parts))
