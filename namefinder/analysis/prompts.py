"""
Prompt construction for analysis provider calls.

Sandi Metz Principles:
- Single Responsibility: Build completion requests
- Pure functions: No I/O, no state
"""

from typing import Dict, List, Optional

from namefinder.models.llm import CompletionRequest

ANALYST_ROLE = (
    "You are an expert in name analysis, specializing in cultural symbolism, "
    "psychology, literature, art, phonetics, and Chinese metaphysics. Analyze "
    "names against the user's criteria and answer with structured JSON only."
)

TRANSLATIONS_REQUIRED = (
    "You MUST provide at least 2 Chinese translations of each name, each with the "
    "Chinese characters and an explanation of their meaning and pronunciation."
)

TRANSLATIONS_PROVIDED = (
    "The user has already provided Chinese translations for some names. "
    "DO NOT generate new translations for those names; use ONLY the provided one."
)

CATEGORY_SCHEMA = """{
  "name": "the name",
  "origin": "origin of the name",
  "meaning": "meaning of the name",
  "chineseTranslations": [{"translation": "...", "explanation": "..."}],
  "characterAnalysis": {"matches": true, "explanation": "...", "score": 0},
  "nameAnalysis": {"matches": true, "explanation": "...", "score": 0},
  "baziAnalysis": {"matches": true, "explanation": "...", "score": 0},
  "qiMenDunJiaAnalysis": {"matches": true, "explanation": "...", "score": 0},
  "fengShuiAnalysis": {"matches": true, "explanation": "...", "score": 0},
  "culturalPsychologicalAnalysis": {"matches": true, "explanation": "...",
    "historicalReferences": ["..."], "psychologicalImpact": "...", "score": 0},
  "literaryArtisticAnalysis": {"matches": true, "explanation": "...",
    "literaryReferences": ["..."], "artisticConnections": ["..."], "score": 0},
  "linguisticAnalysis": {"matches": true, "explanation": "...",
    "phonetics": "...", "pronunciationVariations": ["..."], "score": 0},
  "fiveElementAnalysis": {"matches": true, "explanation": "...",
    "associatedElement": "...", "score": 0},
  "numerologyAnalysis": {"matches": true, "explanation": "...",
    "lifePathNumber": 0, "personalityNumber": 0, "score": 0},
  "astrologyAnalysis": {"matches": true, "explanation": "...",
    "associatedZodiac": "...", "planetaryInfluence": "...", "score": 0},
  "summary": "..."
}"""


def build_analysis_request(
    name: str,
    gender: str,
    meaning_theme: str,
    chinese_metaphysics: str,
    user_translation: Optional[str] = None,
) -> CompletionRequest:
    """
    Build the single-name analysis request.

    Args:
        name: Candidate name
        gender: "Male" or "Female"
        meaning_theme: Desired meaning/theme
        chinese_metaphysics: Desired metaphysics alignment
        user_translation: Translation the provider must use instead of inventing one

    Returns:
        Completion request
    """
    if user_translation:
        translation_rule = (
            f'The user provided the Chinese translation "{user_translation}". '
            "DO NOT generate new Chinese translations; analyze ONLY this one."
        )
    else:
        translation_rule = TRANSLATIONS_REQUIRED

    user_prompt = (
        f'Analyze the name "{name}" ({gender}) based on these criteria:\n'
        f"- Meaning/Theme desired: {meaning_theme}\n"
        f"- Chinese Metaphysics criteria: {chinese_metaphysics}\n\n"
        f"{translation_rule}\n\n"
        "Score each category 0-10 (10 is the best match).\n"
        f"Respond with a JSON object of this structure:\n{CATEGORY_SCHEMA}"
    )
    return CompletionRequest(
        system_prompt=ANALYST_ROLE,
        user_prompt=user_prompt,
        operation="analysis",
        json_mode=True,
    )


def build_batch_request(
    names: List[str],
    gender: str,
    meaning_theme: str,
    chinese_metaphysics: str,
    user_translations: Dict[str, str],
) -> CompletionRequest:
    """
    Build the chunk analysis request covering several names.

    Args:
        names: Names in the chunk
        gender: "Male" or "Female"
        meaning_theme: Desired meaning/theme
        chinese_metaphysics: Desired metaphysics alignment
        user_translations: User translations for names in the chunk

    Returns:
        Completion request
    """
    provided = [
        f'- {name}: "{user_translations[name]}"'
        for name in names
        if user_translations.get(name)
    ]
    system_prompt = ANALYST_ROLE + "\n\n" + TRANSLATIONS_REQUIRED
    translation_block = ""
    if provided:
        system_prompt += "\n\n" + TRANSLATIONS_PROVIDED
        translation_block = (
            "Names with user-provided Chinese translations:\n" + "\n".join(provided) + "\n\n"
        )

    user_prompt = (
        f"Analyze the following names for a {gender} baby:\n"
        f"- Names to analyze: {', '.join(names)}\n"
        f"- Meaning/Theme desired: {meaning_theme}\n"
        f"- Chinese Metaphysics criteria: {chinese_metaphysics}\n\n"
        f"{translation_block}"
        'Respond with a JSON object {"results": [...]} holding one analysis per '
        f"name, each with this structure:\n{CATEGORY_SCHEMA}"
    )
    return CompletionRequest(
        system_prompt=system_prompt,
        user_prompt=user_prompt,
        operation="batch_analysis",
        json_mode=True,
    )


def build_prefilter_request(
    names: List[str], meaning_theme: str, total_names: int
) -> CompletionRequest:
    """
    Build the bulk prefilter request.

    Args:
        names: Names listed in the call
        meaning_theme: Desired meaning/theme
        total_names: Size of the full candidate list

    Returns:
        Completion request asking for a comma-separated answer
    """
    user_prompt = (
        f"I have a list of {total_names} names and I'm looking for names that "
        f'relate to the theme: "{meaning_theme}".\n\n'
        f"Analyze these {len(names)} names and return ONLY the names whose "
        f'meanings, origins, or associations relate to "{meaning_theme}":\n'
        f"{', '.join(names)}\n\n"
        "Return a simple comma-separated list of the matching names. "
        "Do not include any explanations or additional text."
    )
    return CompletionRequest(
        system_prompt=(
            "You are an expert in name meanings and themes. Identify which names "
            "from a list might relate to a specific theme or meaning."
        ),
        user_prompt=user_prompt,
        operation="prefilter",
        max_tokens=2000,
    )


def build_pop_culture_request(gender: str, count: int) -> CompletionRequest:
    """
    Build the pop-culture name list request.

    Args:
        gender: "Male" or "Female"
        count: Number of names to ask for

    Returns:
        Completion request
    """
    noun = "boy" if gender == "Male" else "girl"
    user_prompt = (
        f"List {count} distinct {noun} names popularized by movies, TV series, "
        "anime, games, music, and books of the last few decades.\n"
        'Respond with a JSON object {"names": ["...", "..."]} containing only '
        "first names, without explanations."
    )
    return CompletionRequest(
        system_prompt=(
            "You are a pop-culture expert who tracks baby name trends driven by "
            "characters and celebrities."
        ),
        user_prompt=user_prompt,
        operation="pop_culture",
        json_mode=True,
        temperature=0.9,
    )
