"""Language detection for choosing the prompt language."""

import re

from text2cards_core.schemas.language import DEFAULT_LANGUAGE, Language
from text2cards_core.utils.logging import get_logger

logger = get_logger(__name__)

SAMPLE_SIZE = 500

DIACRITIC_WEIGHT = 2
WORD_WEIGHT = 1

POLISH_DIACRITICS = ("ą", "ć", "ę", "ł", "ń", "ó", "ś", "ź", "ż")
POLISH_WORDS = ("jest", "nie", "to", "się", "oraz", "dla", "przez", "jako", "były")
ENGLISH_WORDS = ("the", "is", "are", "and", "for", "with", "this", "that", "have")


def _word_pattern(words: tuple[str, ...]) -> list[re.Pattern[str]]:
    return [re.compile(rf"\b{re.escape(word)}\b") for word in words]


_POLISH_WORD_PATTERNS = _word_pattern(POLISH_WORDS)
_ENGLISH_WORD_PATTERNS = _word_pattern(ENGLISH_WORDS)


def _score_words(sample: str, patterns: list[re.Pattern[str]]) -> int:
    return sum(WORD_WEIGHT for pattern in patterns if pattern.search(sample))


def detect_language(text: str) -> Language:
    """Guess the language of a text sample.

    Only the first 500 characters are inspected. Each Polish diacritic that
    occurs scores 2 points for Polish; each whole-word marker that occurs
    scores 1 point for its language. Polish wins only with a strictly higher
    score, so ties and inputs without any signal resolve to English.

    Args:
        text: Text to classify

    Returns:
        Detected language
    """
    sample = text[:SAMPLE_SIZE].lower()

    polish_score = sum(DIACRITIC_WEIGHT for char in POLISH_DIACRITICS if char in sample)
    polish_score += _score_words(sample, _POLISH_WORD_PATTERNS)
    english_score = _score_words(sample, _ENGLISH_WORD_PATTERNS)

    logger.debug(
        f"Language scores: polish={polish_score}, english={english_score}"
    )

    if polish_score > english_score:
        return Language.POLISH
    return DEFAULT_LANGUAGE
