"""Supported prompt languages."""

from enum import Enum


class Language(str, Enum):
    """Languages the generation prompt can be written in."""

    POLISH = "pl"
    ENGLISH = "en"


DEFAULT_LANGUAGE = Language.ENGLISH


def parse_language(code: str | Language | None) -> Language | None:
    """Normalize a caller-supplied language code.

    Args:
        code: Language code such as "pl" or "EN", or None

    Returns:
        Matching Language, or None when the code is empty or unsupported
    """
    if code is None:
        return None
    if isinstance(code, Language):
        return code
    normalized = code.strip().lower()
    if not normalized:
        return None
    try:
        return Language(normalized)
    except ValueError:
        return None
