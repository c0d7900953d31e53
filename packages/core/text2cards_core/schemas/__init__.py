"""Data schemas for the generation pipeline."""

from text2cards_core.schemas.flashcards import (
    Difficulty,
    FlashcardProposal,
    FlashcardSource,
)
from text2cards_core.schemas.generations import (
    UNKNOWN_MODEL,
    BasicGeneration,
    GenerationCreate,
    GenerationErrorLogCreate,
    GenerationRecord,
    GenerationResult,
    GenerationStatus,
    GenerationUpdate,
)
from text2cards_core.schemas.language import DEFAULT_LANGUAGE, Language, parse_language

__all__ = [
    # Language
    "DEFAULT_LANGUAGE",
    "Language",
    "parse_language",
    # Flashcards
    "Difficulty",
    "FlashcardProposal",
    "FlashcardSource",
    # Generations
    "UNKNOWN_MODEL",
    "BasicGeneration",
    "GenerationCreate",
    "GenerationErrorLogCreate",
    "GenerationRecord",
    "GenerationResult",
    "GenerationStatus",
    "GenerationUpdate",
]
