"""Flashcard generation pipeline.

Language detection, prompt building and response parsing are pure
functions; ``FlashcardGenerator`` drives them together with a model
invoker and a generation store.
"""

from text2cards_core.generation.language import detect_language
from text2cards_core.generation.parser import extract_proposals
from text2cards_core.generation.prompts import (
    FLASHCARD_RESPONSE_FORMAT,
    build_system_prompt,
)
from text2cards_core.generation.generator import (
    FlashcardGenerator,
    generate_flashcards,
    resolve_language,
)

__all__ = [
    "FLASHCARD_RESPONSE_FORMAT",
    "FlashcardGenerator",
    "build_system_prompt",
    "detect_language",
    "extract_proposals",
    "generate_flashcards",
    "resolve_language",
]
