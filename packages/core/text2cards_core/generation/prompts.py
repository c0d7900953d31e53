"""System prompts and the structured-output hint sent to the model."""

from typing import Any

from text2cards_core.schemas.flashcards import Difficulty
from text2cards_core.schemas.language import Language

FLASHCARD_COUNT = 5

_POLISH_PROMPT = (
    f"Twoim zadaniem jest wygenerowanie {FLASHCARD_COUNT} fiszek w formacie JSON. "
    "Zwróć WYŁĄCZNIE tablicę JSON obiektów bez żadnego dodatkowego tekstu przed lub po. "
    "Każdy obiekt musi zawierać pola: 'front' (pytanie), 'back' (odpowiedź), 'hint' (podpowiedź), "
    "'difficulty' (jedna z wartości: 'easy', 'medium', 'hard') oraz 'tags' (tablica stringów). "
    f"Wygeneruj {FLASHCARD_COUNT} różnych fiszek obejmujących różne aspekty tekstu. "
    "NIE DODAWAJ żadnych wyjaśnień, znaczników markdown ani bloków kodu przed lub po tablicy JSON. "
    "WAŻNE: Pytanie, odpowiedź i podpowiedź muszą być w języku POLSKIM."
)

_ENGLISH_PROMPT = (
    f"Your task is to generate {FLASHCARD_COUNT} flashcards in VALID JSON format. "
    "Always return ONLY a JSON ARRAY of flashcard objects with no extra text before or after. "
    "Each object must include these fields: 'front' (question), 'back' (answer), 'hint' (helpful tip), "
    "'difficulty' (one of: 'easy', 'medium', 'hard'), and 'tags' (array of strings). "
    f"Generate {FLASHCARD_COUNT} different flashcards covering different aspects of the text. "
    "DO NOT include any explanation text, markdown, or code blocks before or after the JSON array. "
    "IMPORTANT: The question, answer, and hint must be in ENGLISH."
)

SYSTEM_PROMPTS: dict[Language, str] = {
    Language.POLISH: _POLISH_PROMPT,
    Language.ENGLISH: _ENGLISH_PROMPT,
}

FLASHCARD_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "front": {
                "type": "string",
                "description": "The question or prompt on the front of the flashcard",
            },
            "back": {
                "type": "string",
                "description": "The answer on the back of the flashcard",
            },
            "hint": {"type": "string", "description": "A helpful hint for the user"},
            "difficulty": {
                "type": "string",
                "enum": [level.value for level in Difficulty],
                "description": "The difficulty level of the flashcard",
            },
            "tags": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Tags for categorizing the flashcard",
            },
        },
        "required": ["front", "back", "difficulty", "tags"],
    },
}

FLASHCARD_RESPONSE_FORMAT: dict[str, Any] = {
    "type": "json_schema",
    "json_schema": {
        "name": "FlashcardProposal",
        "strict": True,
        "schema": FLASHCARD_SCHEMA,
    },
}


def build_system_prompt(language: Language) -> str:
    """Return the system instruction for the given language.

    Args:
        language: Target language for all textual fields

    Returns:
        Fixed instruction string
    """
    return SYSTEM_PROMPTS[Language(language)]
