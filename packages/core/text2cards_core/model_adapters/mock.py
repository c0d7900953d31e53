"""Deterministic invoker for development and tests."""

from typing import Any

from text2cards_core.generation.prompts import FLASHCARD_COUNT
from text2cards_core.model_adapters.base import BaseModelInvoker, RawModelOutput
from text2cards_core.utils.logging import get_logger

logger = get_logger(__name__)

MOCK_MODEL_NAME = "mock-model-for-development"


def build_mock_flashcards(source_text: str) -> list[dict[str, Any]]:
    """Build placeholder flashcards derived from the word count of a text."""
    word_count = len(source_text.split())
    return [
        {
            "front": f"Mock Flashcard {i} Front (from text with {word_count} words)",
            "back": f"Mock Answer {i} with details based on the provided content.",
            "difficulty": "medium",
            "tags": ["mock"],
        }
        for i in range(1, FLASHCARD_COUNT + 1)
    ]


class MockModelInvoker(BaseModelInvoker):
    """Invoker that never touches the network."""

    model_name = MOCK_MODEL_NAME

    async def invoke(self, prompt: str, source_text: str) -> RawModelOutput:
        """Return five placeholder flashcards as structured content."""
        logger.debug("Using mock AI response")
        return RawModelOutput(
            content=build_mock_flashcards(source_text),
            model=MOCK_MODEL_NAME,
        )
