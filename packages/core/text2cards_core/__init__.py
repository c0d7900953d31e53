"""text2cards-core: Pipeline for turning free-form text into flashcards.

The pipeline fingerprints the source text, opens a generation record,
prompts a chat-completion model in the detected language and recovers
flashcard proposals from whatever the model returns.

    >>> from text2cards_core import FlashcardGenerator, Settings, create_invoker
    >>> from text2cards_core.persistence import InMemoryGenerationStore
    >>> settings = Settings(use_ai_mock=True)
    >>> generator = FlashcardGenerator(InMemoryGenerationStore(), create_invoker(settings))
    >>> result = await generator.generate(user_id, text)
"""

from text2cards_core.generation import (
    FlashcardGenerator,
    build_system_prompt,
    detect_language,
    extract_proposals,
    generate_flashcards,
)
from text2cards_core.model_adapters import create_invoker, invoke_model
from text2cards_core.schemas.flashcards import FlashcardProposal, FlashcardSource
from text2cards_core.schemas.generations import GenerationRecord, GenerationResult
from text2cards_core.schemas.language import Language
from text2cards_core.settings import Settings

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "FlashcardGenerator",
    "generate_flashcards",
    "build_system_prompt",
    "detect_language",
    "extract_proposals",
    # Model invocation
    "create_invoker",
    "invoke_model",
    # Schemas
    "FlashcardProposal",
    "FlashcardSource",
    "GenerationRecord",
    "GenerationResult",
    "Language",
    # Configuration
    "Settings",
]
