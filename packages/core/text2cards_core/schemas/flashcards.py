"""Flashcard proposal schemas."""

from enum import Enum

from pydantic import BaseModel, Field


class FlashcardSource(str, Enum):
    """Origin of a flashcard."""

    AI_FULL = "ai-full"
    AI_EDITED = "ai-edited"
    MANUAL = "manual"


class Difficulty(str, Enum):
    """Difficulty levels the model is asked to assign."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class FlashcardProposal(BaseModel):
    """An unpersisted flashcard candidate produced by the model."""

    front: str = Field(..., min_length=1, description="Question/prompt side")
    back: str = Field(..., min_length=1, description="Answer side")
    source: FlashcardSource = Field(
        FlashcardSource.AI_FULL, description="Origin marker"
    )
    user_id: str | None = Field(
        None, description="Owning user, set by the generator for persistence"
    )
