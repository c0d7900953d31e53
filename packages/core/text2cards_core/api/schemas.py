"""Pydantic schemas for API request and response models."""

from pydantic import BaseModel, Field

from text2cards_core.schemas.language import Language

MIN_TEXT_LENGTH = 1000
MAX_TEXT_LENGTH = 10000


class GenerateFlashcardsRequest(BaseModel):
    """Payload for generating flashcards from text."""

    text: str = Field(..., min_length=MIN_TEXT_LENGTH, max_length=MAX_TEXT_LENGTH)
    language: Language | None = None


class ErrorResponse(BaseModel):
    """Error payload returned when generation fails."""

    error: str
    details: str | None = None


class HealthResponse(BaseModel):
    """Health check payload."""

    status: str
