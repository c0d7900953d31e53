"""Generation record and error log schemas.

A generation record is written once before the model is called and updated
exactly once after a successful call. Failed attempts are recorded as error
log entries instead; the record itself is left untouched and keeps the
``pending`` status.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from text2cards_core.schemas.flashcards import FlashcardProposal

UNKNOWN_MODEL = "unknown"


class GenerationStatus(str, Enum):
    """Lifecycle marker of a generation record."""

    PENDING = "pending"
    COMPLETED = "completed"


class GenerationCreate(BaseModel):
    """Fields written when a generation attempt starts."""

    user_id: str
    source_text_hash: str
    source_text_length: int = Field(..., ge=0)
    model: str = ""
    generated_count: int = 0
    accepted_unedited_count: int = 0
    accepted_edited_count: int = 0
    generation_duration: int = 0
    status: GenerationStatus = GenerationStatus.PENDING


class GenerationUpdate(BaseModel):
    """Fields written when a generation attempt completes."""

    model: str
    generated_count: int = Field(..., ge=0)
    generation_duration: int = Field(..., ge=0, description="Milliseconds")
    status: GenerationStatus = GenerationStatus.COMPLETED


class GenerationRecord(BaseModel):
    """A persisted generation attempt."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    model: str
    generated_count: int
    accepted_unedited_count: int
    accepted_edited_count: int
    source_text_hash: str
    source_text_length: int
    generation_duration: int
    status: GenerationStatus
    created_at: datetime
    updated_at: datetime


class BasicGeneration(BaseModel):
    """Subset of a generation record returned to callers."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    generated_count: int
    accepted_unedited_count: int
    accepted_edited_count: int
    created_at: datetime
    updated_at: datetime
    model: str


class GenerationErrorLogCreate(BaseModel):
    """A failed generation attempt, written best-effort."""

    user_id: str
    model: str = UNKNOWN_MODEL
    error_code: str
    error_message: str
    source_text_hash: str
    source_text_length: int = Field(..., ge=0)


class GenerationResult(BaseModel):
    """Outcome of a successful generation."""

    generation: BasicGeneration
    flashcards: list[FlashcardProposal] = Field(default_factory=list)
