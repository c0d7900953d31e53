"""Persistence collaborator contract for generation records."""

from abc import ABC, abstractmethod

from text2cards_core.schemas.generations import (
    GenerationCreate,
    GenerationErrorLogCreate,
    GenerationRecord,
    GenerationUpdate,
)

# Error codes used by the hosted database API
SESSION_EXPIRED_CODE = "PGRST301"
SESSION_EXPIRED_MESSAGE = "JWT expired"
NOT_FOUND_CODE = "PGRST116"


class PersistenceError(Exception):
    """Error reported by a generation store."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


def is_session_expired(error: BaseException) -> bool:
    """Return True when an error signals an expired credential.

    Any error carrying ``code == "PGRST301"`` or the message ``JWT expired``
    qualifies, regardless of its class.
    """
    code = getattr(error, "code", None)
    if code == SESSION_EXPIRED_CODE:
        return True
    message = getattr(error, "message", None) or str(error)
    return SESSION_EXPIRED_MESSAGE.lower() in message.lower()


class GenerationStore(ABC):
    """Storage for generation records and generation error logs."""

    @abstractmethod
    async def insert(self, generation: GenerationCreate) -> GenerationRecord:
        """Insert a generation record and return the stored row."""
        pass

    @abstractmethod
    async def update(
        self,
        generation_id: int,
        changes: GenerationUpdate,
    ) -> GenerationRecord:
        """Apply changes to a generation record and return the stored row."""
        pass

    @abstractmethod
    async def insert_error_log(self, entry: GenerationErrorLogCreate) -> None:
        """Insert a generation error log entry."""
        pass
