"""Generation record storage."""

from text2cards_core.persistence.base import (
    GenerationStore,
    PersistenceError,
    is_session_expired,
)
from text2cards_core.persistence.memory import InMemoryGenerationStore

__all__ = [
    "GenerationStore",
    "InMemoryGenerationStore",
    "PersistenceError",
    "is_session_expired",
]
