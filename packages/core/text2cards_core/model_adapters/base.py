"""Base model invoker interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RawModelOutput:
    """Unvalidated completion returned by a model invoker."""

    content: str | list[Any] | dict[str, Any]
    model: str


class BaseModelInvoker(ABC):
    """Abstract base class for model invokers."""

    model_name: str

    @abstractmethod
    async def invoke(self, prompt: str, source_text: str) -> RawModelOutput:
        """Request flashcards for a source text.

        Args:
            prompt: System instruction
            source_text: Raw text sent verbatim as the user turn

        Returns:
            Completion content and the name of the model that produced it
        """
        pass

    async def aclose(self) -> None:
        """Release network resources held by the invoker."""
        return None
