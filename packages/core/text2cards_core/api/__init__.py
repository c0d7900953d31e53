"""HTTP API for flashcard generation."""

from text2cards_core.api.app import create_app

__all__ = ["create_app"]
