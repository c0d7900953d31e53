"""Utility functions."""

from text2cards_core.utils.hashing import content_fingerprint
from text2cards_core.utils.logging import SensitiveDataFilter, get_logger, redact

__all__ = [
    "content_fingerprint",
    "get_logger",
    "redact",
    "SensitiveDataFilter",
]
