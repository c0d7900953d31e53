"""Logging utilities."""

import logging
import os
import re
import sys

_LOG_LEVEL = os.environ.get("TEXT2CARDS_LOG_LEVEL", "INFO").upper()
_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

REDACTED = "[REDACTED]"

# (pattern, replacement) pairs applied to every formatted message
_REDACTIONS: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(
            r"""(['"]?(?:api_?key|openrouter_api_key)['"]?\s*[:=]\s*['"]?)[^'"\s,}]+""",
            re.IGNORECASE,
        ),
        rf"\1{REDACTED}",
    ),
    (re.compile(r"(Bearer\s+)[^\s\"',}]+", re.IGNORECASE), rf"\1{REDACTED}"),
    (
        re.compile(
            r"""(['"]?(?:token|access_token|auth_token|password|secret)['"]?\s*[:=]\s*['"]?)[^'"\s,}]+""",
            re.IGNORECASE,
        ),
        rf"\1{REDACTED}",
    ),
]


def redact(message: str) -> str:
    """Mask credentials and tokens in a log message."""
    for pattern, replacement in _REDACTIONS:
        message = pattern.sub(replacement, message)
    return message


class SensitiveDataFilter(logging.Filter):
    """Redact API keys, bearer tokens and passwords before emission."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """Get a configured logger.

    Args:
        name: Logger name (typically __name__)
        level: Optional log level override

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        handler.addFilter(SensitiveDataFilter())
        logger.addHandler(handler)

    if level is not None:
        logger.setLevel(level)
    elif logger.level == logging.NOTSET:
        logger.setLevel(getattr(logging, _LOG_LEVEL, logging.INFO))

    return logger
