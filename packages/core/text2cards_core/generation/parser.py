"""Recover flashcard proposals from raw model output.

Model content is untrusted text. It may be a clean JSON array, an array
wrapped in prose or markdown fences, JSON with stray control characters or
trailing commas, a single object, or something unusable. Extraction runs in
stages, each of which can fail with its own error type:

    raw content -> JSON candidate substring -> parsed value -> proposals
"""

import bisect
import json
import re
from typing import Any

from text2cards_core.errors import (
    InvalidJsonError,
    NoJsonFoundError,
    UnexpectedPayloadError,
)
from text2cards_core.schemas.flashcards import FlashcardProposal, FlashcardSource
from text2cards_core.utils.logging import get_logger

logger = get_logger(__name__)

_CLOSERS = {"[": "]", "{": "}"}
_TRAILING_COMMA = re.compile(r",\s*([\]}])")
_WHITESPACE_CONTROLS = "\n\r\t"
_ASCII_PRINTABLE_MAX = 0x7E


def _bracket_pairs(text: str) -> dict[int, int]:
    """Map the index of every balanced opening bracket to its closing bracket.

    One pass with a stack. Quotes only start string literals inside an open
    bracket, so prose around the JSON cannot swallow it. A mismatched closer
    invalidates every bracket still open.
    """
    pairs: dict[int, int] = {}
    stack: list[tuple[int, str]] = []
    in_string = False
    escaped = False

    for index, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"' and stack:
            in_string = True
        elif char in _CLOSERS:
            stack.append((index, _CLOSERS[char]))
        elif char in "]}" and stack:
            start, expected = stack.pop()
            if char != expected:
                stack.clear()
                continue
            pairs[start] = index
    return pairs


def _first_balanced(
    content: str,
    pairs: dict[int, int],
    opener: str,
    require_object: bool,
) -> str | None:
    object_starts = [i for i, char in enumerate(content) if char == "{"]
    for start in sorted(pairs):
        if content[start] != opener:
            continue
        end = pairs[start]
        if require_object:
            # any "{" between start and end
            position = bisect.bisect_right(object_starts, start)
            if position == len(object_starts) or object_starts[position] > end:
                continue
        return content[start : end + 1]
    return None


def find_json_candidate(content: str) -> str | None:
    """Find the first array- or object-shaped substring in content.

    An array holding objects is preferred over a bare object, so a fenced
    array preceded by prose containing brackets or braces is still picked
    up. A bare object is the fallback, e.g. for truncated arrays.

    Args:
        content: Raw model output

    Returns:
        Candidate JSON substring, or None if nothing bracket-shaped exists
    """
    pairs = _bracket_pairs(content)
    return _first_balanced(content, pairs, "[", require_object=True) or _first_balanced(
        content, pairs, "{", require_object=False
    )


def clean_json_text(candidate: str) -> str:
    """Strip non-printable characters, stray non-ASCII and trailing commas.

    Whitespace control characters become spaces so words inside string
    literals stay separated; other non-printable characters are dropped.
    Non-ASCII characters are dropped only outside string literals, so
    Polish card text keeps its diacritics.
    """
    kept: list[str] = []
    in_string = False
    escaped = False

    for char in candidate:
        if not char.isprintable():
            if char in _WHITESPACE_CONTROLS:
                kept.append(" ")
            continue
        if not in_string and ord(char) > _ASCII_PRINTABLE_MAX:
            continue

        kept.append(char)
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True

    return _TRAILING_COMMA.sub(r"\1", "".join(kept)).strip()


def parse_candidate(candidate: str) -> Any:
    """Parse a JSON candidate, retrying once after cleanup.

    Args:
        candidate: Substring returned by ``find_json_candidate``

    Returns:
        Parsed JSON value

    Raises:
        InvalidJsonError: If the cleaned candidate still fails to parse
    """
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.debug(f"Strict JSON parse failed ({e}), retrying after cleanup")

    cleaned = clean_json_text(candidate)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON after cleanup: {e}. Content: {cleaned[:200]}...")
        raise InvalidJsonError() from e


def _non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _to_proposal(item: Any) -> FlashcardProposal | None:
    """Build a proposal from an entry, or None when front/back are unusable."""
    if not isinstance(item, dict):
        return None
    front = item.get("front")
    back = item.get("back")
    if not (_non_empty_string(front) and _non_empty_string(back)):
        return None
    return FlashcardProposal(front=front, back=back, source=FlashcardSource.AI_FULL)


def validate_proposals(value: Any) -> list[FlashcardProposal]:
    """Turn a parsed JSON value into flashcard proposals.

    List entries without non-empty string ``front`` and ``back`` fields are
    dropped. Any other fields (hint, difficulty, tags) are discarded.

    Args:
        value: Parsed JSON value

    Returns:
        Valid proposals, possibly empty

    Raises:
        UnexpectedPayloadError: If the value is neither a list nor a valid
            flashcard object
    """
    if isinstance(value, list):
        proposals: list[FlashcardProposal] = []
        for index, item in enumerate(value):
            proposal = _to_proposal(item)
            if proposal is None:
                logger.debug(f"Dropping invalid flashcard entry {index}: {str(item)[:100]}")
                continue
            proposals.append(proposal)
        logger.debug(f"Kept {len(proposals)} of {len(value)} flashcard entries")
        return proposals

    if isinstance(value, dict):
        proposal = _to_proposal(value)
        if proposal is None:
            raise UnexpectedPayloadError(
                "Parsed JSON object is not a flashcard with front and back"
            )
        logger.debug("Model returned a single flashcard object")
        return [proposal]

    raise UnexpectedPayloadError(
        f"Unexpected JSON payload of type {type(value).__name__}"
    )


def extract_proposals(raw_content: str | list | dict) -> list[FlashcardProposal]:
    """Extract flashcard proposals from model output.

    Args:
        raw_content: Completion content, either text or an already
            structured value

    Returns:
        Proposals with source set to ``ai-full``

    Raises:
        NoJsonFoundError: If text content has no array/object substring
        InvalidJsonError: If the candidate cannot be parsed after cleanup
        UnexpectedPayloadError: If the parsed value has the wrong shape
    """
    if not isinstance(raw_content, str):
        return validate_proposals(raw_content)

    candidate = find_json_candidate(raw_content)
    if candidate is None:
        logger.error(f"No JSON block found in response: {raw_content[:100]}...")
        raise NoJsonFoundError()

    logger.debug(f"Found JSON candidate: {candidate[:50]}...")
    return validate_proposals(parse_candidate(candidate))
