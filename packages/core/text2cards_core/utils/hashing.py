"""Hashing utilities."""

import hashlib
from typing import Union


def content_fingerprint(content: Union[str, bytes]) -> str:
    """Generate an MD5 fingerprint of content.

    The fingerprint identifies source text for provenance and future
    deduplication lookups. It is not used for anything security related.

    Args:
        content: String or bytes to hash

    Returns:
        Hex-encoded 128-bit digest
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.md5(content, usedforsecurity=False).hexdigest()
