"""Shared fixtures."""

import pytest

USER_ID = "5b1d7c1e-2f7a-4c55-9d8e-0a1b2c3d4e5f"


@pytest.fixture
def user_id() -> str:
    """Identifier of the requesting user."""
    return USER_ID


@pytest.fixture
def source_text() -> str:
    """English source text of exactly 1000 characters."""
    sentence = "The cell is the basic unit of life and this is where energy is made. "
    text = (sentence * 20)[:1000]
    assert len(text) == 1000
    return text
