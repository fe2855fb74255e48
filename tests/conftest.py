"""Common test fixtures for prompt file tests."""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the sample ``.prompt`` documents."""
    return FIXTURES_DIR


@pytest.fixture
def prompts_dir() -> Path:
    """A valid prompt store directory: two versions of ``basic`` plus a nested ``greeting``."""
    return FIXTURES_DIR / "prompts"
