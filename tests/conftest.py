"""Pytest configuration for ruby-visibility tests."""

from pathlib import Path

import pytest

from ruby_visibility import VisibilityResolver

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the Ruby fixture files."""
    return FIXTURES_DIR


@pytest.fixture
def resolver() -> VisibilityResolver:
    """Resolver with default configuration."""
    return VisibilityResolver()
