"""Fixtures for unit tests."""

from pathlib import Path

import pytest

from tdd_reporter.config import Config
from tdd_reporter.storage import MemoryStorage


@pytest.fixture
def storage() -> MemoryStorage:
    """Create in-memory storage recording every write."""
    return MemoryStorage()


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Create config rooted in a temporary project."""
    return Config(project_root=tmp_path)
