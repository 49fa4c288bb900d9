"""Shared fixtures for tinypaste tests."""

import tempfile
from pathlib import Path

import pytest

from tinypaste.storage import Storage


@pytest.fixture
def temp_storage():
    """Create a temporary storage instance for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test_pastes.db"
        yield Storage(str(db_path))
