"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

PROGRESSION = "# verse\nC | Am F G _\nI = V _ |\n"


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_midi_path(temp_dir: Path) -> Path:
    """Path for a temporary MIDI file."""
    return temp_dir / "test.mid"


@pytest.fixture
def progression_path(temp_dir: Path) -> Path:
    """A small progression mixing pitches and roman numerals."""
    path = temp_dir / "song.txt"
    path.write_text(PROGRESSION, encoding="utf-8")
    return path
