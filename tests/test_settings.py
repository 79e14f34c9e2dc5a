"""
Tests for export settings.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from chuk_mcp_chords.core import PitchClass
from chuk_mcp_chords.models import ExportSettings, load_settings


class TestExportSettings:
    """Tests for ExportSettings validation."""

    def test_defaults(self) -> None:
        """Defaults match the MIDI export constants."""
        settings = ExportSettings()
        assert settings.bpm == 180
        assert settings.tonic is None
        assert settings.channel == 0
        assert settings.velocity == 100
        assert settings.octave == 4
        assert settings.ticks_per_beat == 1024
        assert settings.program == 54
        assert settings.get_time_signature() == (4, 4)

    def test_tonic_parsed(self) -> None:
        """Tonic names parse to pitch classes."""
        assert ExportSettings(tonic="Bb").get_tonic() == PitchClass.As
        assert ExportSettings().get_tonic() is None

    def test_invalid_tonic(self) -> None:
        """Unknown tonic names are rejected."""
        with pytest.raises(ValidationError, match="Invalid tonic"):
            ExportSettings(tonic="H")

    @pytest.mark.parametrize(
        "field,value",
        [("bpm", 0), ("bpm", 301), ("channel", 16), ("velocity", 128), ("octave", 8)],
    )
    def test_ranges(self, field: str, value: int) -> None:
        """Out-of-range values are rejected."""
        with pytest.raises(ValidationError):
            ExportSettings(**{field: value})

    @pytest.mark.parametrize("value", ["4", "4/3", "0/4", "a/b"])
    def test_invalid_time_signature(self, value: str) -> None:
        """Time signatures need N/D with a power-of-two D."""
        with pytest.raises(ValidationError):
            ExportSettings(time_signature=value)

    def test_frozen(self) -> None:
        """Settings are immutable."""
        settings = ExportSettings()
        with pytest.raises(ValidationError):
            settings.bpm = 90

    def test_with_overrides(self) -> None:
        """None overrides are ignored, others are validated."""
        settings = ExportSettings(bpm=100).with_overrides(bpm=None, tonic="G")
        assert settings.bpm == 100
        assert settings.tonic == "G"
        with pytest.raises(ValidationError):
            settings.with_overrides(velocity=500)


class TestLoadSettings:
    """Tests for YAML settings files."""

    def test_no_file(self) -> None:
        """Without a file, defaults plus overrides."""
        assert load_settings(bpm=120).bpm == 120

    def test_yaml_file(self, temp_dir: Path) -> None:
        """Values are read from YAML."""
        path = temp_dir / "settings.yaml"
        path.write_text("bpm: 96\ntonic: D\ntime_signature: 3/4\n")
        settings = load_settings(path)
        assert settings.bpm == 96
        assert settings.get_tonic() == PitchClass.D
        assert settings.get_time_signature() == (3, 4)

    def test_overrides_win(self, temp_dir: Path) -> None:
        """Keyword overrides beat the file; None means not given."""
        path = temp_dir / "settings.yaml"
        path.write_text("bpm: 96\nvelocity: 70\n")
        settings = load_settings(path, bpm=150, velocity=None)
        assert settings.bpm == 150
        assert settings.velocity == 70

    def test_empty_file(self, temp_dir: Path) -> None:
        """An empty file means defaults."""
        path = temp_dir / "settings.yaml"
        path.write_text("")
        assert load_settings(path) == ExportSettings()

    def test_non_mapping(self, temp_dir: Path) -> None:
        """A YAML list is rejected."""
        path = temp_dir / "settings.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            load_settings(path)

    def test_missing_file(self, temp_dir: Path) -> None:
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_settings(temp_dir / "nope.yaml")

    def test_invalid_value_in_file(self, temp_dir: Path) -> None:
        """File values are validated."""
        path = temp_dir / "settings.yaml"
        path.write_text("bpm: 1000\n")
        with pytest.raises(ValidationError):
            load_settings(path)
