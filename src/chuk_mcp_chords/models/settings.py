"""
Export settings - how a chord score becomes a MIDI file.

Settings can come from defaults, a YAML file, or keyword overrides
(CLI flags, tool arguments), in increasing precedence:

    bpm: 120
    tonic: D
    velocity: 90
    time_signature: "3/4"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from chuk_mcp_chords.constants import (
    DEFAULT_BPM,
    DEFAULT_CHANNEL,
    DEFAULT_OCTAVE,
    DEFAULT_PROGRAM,
    DEFAULT_VELOCITY,
    TICKS_PER_BEAT,
    ErrorMessages,
)
from chuk_mcp_chords.core.pitch import PitchClass


class ExportSettings(BaseModel):
    """
    Global context for one export.

    Tonic is only required when the score uses roman-numeral keys.
    """

    bpm: int = Field(DEFAULT_BPM, gt=0, le=300, description="Tempo in BPM")
    tonic: str | None = Field(None, description="Tonic for roman-numeral keys (e.g. 'C', 'F#')")
    channel: int = Field(DEFAULT_CHANNEL, ge=0, le=15, description="MIDI channel (0-15)")
    velocity: int = Field(DEFAULT_VELOCITY, ge=0, le=127, description="Note velocity (0-127)")
    octave: int = Field(DEFAULT_OCTAVE, ge=0, le=7, description="Octave of the first chord")
    ticks_per_beat: int = Field(TICKS_PER_BEAT, gt=0, description="MIDI resolution")
    program: int = Field(DEFAULT_PROGRAM, ge=0, le=127, description="General MIDI program")
    time_signature: str = Field("4/4", description="Time signature")

    model_config = {"frozen": True}

    @field_validator("tonic")
    @classmethod
    def validate_tonic(cls, v: str | None) -> str | None:
        """Ensure the tonic names a pitch class."""
        if v is None:
            return v
        try:
            PitchClass.parse(v)
        except ValueError:
            raise ValueError(ErrorMessages.INVALID_TONIC.format(tonic=v)) from None
        return v.strip()

    @field_validator("time_signature")
    @classmethod
    def validate_time_signature(cls, v: str) -> str:
        """Validate 'N/D' with a power-of-two denominator."""
        numerator, denominator = _split_time_signature(v)
        if numerator <= 0 or denominator <= 0 or denominator & (denominator - 1):
            raise ValueError(f"Invalid time signature: {v}")
        return v

    def get_tonic(self) -> PitchClass | None:
        """Parsed tonic, if any."""
        return PitchClass.parse(self.tonic) if self.tonic is not None else None

    def get_time_signature(self) -> tuple[int, int]:
        """(numerator, denominator)."""
        return _split_time_signature(self.time_signature)

    def with_overrides(self, **overrides: Any) -> ExportSettings:
        """Copy with the non-None overrides applied (and validated)."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ExportSettings(**values)


def _split_time_signature(value: str) -> tuple[int, int]:
    parts = value.split("/")
    if len(parts) != 2:
        raise ValueError(f"Invalid time signature: {value}")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"Invalid time signature: {value}") from None


def load_settings(path: str | Path | None = None, **overrides: Any) -> ExportSettings:
    """
    Load settings from a YAML file, then apply overrides.

    Args:
        path: YAML file (optional; defaults are used without one)
        **overrides: Values that win over the file; None means "not given"

    Returns:
        Validated ExportSettings

    Raises:
        FileNotFoundError: if path does not exist
        pydantic.ValidationError: for out-of-range values
    """
    data: dict[str, Any] = {}
    if path is not None:
        with open(path) as f:
            loaded = yaml.safe_load(f)
        if loaded is not None and not isinstance(loaded, dict):
            raise ValueError(f"Settings file must contain a mapping: {path}")
        data = loaded or {}
    data.update({k: v for k, v in overrides.items() if v is not None})
    return ExportSettings(**data)
