"""
Pitch primitives - PitchClass and Accidental.

PitchClass represents the 12 chromatic pitches (octave-independent),
with mod-12 arithmetic. Accidental is the sharp/flat/natural alteration
used by roman-numeral keys and tensions.
"""

from __future__ import annotations

from enum import IntEnum

# Display names (module level to avoid IntEnum member issues)
_SHARP_NAMES: list[str] = [
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
]
_FLAT_NAMES: list[str] = [
    "C",
    "Db",
    "D",
    "Eb",
    "E",
    "F",
    "Gb",
    "G",
    "Ab",
    "A",
    "Bb",
    "B",
]

# Accepted spellings, with enharmonic folding
PITCH_NAMES: dict[str, int] = {
    "C": 0,
    "C#": 1,
    "Db": 1,
    "D": 2,
    "D#": 3,
    "Eb": 3,
    "E": 4,
    "Fb": 4,
    "F": 5,
    "E#": 5,
    "F#": 6,
    "Gb": 6,
    "G": 7,
    "G#": 8,
    "Ab": 8,
    "A": 9,
    "A#": 10,
    "Bb": 10,
    "B": 11,
    "Cb": 11,
    "B#": 1,
}


class PitchClass(IntEnum):
    """
    The 12 chromatic pitch classes (0-11).

    Octave-independent - C4 and C5 are both PitchClass.C.
    Enharmonic equivalents share the same value (C# == Db == 1).

    Spelling is a display concern, handled at rendering.
    Internally, we use sharp names (Cs, Ds, etc.).
    """

    C = 0
    Cs = 1  # C# / Db
    D = 2
    Ds = 3  # D# / Eb
    E = 4
    F = 5
    Fs = 6  # F# / Gb
    G = 7
    Gs = 8  # G# / Ab
    A = 9
    As = 10  # A# / Bb
    B = 11

    def transpose(self, semitones: int) -> PitchClass:
        """Transpose by a number of semitones (positive or negative)."""
        return PitchClass((self.value + semitones) % 12)

    def interval_to(self, other: PitchClass) -> int:
        """Semitones from this pitch class up to another (0-11)."""
        return (other.value - self.value) % 12

    def diff(self, tonic: PitchClass) -> int:
        """Semitone distance of this pitch above a tonic (0-11)."""
        return tonic.interval_to(self)

    def to_midi(self, octave: int = 4) -> int:
        """Convert to MIDI note number. C4 = 60."""
        return self.value + (octave + 1) * 12

    def spell(self, prefer_flats: bool = False) -> str:
        """Get human-readable name."""
        names = _FLAT_NAMES if prefer_flats else _SHARP_NAMES
        return names[self.value]

    @classmethod
    def from_midi(cls, midi_note: int) -> PitchClass:
        """Extract pitch class from MIDI note number."""
        return cls(midi_note % 12)

    @classmethod
    def parse(cls, name: str) -> PitchClass:
        """
        Parse a pitch class from a string like 'C', 'C#', 'Db'.

        Enharmonic spellings fold onto the 12 classes
        (Fb = E, E# = F, Cb = B, B# = C#).
        """
        name = name.strip()
        if name in PITCH_NAMES:
            return cls(PITCH_NAMES[name])

        # Enum names (Cs, Ds, ...)
        name_upper = name.upper()
        for member in cls:
            if member.name.upper() == name_upper:
                return member

        raise ValueError(f"Unknown pitch class: {name}")


class Accidental(IntEnum):
    """
    A chromatic alteration, valued as its semitone offset.

    Natural = 0, Sharp = +1, Flat = -1.
    """

    FLAT = -1
    NATURAL = 0
    SHARP = 1

    @property
    def symbol(self) -> str:
        """Source-text spelling ('' for natural)."""
        return {Accidental.FLAT: "b", Accidental.NATURAL: "", Accidental.SHARP: "#"}[self]

    @classmethod
    def parse(cls, symbol: str) -> Accidental:
        """Parse '#', 'b' or '' into an accidental."""
        if symbol == "#":
            return cls.SHARP
        if symbol == "b":
            return cls.FLAT
        if symbol == "":
            return cls.NATURAL
        raise ValueError(f"Unknown accidental: {symbol}")
