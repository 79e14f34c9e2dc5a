"""
Scale primitives - ScaleType and chord keys.

Scales are step patterns from a tonic. Extended degrees (9, 11, 13)
fold onto 2, 4, 6 an octave up.

A chord's key is either absolute (a fixed pitch) or relative
(a semitone distance from a tonic that is supplied later).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, TypeAlias

from chuk_mcp_chords.errors import KeyTypeMismatch

from .pitch import Accidental, PitchClass

# Degree numbers a chord may reference
VALID_DEGREES: frozenset[int] = frozenset({1, 2, 3, 4, 5, 6, 7, 9, 11, 13})

# Roman numerals, longest first so a prefix never shadows a longer match
ROMAN_NUMERALS: tuple[tuple[str, int], ...] = (
    ("VII", 7),
    ("VI", 6),
    ("IV", 4),
    ("V", 5),
    ("III", 3),
    ("II", 2),
    ("I", 1),
)

# Canonical spelling of each relative semitone
_RELATIVE_NAMES: list[str] = [
    "I",
    "bII",
    "II",
    "bIII",
    "III",
    "IV",
    "bV",
    "V",
    "bVI",
    "VI",
    "bVII",
    "VII",
]


@dataclass(frozen=True)
class ScaleType:
    """
    A scale defined by its step pattern (semitones between degrees).

    A major scale is: W W H W W W H (2 2 1 2 2 2 1 semitones)
    """

    steps: tuple[int, ...]
    name: str = ""

    MAJOR: ClassVar[ScaleType]
    MINOR: ClassVar[ScaleType]

    def __post_init__(self) -> None:
        total = sum(self.steps)
        if len(self.steps) != 7 or total != 12:
            raise ValueError(f"Scale must have 7 steps summing to 12, got {self.steps}")

    def degree_to_semitones(self, degree: int) -> int:
        """
        Semitones from the tonic to a scale degree.

        Extended degrees keep walking the pattern, so 9 lands an
        octave above 2.
        """
        if degree < 1:
            raise ValueError(f"Degree must be positive, got {degree}")
        return sum(self.steps[i % 7] for i in range(degree - 1))

    def __str__(self) -> str:
        return self.name or f"ScaleType({self.steps})"

    def __repr__(self) -> str:
        if self.name:
            return f"ScaleType.{self.name.upper()}"
        return f"ScaleType({self.steps!r})"


ScaleType.MAJOR = ScaleType((2, 2, 1, 2, 2, 2, 1), "major")
ScaleType.MINOR = ScaleType((2, 1, 2, 2, 1, 2, 2), "minor")


@dataclass(frozen=True)
class AbsoluteKey:
    """A chord root (or bass) at a fixed pitch."""

    pitch: PitchClass

    @property
    def value(self) -> int:
        return int(self.pitch)

    def as_degree(self, tonic: PitchClass) -> RelativeKey:
        """Re-express as a distance above the tonic."""
        return RelativeKey(self.pitch.diff(tonic))

    def as_pitch(self, tonic: PitchClass) -> AbsoluteKey:
        return self

    def __str__(self) -> str:
        return self.pitch.spell()


@dataclass(frozen=True)
class RelativeKey:
    """
    A chord root (or bass) as a semitone distance from an unknown tonic.

    Written as a roman numeral in source text ('IV', 'bVII').
    """

    semitones: int

    def __post_init__(self) -> None:
        if not 0 <= self.semitones <= 11:
            raise ValueError(f"Relative key must be 0-11 semitones, got {self.semitones}")

    @property
    def value(self) -> int:
        return self.semitones

    @classmethod
    def from_degree(cls, degree: int, accidental: Accidental = Accidental.NATURAL) -> RelativeKey:
        """Key for a roman-numeral degree, measured on the major scale."""
        return cls((ScaleType.MAJOR.degree_to_semitones(degree) + accidental) % 12)

    def as_degree(self, tonic: PitchClass) -> RelativeKey:
        return self

    def as_pitch(self, tonic: PitchClass) -> AbsoluteKey:
        """Resolve against a tonic."""
        return AbsoluteKey(tonic.transpose(self.semitones))

    def __str__(self) -> str:
        return _RELATIVE_NAMES[self.semitones]


Key: TypeAlias = AbsoluteKey | RelativeKey


def frame_values(a: Key, b: Key) -> tuple[int, int]:
    """
    Values of two keys in their shared frame.

    Raises KeyTypeMismatch when one is absolute and the other relative.
    """
    if type(a) is not type(b):
        raise KeyTypeMismatch(a, b)
    return a.value, b.value
