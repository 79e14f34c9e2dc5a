"""
Chord modifiers - the text-derived alteration intents of a chord symbol.

A modifier carries no arithmetic by itself; the resolution engine
(chord.py) gives it meaning. Modifiers are applied in a canonical order,
not in the order they were written.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum

from .pitch import Accidental


class ModifierKind(IntEnum):
    """Modifier tags, valued in canonical application order."""

    MAJOR = 0
    MINOR = 1
    MINOR_MAJOR_7 = 2
    SUS2 = 3
    SUS4 = 4
    FLAT_5TH = 5
    AUG = 6
    AUG_7 = 7
    DIM = 8
    DIM_7 = 9
    OMIT = 10
    ADD = 11
    TENSION = 12


# Kinds that reshape the chord body (applied before omit/add/tension)
SHAPE_KINDS: frozenset[ModifierKind] = frozenset(
    kind for kind in ModifierKind if kind <= ModifierKind.DIM_7
)

# Spelling of payload-free modifiers
_FIXED_SYMBOLS: dict[ModifierKind, str] = {
    ModifierKind.MINOR_MAJOR_7: "mM7",
    ModifierKind.SUS2: "sus2",
    ModifierKind.SUS4: "sus4",
    ModifierKind.FLAT_5TH: "-5",
    ModifierKind.AUG: "aug",
    ModifierKind.AUG_7: "aug7",
    ModifierKind.DIM: "dim",
    ModifierKind.DIM_7: "dim7",
}


@dataclass(frozen=True)
class Modifier:
    """
    One alteration of a chord symbol.

    `degree` is the numeric payload of Major/Minor/Omit/Add/Tension,
    `accidental` only matters for Tension.

    Examples:
        Modifier.minor(7)  = "m7"
        Modifier(ModifierKind.SUS4) = "sus4"
        Modifier.tension(9, Accidental.FLAT) = "(b9)"
    """

    kind: ModifierKind
    degree: int | None = None
    accidental: Accidental = Accidental.NATURAL

    @classmethod
    def major(cls, degree: int = 5) -> Modifier:
        return cls(ModifierKind.MAJOR, degree)

    @classmethod
    def minor(cls, degree: int = 5) -> Modifier:
        return cls(ModifierKind.MINOR, degree)

    @classmethod
    def omit(cls, degree: int) -> Modifier:
        return cls(ModifierKind.OMIT, degree)

    @classmethod
    def add(cls, degree: int) -> Modifier:
        return cls(ModifierKind.ADD, degree)

    @classmethod
    def tension(cls, degree: int, accidental: Accidental = Accidental.NATURAL) -> Modifier:
        return cls(ModifierKind.TENSION, degree, accidental)

    @property
    def is_shape(self) -> bool:
        """True for modifiers that reshape the chord body."""
        return self.kind in SHAPE_KINDS

    def sort_key(self) -> tuple[int, int, int]:
        return (self.kind, self.degree or 0, self.accidental)

    def __str__(self) -> str:
        if self.kind in _FIXED_SYMBOLS:
            return _FIXED_SYMBOLS[self.kind]
        if self.kind == ModifierKind.MAJOR:
            return "" if self.degree == 5 else str(self.degree)
        if self.kind == ModifierKind.MINOR:
            return "m" if self.degree == 5 else f"m{self.degree}"
        if self.kind == ModifierKind.OMIT:
            return f"omit{self.degree}"
        if self.kind == ModifierKind.ADD:
            return f"add{self.degree}"
        return f"{self.accidental.symbol}{self.degree}"


def canonical_order(modifiers: Iterable[Modifier]) -> list[Modifier]:
    """
    Order modifiers for application.

    Duplicates collapse. Shape modifiers come first, sorted by tag and
    then degree; omits, adds and tensions follow in that order.
    """
    unique = list(dict.fromkeys(modifiers))
    shapes = sorted((m for m in unique if m.is_shape), key=Modifier.sort_key)
    stages = [shapes]
    for kind in (ModifierKind.OMIT, ModifierKind.ADD, ModifierKind.TENSION):
        stages.append(sorted((m for m in unique if m.kind == kind), key=Modifier.sort_key))
    return [m for stage in stages for m in stage]
