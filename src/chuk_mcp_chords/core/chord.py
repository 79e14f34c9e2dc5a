"""
Chord resolution - from a symbolic chord to sounding pitches.

A chord starts as the triad {1, 3, 5} and is reshaped by its modifiers,
applied in canonical order (see modifier.canonical_order). Each degree
is stored as a signed offset from its major-scale distance, so a minor
third is (3, -1) and a flat nine is (9, -1).

Voicing is a separate concern:
- find_voicing picks octave and inversion so an explicit bass sounds lowest
- nearest_octave keeps successive chords close in register
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Any

from chuk_mcp_chords.constants import DEFAULT_OCTAVE, MIDI_NOTE_OFFSET, OCTAVE_RANGE
from chuk_mcp_chords.errors import MissingTonic, UnknownModifier

from .modifier import Modifier, ModifierKind, canonical_order
from .scale import VALID_DEGREES, AbsoluteKey, Key, ScaleType, frame_values

logger = logging.getLogger(__name__)

# Root, third and fifth at their major-scale distances
TRIAD: tuple[tuple[int, int], ...] = ((1, 0), (3, 0), (5, 0))

# Degree sets selected by Major(n) / Minor(n)
SHAPES: dict[int, tuple[int, ...]] = {
    5: (1, 3, 5),
    6: (1, 3, 5, 6),
    7: (1, 3, 5, 7),
    9: (1, 3, 5, 7, 9),
}

# Fixed shifts from the major slot, per degree
_SHIFTS: dict[ModifierKind, dict[int, int]] = {
    ModifierKind.MINOR_MAJOR_7: {1: 0, 3: -1, 5: 0, 7: 0},
    ModifierKind.SUS2: {3: -1},
    ModifierKind.SUS4: {3: 1},
    ModifierKind.FLAT_5TH: {5: -1},
    ModifierKind.AUG: {5: 1},
    ModifierKind.AUG_7: {5: 1, 7: 1},
    ModifierKind.DIM: {3: -1, 5: -1},
    ModifierKind.DIM_7: {3: -1, 5: -1, 7: -2},
}


def major_slot(degree: int) -> int:
    """Semitones from the root to a degree on the major scale."""
    return ScaleType.MAJOR.degree_to_semitones(degree)


def scale_in_force(degrees: dict[int, int]) -> ScaleType:
    """
    The scale later modifiers resolve against.

    Minor when the chord currently sounds a minor third, major otherwise.
    """
    minor_third = ScaleType.MINOR.degree_to_semitones(3)
    for degree, offset in degrees.items():
        if major_slot(degree) + offset == minor_third:
            return ScaleType.MINOR
    return ScaleType.MAJOR


def _offset_in(scale: ScaleType, degree: int, alteration: int = 0) -> int:
    """Offset from the major slot that puts `degree` on `scale`."""
    return scale.degree_to_semitones(degree) + alteration - major_slot(degree)


def apply_modifier(degrees: dict[int, int], modifier: Modifier) -> None:
    """
    Apply one modifier to a degree map in place.

    Raises:
        UnknownModifier: when the modifier/degree pair has no mapping
    """
    kind = modifier.kind

    if kind in (ModifierKind.MAJOR, ModifierKind.MINOR):
        shape = SHAPES.get(modifier.degree or 0)
        if shape is None:
            raise UnknownModifier(modifier, modifier.degree)
        scale = ScaleType.MAJOR if kind == ModifierKind.MAJOR else ScaleType.MINOR
        degrees.clear()
        degrees.update({d: _offset_in(scale, d) for d in shape})
        return

    if kind in _SHIFTS:
        degrees.update(_SHIFTS[kind])
        return

    degree = modifier.degree
    if degree is None or degree not in VALID_DEGREES:
        raise UnknownModifier(modifier, degree)

    if kind == ModifierKind.OMIT:
        degrees.pop(degree, None)
    elif kind == ModifierKind.ADD:
        degrees[degree] = _offset_in(scale_in_force(degrees), degree)
    elif kind == ModifierKind.TENSION:
        degrees[degree] = _offset_in(scale_in_force(degrees), degree, modifier.accidental)
    else:
        raise UnknownModifier(modifier, degree)


@dataclass(frozen=True)
class Chord:
    """
    A resolved chord.

    root/bass are keys (absolute or relative), degrees is the sorted
    (degree, offset) map, octave and inversion describe the voicing.
    Built once per chord occurrence; voicing changes go through
    dataclasses.replace.
    """

    root: Key
    degrees: tuple[tuple[int, int], ...] = TRIAD
    octave: int = DEFAULT_OCTAVE
    inversion: int = 0
    bass: Key | None = None

    def __post_init__(self) -> None:
        if self.octave < 0:
            raise ValueError(f"Octave must be >= 0, got {self.octave}")

    @property
    def degree_map(self) -> dict[int, int]:
        return dict(self.degrees)

    @property
    def scale(self) -> ScaleType:
        return scale_in_force(self.degree_map)

    def intervals(self) -> list[int]:
        """Semitones above the root, ascending."""
        return sorted({major_slot(d) + offset for d, offset in self.degrees})

    def semitones(self) -> list[int]:
        """Semitones above the key frame (C for absolute keys), ascending."""
        return [self.root.value + i for i in self.intervals()]

    def voiced(self) -> list[int]:
        """
        Voiced semitones in the key frame, octave and inversion applied.

        The lowest `inversion` notes move up an octave. A bass that is
        not already the lowest note is added below.
        """
        base = [self.octave * 12 + s for s in self.semitones()]
        if not base:
            return []
        inversion = self.inversion % len(base)
        notes = sorted(base[inversion:] + [n + 12 for n in base[:inversion]])
        if self.bass is not None:
            _, bass_value = frame_values(self.root, self.bass)
            drop = (notes[0] - bass_value) % 12
            if drop:
                notes.insert(0, notes[0] - drop)
        return notes

    def pitches(self) -> list[int]:
        """Absolute semitones (MIDI note minus 12)."""
        if not isinstance(self.root, AbsoluteKey):
            raise MissingTonic(self.root)
        return self.voiced()

    def midi_notes(self) -> list[int]:
        """MIDI note numbers. Octave 4 C = 60."""
        return [MIDI_NOTE_OFFSET + p for p in self.pitches()]

    def distance(self, other: Chord) -> int:
        """
        Register distance to another chord.

        Root distance plus the summed distance of paired voiced notes
        (lowest with lowest, and so on, up to the shorter chord).
        """
        a, b = frame_values(self.root, other.root)
        root_distance = abs((self.octave * 12 + a) - (other.octave * 12 + b))
        paired = sum(abs(x - y) for x, y in zip(self.voiced(), other.voiced()))
        return root_distance + paired

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        d: dict[str, Any] = {
            "root": str(self.root),
            "octave": self.octave,
            "inversion": self.inversion,
            "degrees": {str(degree): offset for degree, offset in self.degrees},
            "semitones": self.semitones(),
        }
        if self.bass is not None:
            d["bass"] = str(self.bass)
        if isinstance(self.root, AbsoluteKey):
            d["midi_notes"] = self.midi_notes()
        return d

    def __str__(self) -> str:
        degrees = ",".join(f"{d}({offset:+d})" for d, offset in self.degrees)
        bass = f"/{self.bass}" if self.bass is not None else ""
        return f"{self.root}{bass}@{self.octave} {degrees}"


def find_voicing(chord: Chord, bass: Key, reference_octave: int) -> tuple[int, int]:
    """
    Octave and inversion that put the chord tone nearest `bass` lowest.

    Searches octaves 0-7 by every inversion; the first pair found with
    the smallest distance to the bass (placed at `reference_octave`) wins.
    """
    _, bass_value = frame_values(chord.root, bass)
    target = reference_octave * 12 + bass_value
    best: tuple[int, int, int] | None = None
    for octave in OCTAVE_RANGE:
        for inversion, semitone in enumerate(chord.semitones()):
            d = abs(octave * 12 + semitone - target)
            if best is None or d < best[0]:
                best = (d, octave, inversion)
    if best is None:
        return reference_octave, 0
    return best[1], best[2]


def nearest_octave(chord: Chord, previous: Chord) -> int:
    """
    Octave for `chord` closest in register to `previous`.

    Tries the same octave, one down and one up. Ties go to the smaller
    move, then to the lower octave.
    """
    o = previous.octave
    candidates = [c for c in (o, o - 1, o + 1) if c >= 0]
    return min(candidates, key=lambda c: replace(chord, octave=c).distance(previous))


def resolve(
    root: Key,
    modifiers: Iterable[Modifier] = (),
    tensions: Iterable[Modifier] = (),
    bass: Key | None = None,
    octave: int = DEFAULT_OCTAVE,
) -> Chord:
    """
    Resolve a chord symbol to a Chord.

    Args:
        root: Chord root
        modifiers: Modifiers as written after the root
        tensions: Parenthesized tensions
        bass: Optional on-chord bass
        octave: Octave to build in (and to place the bass in)

    Returns:
        The resolved Chord

    Raises:
        UnknownModifier: for a modifier/degree pair with no mapping
        KeyTypeMismatch: when root and bass are in different frames
    """
    degrees = dict(TRIAD)
    for modifier in canonical_order([*modifiers, *tensions]):
        apply_modifier(degrees, modifier)

    chord = Chord(root=root, degrees=tuple(sorted(degrees.items())), octave=octave, bass=bass)
    if bass is not None:
        voicing_octave, inversion = find_voicing(chord, bass, octave)
        chord = replace(chord, octave=voicing_octave, inversion=inversion)
        logger.debug(f"voiced {chord} over {bass}: inversion {inversion}")
    return chord
