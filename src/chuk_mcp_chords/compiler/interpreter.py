"""
Rhythm interpreter - Score to a timed list of Notes.

Walks the score one node at a time. Each measure is divided evenly
between its nodes (16 subunits per measure), and the interpreter keeps
at most one pending event:

    Holding(chord, units)  a chord (or a held rest) waiting to be emitted
    Resting(units)         silence waiting to be emitted

A node that does not extend the pending event flushes it first, so
notes come out in order with their final lengths.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any

from chuk_mcp_chords.constants import DEFAULT_OCTAVE, MEASURE_LENGTH, VALID_MEASURE_SIZES
from chuk_mcp_chords.core.chord import Chord, nearest_octave, resolve
from chuk_mcp_chords.core.pitch import PitchClass
from chuk_mcp_chords.core.scale import RelativeKey
from chuk_mcp_chords.errors import InvalidMeasureLength, MissingTonic
from chuk_mcp_chords.notation.ast import ChordNode, Measure, Node, Repeat, Rest, Score, Sustain
from chuk_mcp_chords.notation.parser import parse_chord_symbol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Note:
    """
    One interpreter event.

    chord is None for a rest. duration is in subunits (16 per measure).
    """

    chord: Chord | None
    duration: int

    @property
    def is_rest(self) -> bool:
        return self.chord is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "chord": self.chord.to_dict() if self.chord is not None else None,
            "duration": self.duration,
        }

    def __str__(self) -> str:
        return f"{self.chord if self.chord is not None else 'rest'} x{self.duration}"


def measure_unit(node_count: int) -> int:
    """Subunits per node for a measure of `node_count` nodes."""
    if node_count not in VALID_MEASURE_SIZES:
        raise InvalidMeasureLength(node_count)
    return MEASURE_LENGTH // node_count


def resolve_node(
    node: ChordNode,
    tonic: PitchClass | None = None,
    previous: Chord | None = None,
    octave: int = DEFAULT_OCTAVE,
) -> Chord:
    """
    Resolve one chord node to a sounding chord.

    Roman-numeral keys are placed against `tonic`. Without an explicit
    bass the chord moves to the octave nearest `previous`; with one,
    the bass is voiced in `previous`'s octave (or `octave`).

    Raises:
        MissingTonic: for a roman-numeral key with no tonic
        UnknownModifier: for a modifier with no chord shape
    """
    key, bass = node.key, node.bass
    if tonic is None:
        if isinstance(key, RelativeKey):
            raise MissingTonic(key)
        if isinstance(bass, RelativeKey):
            raise MissingTonic(bass)
    else:
        key = key.as_pitch(tonic)
        bass = bass.as_pitch(tonic) if bass is not None else None

    reference = previous.octave if previous is not None else octave
    chord = resolve(key, node.modifiers, node.tensions, bass=bass, octave=reference)
    if bass is None and previous is not None:
        chord = replace(chord, octave=nearest_octave(chord, previous))
    return chord


def resolve_symbol(
    text: str, tonic: PitchClass | None = None, octave: int = DEFAULT_OCTAVE
) -> Chord:
    """Resolve a single chord symbol such as 'Am7' or 'V7/II'."""
    return resolve_node(parse_chord_symbol(text), tonic=tonic, octave=octave)


class Interpreter:
    """
    Single-pass rhythm state machine.

    Use interpret() for the common case; the class is exposed so callers
    can feed measures incrementally and inspect the pending state.
    """

    def __init__(self, tonic: PitchClass | None = None, octave: int = DEFAULT_OCTAVE) -> None:
        self.tonic = tonic
        self.octave = octave
        self.notes: list[Note] = []
        self.previous: Chord | None = None
        self.holding = 0
        self.resting = 0

    def inspect(self) -> str:
        previous = str(self.previous) if self.previous is not None else "None"
        return (
            f"pre={previous} sus={self.holding}/{MEASURE_LENGTH}, "
            f"rest={self.resting}/{MEASURE_LENGTH}"
        )

    def _emit(self, chord: Chord | None, duration: int) -> None:
        note = Note(chord, duration)
        logger.debug(f"emit {note}")
        self.notes.append(note)

    def feed_node(self, node: Node, unit: int) -> None:
        logger.debug(f"{node} | {self.inspect()}")
        if not isinstance(node, Sustain) and self.holding:
            self._emit(self.previous, self.holding)
            self.holding = 0
        if not isinstance(node, Rest) and self.resting:
            self._emit(None, self.resting)
            self.resting = 0

        if isinstance(node, ChordNode):
            self.previous = resolve_node(node, self.tonic, self.previous, self.octave)
            self.holding = unit
        elif isinstance(node, Repeat):
            self.holding = unit
        elif isinstance(node, Sustain):
            self.holding += unit
        elif isinstance(node, Rest):
            self.resting += unit

    def feed_measure(self, measure: Measure) -> None:
        unit = measure_unit(len(measure.nodes))
        for node in measure.nodes:
            self.feed_node(node, unit)
        logger.debug(f"measure end | {self.inspect()}")

    def finish(self) -> list[Note]:
        """Flush the held chord and return every note so far."""
        if self.holding:
            self._emit(self.previous, self.holding)
            self.holding = 0
        return self.notes


def interpret(
    score: Score, tonic: PitchClass | None = None, octave: int = DEFAULT_OCTAVE
) -> list[Note]:
    """
    Interpret a Score into Notes.

    Args:
        score: Parsed score
        tonic: Tonic for roman-numeral keys
        octave: Octave of the first chord

    Returns:
        Notes in playing order; the whole score must interpret or nothing does

    Raises:
        InvalidMeasureLength: for a measure not of 1, 2, 4, 8 or 16 nodes
        MissingTonic: for a roman-numeral key with no tonic
    """
    interpreter = Interpreter(tonic, octave)
    for measure in score.measures():
        interpreter.feed_measure(measure)
    notes = interpreter.finish()
    logger.debug(f"interpreted {len(notes)} notes")
    return notes
