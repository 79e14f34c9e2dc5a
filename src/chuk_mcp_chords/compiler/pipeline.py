"""
Chord compiler - source text to MIDI in one call.

    text → Score → (optional transposition) → Notes → Score IR + MIDI File

Every stage must succeed; a failure anywhere raises and nothing is
returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from mido import MidiFile

from chuk_mcp_chords.compiler.interpreter import Note, interpret
from chuk_mcp_chords.compiler.midi import notes_to_midi
from chuk_mcp_chords.compiler.score_ir import ScoreIR, build_score_ir
from chuk_mcp_chords.formats import ChordFormat, RechordFormat
from chuk_mcp_chords.models.settings import ExportSettings
from chuk_mcp_chords.notation.ast import Score

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    """Result of compiling a chord score."""

    score: Score
    notes: list[Note]
    midi_file: MidiFile
    score_ir: ScoreIR

    @property
    def total_measures(self) -> int:
        return self.score_ir.total_measures

    @property
    def total_chords(self) -> int:
        return sum(1 for note in self.notes if note.chord is not None)


class ChordCompiler:
    """
    Compiles chord notation to MIDI.

    Holds the export settings and the input dialect, so one compiler
    can be reused across documents.
    """

    def __init__(self, settings: ExportSettings | None = None, dialect: ChordFormat | None = None):
        self.settings = settings or ExportSettings()
        self.dialect = dialect or RechordFormat()

    def compile_score(self, score: Score, name: str = "") -> CompileResult:
        notes = interpret(score, tonic=self.settings.get_tonic(), octave=self.settings.octave)
        midi_file = notes_to_midi(notes, self.settings)
        score_ir = build_score_ir(notes, self.settings, name=name)
        logger.info(
            f"Compiled {score_ir.total_measures} measures, {len(score_ir.notes)} notes"
        )
        return CompileResult(score=score, notes=notes, midi_file=midi_file, score_ir=score_ir)

    def compile(self, text: str, name: str = "") -> CompileResult:
        """
        Compile source text.

        Raises:
            ChordMidiError: for any parse, resolution or rhythm error
        """
        return self.compile_score(self.dialect.parse(text), name=name)


def compile_text(
    text: str, settings: ExportSettings | None = None, name: str = ""
) -> CompileResult:
    """Compile primary-notation text with the given settings."""
    return ChordCompiler(settings).compile(text, name=name)
