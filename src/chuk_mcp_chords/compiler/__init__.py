"""
Compilation pipeline - interpreted chord scores to MIDI.

The pipeline:
    Score → Notes (rhythm interpreter)
    → Score IR (inspectable, diffable)
    → MIDI File (mido)
"""

from chuk_mcp_chords.compiler.interpreter import (
    Interpreter,
    Note,
    interpret,
    measure_unit,
    resolve_node,
    resolve_symbol,
)
from chuk_mcp_chords.compiler.midi import (
    MidiSink,
    MidoTrackSink,
    midi_events,
    notes_to_midi,
    write_notes,
)
from chuk_mcp_chords.compiler.score_ir import ScoreIR, build_score_ir, score_ir_to_midi


def __getattr__(name: str):
    """Lazy imports for the pipeline to avoid circular dependencies."""
    if name in ("ChordCompiler", "CompileResult", "compile_text"):
        from chuk_mcp_chords.compiler.pipeline import ChordCompiler, CompileResult, compile_text

        return {
            "ChordCompiler": ChordCompiler,
            "CompileResult": CompileResult,
            "compile_text": compile_text,
        }[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Pipeline (lazy loaded)
    "ChordCompiler",
    "CompileResult",
    "compile_text",
    # Interpreter
    "Interpreter",
    "Note",
    "interpret",
    "measure_unit",
    "resolve_node",
    "resolve_symbol",
    # MIDI
    "MidiSink",
    "MidoTrackSink",
    "midi_events",
    "notes_to_midi",
    "write_notes",
    # IR
    "ScoreIR",
    "build_score_ir",
    "score_ir_to_midi",
]
