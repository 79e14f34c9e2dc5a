"""
Export tools - MCP tools for resolving chords and writing MIDI.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from chuk_mcp_chords.compiler import interpret, resolve_symbol
from chuk_mcp_chords.compiler.pipeline import ChordCompiler
from chuk_mcp_chords.core.pitch import PitchClass
from chuk_mcp_chords.formats import get_format
from chuk_mcp_chords.models.settings import ExportSettings

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_export_tools(mcp: ChukMCPServer, output_dir: Path) -> dict[str, Any]:
    """
    Register resolution/export tools with the MCP server.

    Args:
        mcp: The MCP server instance
        output_dir: Directory for MIDI files

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def chord_resolve(symbol: str, tonic: str | None = None, octave: int = 4) -> str:
        """
        Resolve one chord symbol to its notes.

        Args:
            symbol: Chord symbol, e.g. "Am7", "G7/B", "V7"
            tonic: Tonic for roman-numeral symbols
            octave: Octave to build the chord in

        Returns:
            JSON string with degrees, semitones and MIDI notes

        Example:
            chord_resolve(symbol="Cm7b5")
        """
        try:
            pitch = PitchClass.parse(tonic) if tonic else None
            chord = resolve_symbol(symbol, tonic=pitch, octave=octave)
            return json.dumps({"status": "success", "symbol": symbol, "chord": chord.to_dict()})
        except Exception as e:
            logger.exception("Failed to resolve chord")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chord_resolve"] = chord_resolve

    @mcp.tool  # type: ignore[arg-type]
    async def chord_interpret(text: str, tonic: str | None = None, dialect: str = "rechord") -> str:
        """
        Interpret a chord score into timed notes.

        Durations are in sixteenths (16 per measure); a null chord is a rest.

        Args:
            text: Chord notation
            tonic: Tonic for roman-numeral keys
            dialect: Input dialect ('rechord' or 'sexp')

        Returns:
            JSON string with the note list

        Example:
            chord_interpret(text="C | Am F G _")
        """
        try:
            pitch = PitchClass.parse(tonic) if tonic else None
            notes = interpret(get_format(dialect).parse(text), tonic=pitch)
            return json.dumps(
                {
                    "status": "success",
                    "notes": [note.to_dict() for note in notes],
                    "total_duration": sum(note.duration for note in notes),
                }
            )
        except Exception as e:
            logger.exception("Failed to interpret score")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chord_interpret"] = chord_interpret

    @mcp.tool  # type: ignore[arg-type]
    async def chord_export_midi(
        text: str,
        output_name: str,
        bpm: int = 180,
        tonic: str | None = None,
        dialect: str = "rechord",
    ) -> str:
        """
        Compile a chord score to a MIDI file.

        Args:
            text: Chord notation
            output_name: Output filename (without .mid extension)
            bpm: Tempo in BPM
            tonic: Tonic for roman-numeral keys
            dialect: Input dialect ('rechord' or 'sexp')

        Returns:
            JSON string with the file path and a compilation summary

        Example:
            chord_export_midi(text="I | VIm IV V", output_name="pop", tonic="G")
        """
        try:
            settings = ExportSettings(bpm=bpm, tonic=tonic)
            result = ChordCompiler(settings, get_format(dialect)).compile(text, name=output_name)

            output_path = output_dir / f"{output_name}.mid"
            output_dir.mkdir(parents=True, exist_ok=True)
            result.midi_file.save(str(output_path))

            return json.dumps(
                {
                    "status": "success",
                    "path": str(output_path),
                    "compilation": {
                        "total_measures": result.total_measures,
                        "total_chords": result.total_chords,
                        "total_notes": len(result.score_ir.notes),
                    },
                    "message": f"Compiled {result.total_measures} measures, "
                    f"{result.total_chords} chords",
                }
            )
        except Exception as e:
            logger.exception("Failed to export MIDI")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chord_export_midi"] = chord_export_midi

    @mcp.tool  # type: ignore[arg-type]
    async def chord_compile_ir(
        text: str,
        bpm: int = 180,
        tonic: str | None = None,
        dialect: str = "rechord",
    ) -> str:
        """
        Compile a chord score to its Score IR without writing a file.

        Args:
            text: Chord notation
            bpm: Tempo in BPM
            tonic: Tonic for roman-numeral keys
            dialect: Input dialect ('rechord' or 'sexp')

        Returns:
            JSON string with the IR summary and the full IR

        Example:
            chord_compile_ir(text="C = Am =")
        """
        try:
            settings = ExportSettings(bpm=bpm, tonic=tonic)
            result = ChordCompiler(settings, get_format(dialect)).compile(text)
            return json.dumps(
                {
                    "status": "success",
                    "summary": result.score_ir.summary(),
                    "ir": result.score_ir.to_dict(),
                }
            )
        except Exception as e:
            logger.exception("Failed to compile IR")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chord_compile_ir"] = chord_compile_ir

    return tools
