#!/usr/bin/env python3
"""
Example: Exporting a progression to MIDI.

Compiles a roman-numeral progression in two keys, prints the Score IR
summary and what changed between them, and saves both MIDI files.

Usage:
    python examples/export_midi.py
"""

from pathlib import Path

from chuk_mcp_chords.compiler import compile_text
from chuk_mcp_chords.models import ExportSettings

PROGRESSION = "I | VIm IV V7 = | IIm7 V7 | I"


def main() -> None:
    """Compile, inspect and save."""
    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    print("CHUK Chords MIDI Export Demo")
    print("=" * 50)
    print()

    results = {}
    for tonic in ("C", "G"):
        settings = ExportSettings(tonic=tonic, bpm=120)
        result = compile_text(PROGRESSION, settings, name=f"progression_{tonic}")
        results[tonic] = result

        path = output_dir / f"progression_{tonic}.mid"
        result.midi_file.save(str(path))

        summary = result.score_ir.summary()
        print(f"Key of {tonic}:")
        print(f"   Measures: {summary['total_measures']}")
        print(f"   Chords: {summary['chords']}")
        print(f"   Notes: {summary['total_notes']}")
        print(f"   Pitch range: {summary['pitch_range']}")
        print(f"   Saved: {path}")
        print()

    diff = results["C"].score_ir.diff_summary(results["G"].score_ir)
    print("C → G:")
    for field, value in diff.items():
        print(f"   {field}: {value}")


if __name__ == "__main__":
    main()
