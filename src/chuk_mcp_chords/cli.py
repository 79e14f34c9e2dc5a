#!/usr/bin/env python3
"""
Command-line interface for chord notation.

    chord-midi convert song.txt --as-degree C
    chord-midi convert song.sexp --output song.txt
    chord-midi midi song.txt --output song.mid --bpm 120 --key G

The input dialect follows the file extension (.sexp is the
s-expression dialect, anything else the primary notation). Any parse,
resolution or settings error is printed to stderr with exit status 1.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from chuk_mcp_chords.compiler.pipeline import ChordCompiler
from chuk_mcp_chords.constants import ConvertTarget
from chuk_mcp_chords.errors import ChordMidiError
from chuk_mcp_chords.formats import format_for_path, get_format
from chuk_mcp_chords.models.settings import load_settings
from chuk_mcp_chords.tools.convert import convert_score

logger = logging.getLogger(__name__)


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def cmd_convert(args: argparse.Namespace) -> int:
    source = Path(args.input)
    score = format_for_path(source).parse(_read(source))

    target, tonic = None, None
    if args.as_pitch:
        target, tonic = ConvertTarget.PITCH, args.as_pitch
    elif args.as_degree:
        target, tonic = ConvertTarget.DEGREE, args.as_degree
    convert_score(score, target, tonic)

    if args.to:
        output_format = get_format(args.to)
    elif args.output:
        output_format = format_for_path(args.output)
    else:
        output_format = get_format("rechord")
    text = output_format.render(score)

    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"Exported to {args.output}")
    else:
        sys.stdout.write(text)
    return 0


def cmd_midi(args: argparse.Namespace) -> int:
    source = Path(args.input)
    settings = load_settings(args.config, bpm=args.bpm, tonic=args.key, velocity=args.velocity)
    output = Path(args.output) if args.output else source.with_suffix(".mid")

    result = ChordCompiler(settings, format_for_path(source)).compile(
        _read(source), name=source.stem
    )
    result.midi_file.save(str(output))
    logger.info(f"{result.total_measures} measures, {result.total_chords} chords")
    print(f"Exported to {output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chord-midi", description="Convert chord notation and export it to MIDI"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    convert = sub.add_parser("convert", help="Re-render notation, optionally transposed")
    convert.add_argument("input", help="Input file (.sexp for the s-expression dialect)")
    convert.add_argument("-o", "--output", help="Output file (default: stdout)")
    convert.add_argument("--to", choices=["rechord", "sexp"], help="Output dialect")
    target = convert.add_mutually_exclusive_group()
    target.add_argument("--as-pitch", metavar="KEY", help="Resolve roman numerals against KEY")
    target.add_argument("--as-degree", metavar="KEY", help="Rewrite pitches relative to KEY")
    convert.set_defaults(func=cmd_convert)

    midi = sub.add_parser("midi", help="Export a MIDI file")
    midi.add_argument("input", help="Input file (.sexp for the s-expression dialect)")
    midi.add_argument("-o", "--output", help="Output .mid file (default: input with .mid)")
    midi.add_argument("--bpm", type=int, help="Tempo in BPM (default: 180)")
    midi.add_argument("--key", help="Tonic for roman-numeral keys")
    midi.add_argument("--velocity", type=int, help="Note velocity (0-127)")
    midi.add_argument("--config", help="YAML settings file")
    midi.set_defaults(func=cmd_midi)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    try:
        return int(args.func(args))
    except (ChordMidiError, ValidationError, ValueError, OSError) as e:
        logger.debug("command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
