#!/usr/bin/env python3
"""
Example: Converting chord notation.

Parses a progression, rewrites it as roman numerals, places it in a
new key, and renders it in both dialects.

Usage:
    python examples/convert_progression.py
"""

from chuk_mcp_chords.core import PitchClass
from chuk_mcp_chords.formats import SexpFormat
from chuk_mcp_chords.notation import as_degree, as_pitch, parse, render

PROGRESSION = """\
# verse
C | Am7 = F G7/B
Dm7 G7 | C N.C. |
"""


def main() -> None:
    """Show the same progression in several spellings."""
    print("CHUK Chords Conversion Demo")
    print("=" * 50)
    print()

    score = parse(PROGRESSION)
    print("1. Parsed:")
    print(render(score))

    print("2. As roman numerals (tonic C):")
    as_degree(score, PitchClass.C)
    print(render(score))

    print("3. Back to pitches in Eb:")
    as_pitch(score, PitchClass.Ds)
    print(render(score))

    print("4. As s-expressions:")
    print(SexpFormat().render(score))


if __name__ == "__main__":
    main()
