"""
Chord notation - the text layer.

- ast: Score tree (comments and measures of nodes)
- parser: text to Score
- render: Score to text
- transpose: absolute <-> roman-numeral keys
"""

from chuk_mcp_chords.notation.ast import (
    ChordNode,
    Comment,
    Measure,
    Node,
    Repeat,
    Rest,
    Score,
    Sustain,
)
from chuk_mcp_chords.notation.parser import parse, parse_chord_symbol, parse_key
from chuk_mcp_chords.notation.render import render, render_chord, render_node
from chuk_mcp_chords.notation.transpose import as_degree, as_pitch

__all__ = [
    "ChordNode",
    "Comment",
    "Measure",
    "Node",
    "Repeat",
    "Rest",
    "Score",
    "Sustain",
    "as_degree",
    "as_pitch",
    "parse",
    "parse_chord_symbol",
    "parse_key",
    "render",
    "render_chord",
    "render_node",
]
