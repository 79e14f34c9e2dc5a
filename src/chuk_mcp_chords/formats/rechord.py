"""
Rechord format - the primary line-oriented notation.
"""

from __future__ import annotations

from chuk_mcp_chords.notation.ast import Score
from chuk_mcp_chords.notation.parser import parse
from chuk_mcp_chords.notation.render import render

from .base import ChordFormat


class RechordFormat(ChordFormat):
    name = "rechord"
    extensions = (".rechord", ".txt", ".chords")

    def parse(self, text: str) -> Score:
        return parse(text)

    def render(self, score: Score) -> str:
        return render(score)
