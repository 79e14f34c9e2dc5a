"""
Tests for rendering scores back to notation.
"""

import pytest

from chuk_mcp_chords.core import AbsoluteKey, Modifier, ModifierKind, PitchClass
from chuk_mcp_chords.notation import ChordNode, as_pitch, parse, render, render_chord
from chuk_mcp_chords.notation.render import render_modifier

SCORES = [
    "C | Am F G\n",
    "# intro\nC = _ % | N.C. G7/B\n",
    "Cm7b5 Cdim7 Caug7 CmM7\nC7(b9,#11) Cadd9 Comit3 Csus4",
    "Cmmaj7 Cdimmaj9 Caugmaj9 CM7",
    "C7#9 Eb9 Cb5 C-5",
    "I | bVIIm7/IV #IVo V7(b13)\n\n\n",
    "CCC|DDD\r\nEEE",
]


class TestRender:
    """Tests for render()."""

    def test_measures_and_breaks(self) -> None:
        """Measures end with ' | ', hard breaks add a newline."""
        assert render(parse("C | Am F G\n")) == "C | Am F G | \n"

    def test_comment(self) -> None:
        """Comments render as '# text'."""
        assert render(parse("#   hello\nC")) == "# hello\nC | "

    def test_rest_spelling(self) -> None:
        """Rests render as N.C."""
        assert render(parse("C _ = %")) == "C N.C. = % | "

    def test_full_symbol(self) -> None:
        """Tensions and bass follow the modifiers."""
        assert render_chord(parse_one("Am7(b9,#11)/G")) == "Am7(b9,#11)/G"

    def test_inline_tension_moves_to_group(self) -> None:
        """Inline tensions render in parentheses."""
        assert render_chord(parse_one("C7#9")) == "C7(#9)"

    def test_flat_five_spelling(self) -> None:
        """Flat5th renders as -5 so it cannot merge into the root."""
        node = ChordNode(AbsoluteKey(PitchClass.E), [Modifier(ModifierKind.FLAT_5TH)])
        assert render_chord(node) == "E-5"

    def test_major_after_minor(self) -> None:
        """Major(7) after a plain minor is spelled maj7."""
        assert render_modifier(Modifier.major(7), Modifier.minor(5)) == "maj7"
        assert render_modifier(Modifier.major(7), Modifier.minor(7)) == "7"
        assert render_modifier(Modifier.major(7)) == "7"

    def test_transposed_inline_tension(self) -> None:
        """A degree chord with an inline flat tension re-parses after transposition."""
        score = as_pitch(parse("Ib9"), PitchClass.E)
        assert render(score) == "E(b9) | "


class TestIdempotence:
    """render(parse(render(score))) == render(score)."""

    @pytest.mark.parametrize("text", SCORES)
    def test_round_trip(self, text: str) -> None:
        """Re-rendering a rendered score is stable."""
        once = render(parse(text))
        assert render(parse(once)) == once

    @pytest.mark.parametrize("text", SCORES)
    def test_reparse_same_tree(self, text: str) -> None:
        """Canonical text re-parses to the same tree."""
        once = parse(render(parse(text)))
        assert parse(render(once)) == once


def parse_one(text: str) -> ChordNode:
    return next(parse(text).chord_nodes())
