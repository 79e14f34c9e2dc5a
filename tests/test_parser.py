"""
Tests for the notation parser.
"""

import pytest

from chuk_mcp_chords.core import AbsoluteKey, Modifier, ModifierKind, PitchClass, RelativeKey
from chuk_mcp_chords.core.pitch import Accidental
from chuk_mcp_chords.errors import ParseError
from chuk_mcp_chords.notation import (
    ChordNode,
    Comment,
    Measure,
    Repeat,
    Rest,
    Sustain,
    parse,
    parse_chord_symbol,
    parse_key,
)


def chord(pitch: PitchClass, *modifiers: Modifier) -> ChordNode:
    return ChordNode(AbsoluteKey(pitch), list(modifiers))


class TestScoreStructure:
    """Tests for measures, comments and separators."""

    @pytest.mark.parametrize("text", ["# comment\nCCC", "CCC|", "CCC\n"])
    def test_adjacent_chords(self, text: str) -> None:
        """Chords need no separating spaces."""
        measures = parse(text).measures()
        assert len(measures) == 1
        assert measures[0].nodes == [chord(PitchClass.C)] * 3

    def test_measure_separators(self) -> None:
        """'|' and line breaks both end a measure."""
        score = parse("C | Am F G\nDm G")
        assert [len(m.nodes) for m in score.measures()] == [1, 3, 2]

    def test_hard_break_flag(self) -> None:
        """Measures ending a line are hard breaks."""
        score = parse("C | Am F G\nDm |  \nG | ")
        assert [m.hard_break for m in score.measures()] == [False, True, True, False]

    def test_comment(self) -> None:
        """Comments run to end of line and are stripped."""
        score = parse("#  intro  \nC")
        assert score.items[0] == Comment("intro")
        assert isinstance(score.items[1], Measure)

    def test_crlf_normalized(self) -> None:
        """CRLF line endings parse like LF."""
        assert parse("C | D\r\nE\r\n") == parse("C | D\nE\n")

    def test_blank_lines_skipped(self) -> None:
        """Blank lines between measures are ignored."""
        assert len(parse("C\n\n\nD\n").measures()) == 2

    def test_empty_text(self) -> None:
        """Empty input is an empty score."""
        assert parse("").items == []

    def test_rhythm_nodes(self) -> None:
        """'=', '_', '%' and 'N.C.' are rhythm markers."""
        nodes = parse("C = _ % N.C.").measures()[0].nodes
        assert nodes[1:] == [Sustain(), Rest(), Repeat(), Rest()]


class TestChordSymbols:
    """Tests for single chord symbols."""

    def test_full_symbol(self) -> None:
        """Key, modifiers, tensions and bass."""
        node = parse_chord_symbol("Am7(b9,#11)/G")
        assert node.key == AbsoluteKey(PitchClass.A)
        assert node.modifiers == [Modifier.minor(7)]
        assert node.tensions == [
            Modifier.tension(9, Accidental.FLAT),
            Modifier.tension(11, Accidental.SHARP),
        ]
        assert node.bass == AbsoluteKey(PitchClass.G)

    @pytest.mark.parametrize(
        ("text", "kinds"),
        [
            ("C-5", [ModifierKind.FLAT_5TH]),
            ("Cb5", [ModifierKind.MAJOR]),
            ("Cm7b5", [ModifierKind.MINOR, ModifierKind.FLAT_5TH]),
            ("Csus2", [ModifierKind.SUS2]),
            ("Csus4", [ModifierKind.SUS4]),
            ("Cdim7", [ModifierKind.DIM_7]),
            ("Cdim", [ModifierKind.DIM]),
            ("Co", [ModifierKind.DIM]),
            ("Caug7", [ModifierKind.AUG_7]),
            ("Caug", [ModifierKind.AUG]),
            ("C+", [ModifierKind.AUG]),
            ("Cadd9", [ModifierKind.ADD]),
            ("Comit3", [ModifierKind.OMIT]),
            ("Cno3", [ModifierKind.OMIT]),
            ("CmM7", [ModifierKind.MINOR_MAJOR_7]),
            ("Cmaj7", [ModifierKind.MAJOR]),
            ("CM", [ModifierKind.MAJOR]),
            ("C7", [ModifierKind.MAJOR]),
            ("C7#9", [ModifierKind.MAJOR, ModifierKind.TENSION]),
        ],
    )
    def test_modifier_kinds(self, text: str, kinds: list[ModifierKind]) -> None:
        """Modifier spellings map to their kinds."""
        assert [m.kind for m in parse_chord_symbol(text).modifiers] == kinds

    def test_longest_literal_wins(self) -> None:
        """dim7 is not dim followed by 7."""
        assert parse_chord_symbol("Cdim7").modifiers == [Modifier(ModifierKind.DIM_7)]

    def test_major_default_degree(self) -> None:
        """'maj' alone is Major(5); 'm' alone is Minor(5)."""
        assert parse_chord_symbol("Cmaj").modifiers == [Modifier.major(5)]
        assert parse_chord_symbol("Cm").modifiers == [Modifier.minor(5)]

    def test_eleven_before_one(self) -> None:
        """Two-digit degrees are matched whole."""
        assert parse_chord_symbol("C11").modifiers == [Modifier.major(11)]

    def test_flat_pitch_is_greedy(self) -> None:
        """'Eb9' is an E-flat chord."""
        node = parse_chord_symbol("Eb9")
        assert node.key == AbsoluteKey(PitchClass.Ds)
        assert node.modifiers == [Modifier.major(9)]


class TestKeys:
    """Tests for pitch and roman-numeral keys."""

    @pytest.mark.parametrize(
        ("text", "semitones"),
        [("I", 0), ("II", 2), ("III", 4), ("IV", 5), ("V", 7), ("VI", 9), ("VII", 11)],
    )
    def test_roman_numerals(self, text: str, semitones: int) -> None:
        """Roman numerals map to major-scale distances."""
        assert parse_key(text) == RelativeKey(semitones)

    def test_accidental_degrees(self) -> None:
        """Degrees take a leading accidental."""
        assert parse_key("bVII") == RelativeKey(10)
        assert parse_key("#IV") == RelativeKey(6)
        assert parse_key("bII") == RelativeKey(1)

    def test_enharmonic_pitches(self) -> None:
        """Pitch names fold enharmonics."""
        assert parse_key("Cb") == AbsoluteKey(PitchClass.B)
        assert parse_key("E#") == AbsoluteKey(PitchClass.F)

    def test_degree_chord(self) -> None:
        """Roman numerals take modifiers like pitches do."""
        node = parse_chord_symbol("bVIIm7/I")
        assert node.key == RelativeKey(10)
        assert node.modifiers == [Modifier.minor(7)]
        assert node.bass == RelativeKey(0)

    def test_sharp_degree_after_a_chord(self) -> None:
        """'#IV' after another node is a degree, not a comment."""
        nodes = parse("I #IV").measures()[0].nodes
        assert nodes[1] == ChordNode(RelativeKey(6))


class TestParseErrors:
    """Tests for ParseError positions."""

    def test_unknown_letter(self) -> None:
        """An unknown chord letter fails at its offset."""
        with pytest.raises(ParseError) as exc:
            parse("C | H")
        assert exc.value.position == 4
        assert (exc.value.line, exc.value.column) == (1, 5)

    def test_second_line_position(self) -> None:
        """Line and column are 1-based."""
        with pytest.raises(ParseError) as exc:
            parse("C D\nE x")
        assert (exc.value.line, exc.value.column) == (2, 3)

    def test_unclosed_tensions(self) -> None:
        """Tension lists must close."""
        with pytest.raises(ParseError, match="expected ',' or '\\)'"):
            parse("C7(b9")

    def test_empty_tension(self) -> None:
        """A tension needs a degree."""
        with pytest.raises(ParseError, match="tension degree"):
            parse("C()")

    def test_missing_bass(self) -> None:
        """'/' needs a key."""
        with pytest.raises(ParseError, match="bass"):
            parse("C/")

    def test_empty_measure(self) -> None:
        """'||' leaves an empty measure."""
        with pytest.raises(ParseError):
            parse("C || D")

    def test_dangling_add(self) -> None:
        """'add' needs a degree number."""
        with pytest.raises(ParseError):
            parse("Cadd")

    def test_trailing_text_in_symbol(self) -> None:
        """parse_chord_symbol must consume everything."""
        with pytest.raises(ParseError):
            parse_chord_symbol("C7 x")
