"""
Chord notation parser - source text to Score.

A hand-rolled recursive-descent matcher over constant token tables.
The grammar is line oriented:

    Score       := (Comment | Measure)*
    Comment     := "#" text EOL
    Measure     := Node+ ("|" | EOL | end-of-input)
    Node        := "=" | "_" | "%" | "N.C." | ChordSymbol
    ChordSymbol := Key Modifier* Tensions? ("/" Key)?

Nodes may be written without separating spaces ("CCC|" is three chords).
A measure that ends at a line break, or at "|" followed only by spaces
up to a line break, is recorded as a hard break.

Every byte must be consumed; anything else raises ParseError with the
offset of the first unmatched character.
"""

from __future__ import annotations

import logging

from chuk_mcp_chords.core.modifier import Modifier, ModifierKind
from chuk_mcp_chords.core.pitch import PITCH_NAMES, Accidental, PitchClass
from chuk_mcp_chords.core.scale import ROMAN_NUMERALS, AbsoluteKey, Key, RelativeKey
from chuk_mcp_chords.errors import ParseError

from .ast import ChordNode, Comment, Measure, Node, Repeat, Rest, Score, Sustain

logger = logging.getLogger(__name__)

PITCH_LETTERS = "CDEFGAB"
ACCIDENTALS = "#b"
SPACES = " \t"

# Degree numbers a modifier may carry, two-digit numbers first
NUMBERS: tuple[str, ...] = ("11", "13", "3", "5", "6", "7", "9")

# Single-token nodes
_SIMPLE_NODES: tuple[tuple[str, type[Rest] | type[Sustain] | type[Repeat]], ...] = (
    ("=", Sustain),
    ("_", Rest),
    ("%", Repeat),
    ("N.C.", Rest),
)

# Payload-free modifiers, tried in this order. "omit" is matched before
# the "o" spelling of dim so it is reachable at all.
_FIXED_MODIFIERS: tuple[tuple[tuple[str, ...], ModifierKind], ...] = (
    (("-5", "b5"), ModifierKind.FLAT_5TH),
    (("sus2",), ModifierKind.SUS2),
    (("sus4",), ModifierKind.SUS4),
    (("dim7",), ModifierKind.DIM_7),
)
_LATE_FIXED_MODIFIERS: tuple[tuple[tuple[str, ...], ModifierKind], ...] = (
    (("dim", "o"), ModifierKind.DIM),
    (("aug7",), ModifierKind.AUG_7),
    (("aug", "+"), ModifierKind.AUG),
)

_NODE_EXPECTED = "chord symbol, '=', '_', '%' or 'N.C.'"


class _Parser:
    """Cursor over normalized source text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    # -- cursor helpers ------------------------------------------------

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, literal: str) -> bool:
        return self.text.startswith(literal, self.pos)

    def eat(self, literal: str) -> bool:
        if self.peek(literal):
            self.pos += len(literal)
            return True
        return False

    def eat_any(self, literals: tuple[str, ...]) -> str | None:
        for literal in literals:
            if self.eat(literal):
                return literal
        return None

    def eat_char(self, chars: str) -> str | None:
        if not self.at_end and self.text[self.pos] in chars:
            self.pos += 1
            return self.text[self.pos - 1]
        return None

    def skip(self, chars: str) -> None:
        while not self.at_end and self.text[self.pos] in chars:
            self.pos += 1

    def error(self, expected: str, position: int | None = None) -> ParseError:
        return ParseError(self.pos if position is None else position, expected, self.text)

    def expect_end(self, what: str) -> None:
        if not self.at_end:
            raise self.error(f"end of {what}")

    # -- grammar -------------------------------------------------------

    def score(self) -> Score:
        items: list[Comment | Measure] = []
        while True:
            self.skip(SPACES + "\n")
            if self.at_end:
                break
            if self.peek("#"):
                items.append(self.comment())
            else:
                items.append(self.measure())
        return Score(items)

    def comment(self) -> Comment:
        self.eat("#")
        end = self.text.find("\n", self.pos)
        if end < 0:
            end = len(self.text)
        text = self.text[self.pos : end].strip()
        self.pos = min(end + 1, len(self.text))
        return Comment(text)

    def measure(self) -> Measure:
        nodes: list[Node] = []
        start = self.pos
        hard_break = False
        while True:
            self.skip(SPACES)
            if self.at_end:
                break
            if self.eat("\n"):
                hard_break = True
                break
            if self.eat("|"):
                hard_break = self._eat_line_end()
                break
            nodes.append(self.node())
        if not nodes:
            raise self.error(_NODE_EXPECTED, start)
        return Measure(nodes, hard_break)

    def _eat_line_end(self) -> bool:
        """Consume trailing spaces and a line break after '|', if that is all there is."""
        mark = self.pos
        self.skip(SPACES)
        if self.eat("\n"):
            return True
        self.pos = mark
        return False

    def node(self) -> Node:
        for literal, node_type in _SIMPLE_NODES:
            if self.eat(literal):
                return node_type()
        return self.chord_symbol()

    def chord_symbol(self) -> ChordNode:
        key = self.key()
        if key is None:
            raise self.error(_NODE_EXPECTED)

        modifiers: list[Modifier] = []
        while (modifier := self.modifier()) is not None:
            modifiers.append(modifier)

        tensions = self.tensions() if self.peek("(") else []

        bass = None
        if self.eat("/"):
            bass = self.key()
            if bass is None:
                raise self.error("bass pitch or roman numeral")

        return ChordNode(key, modifiers, tensions, bass)

    def key(self) -> Key | None:
        """Pitch ('C', 'F#', 'Bb') or degree ('IV', 'bVII'); None if neither."""
        if not self.at_end and self.text[self.pos] in PITCH_LETTERS:
            name = self.text[self.pos]
            self.pos += 1
            name += self.eat_char(ACCIDENTALS) or ""
            return AbsoluteKey(PitchClass(PITCH_NAMES[name]))

        mark = self.pos
        accidental = Accidental.parse(self.eat_char(ACCIDENTALS) or "")
        for numeral, degree in ROMAN_NUMERALS:
            if self.eat(numeral):
                return RelativeKey.from_degree(degree, accidental)
        self.pos = mark
        return None

    def number(self) -> int | None:
        token = self.eat_any(NUMBERS)
        return int(token) if token is not None else None

    def _numbered(self, prefixes: tuple[str, ...]) -> int | None:
        """A prefix followed by a degree number, or nothing consumed."""
        mark = self.pos
        if self.eat_any(prefixes) is not None:
            n = self.number()
            if n is not None:
                return n
        self.pos = mark
        return None

    def modifier(self) -> Modifier | None:
        for spellings, kind in _FIXED_MODIFIERS:
            if self.eat_any(spellings) is not None:
                return Modifier(kind)

        if (n := self._numbered(("omit", "no"))) is not None:
            return Modifier.omit(n)

        for spellings, kind in _LATE_FIXED_MODIFIERS:
            if self.eat_any(spellings) is not None:
                return Modifier(kind)

        if (n := self._numbered(("add",))) is not None:
            return Modifier.add(n)

        if self.eat("mM7"):
            return Modifier(ModifierKind.MINOR_MAJOR_7)

        if self.eat_any(("maj", "M")) is not None:
            return Modifier.major(self.number() or 5)

        if self.eat("m"):
            return Modifier.minor(self.number() or 5)

        mark = self.pos
        symbol = self.eat_char(ACCIDENTALS)
        if symbol is not None:
            n = self.number()
            if n is not None:
                return Modifier.tension(n, Accidental.parse(symbol))
            self.pos = mark

        n = self.number()
        if n is not None:
            return Modifier.major(n)
        return None

    def tension(self) -> Modifier:
        accidental = Accidental.parse(self.eat_char(ACCIDENTALS) or "")
        n = self.number()
        if n is None:
            raise self.error("tension degree")
        return Modifier.tension(n, accidental)

    def tensions(self) -> list[Modifier]:
        self.eat("(")
        tensions = [self.tension()]
        while self.eat(","):
            tensions.append(self.tension())
        if not self.eat(")"):
            raise self.error("',' or ')'")
        return tensions


def _normalize(text: str) -> str:
    return text.replace("\r\n", "\n")


def parse(text: str) -> Score:
    """
    Parse chord notation into a Score.

    Args:
        text: Source text (CRLF line endings are accepted)

    Returns:
        The parsed Score

    Raises:
        ParseError: if any part of the text does not match the grammar
    """
    score = _Parser(_normalize(text)).score()
    logger.debug(f"parsed {len(score.measures())} measures, {len(score.comments())} comments")
    return score


def parse_chord_symbol(text: str) -> ChordNode:
    """Parse exactly one chord symbol, e.g. 'Am7(b9)/G'."""
    parser = _Parser(text.strip())
    node = parser.chord_symbol()
    parser.expect_end("chord symbol")
    return node


def parse_key(text: str) -> Key:
    """Parse a single key: a pitch name or a roman-numeral degree."""
    parser = _Parser(text.strip())
    key = parser.key()
    if key is None:
        raise parser.error("pitch or roman numeral")
    parser.expect_end("key")
    return key
