"""
S-expression format.

    ; comment
    (score
      (C Am F G)
      (keyed D (I IV (chord V7) %)))

A measure is a list of nodes. A node is an atom ('=', '_', '%', 'N.C.'
or any chord symbol) or (chord SYMBOL). (keyed PITCH MEASURE) parses
MEASURE with roman-numeral keys resolved against PITCH. Symbols that
contain parentheses are written as double-quoted atoms ("C7(b9)").
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from chuk_mcp_chords.core.scale import AbsoluteKey, Key
from chuk_mcp_chords.errors import ParseError
from chuk_mcp_chords.notation.ast import Comment, Item, Measure, Node, Repeat, Rest, Score, Sustain
from chuk_mcp_chords.notation.parser import parse_chord_symbol, parse_key
from chuk_mcp_chords.notation.render import render_node
from chuk_mcp_chords.notation.transpose import as_pitch

from .base import ChordFormat

_ATOM_NODES: dict[str, type[Rest] | type[Sustain] | type[Repeat]] = {
    "=": Sustain,
    "_": Rest,
    "N.C.": Rest,
    "%": Repeat,
}

_DELIMITERS = "();\" \t\n\r"


@dataclass(frozen=True)
class Atom:
    text: str
    position: int


@dataclass(frozen=True)
class SList:
    items: list[Expr]
    position: int

    @property
    def head(self) -> str | None:
        if self.items and isinstance(self.items[0], Atom):
            return self.items[0].text
        return None


Expr: TypeAlias = Atom | SList


class _Reader:
    """Reads one s-expression, collecting ';' comments along the way."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.comments: list[str] = []

    def error(self, expected: str, position: int | None = None) -> ParseError:
        return ParseError(self.pos if position is None else position, expected, self.text)

    def skip_blank(self) -> None:
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char in " \t\r\n":
                self.pos += 1
            elif char == ";":
                end = self.text.find("\n", self.pos)
                end = len(self.text) if end < 0 else end
                self.comments.append(self.text[self.pos + 1 : end].strip())
                self.pos = end
            else:
                break

    def expr(self) -> Expr:
        self.skip_blank()
        if self.pos >= len(self.text):
            raise self.error("'(' or atom")
        start = self.pos
        if self.text[self.pos] == "(":
            self.pos += 1
            items: list[Expr] = []
            while True:
                self.skip_blank()
                if self.pos >= len(self.text):
                    raise self.error("')'")
                if self.text[self.pos] == ")":
                    self.pos += 1
                    return SList(items, start)
                items.append(self.expr())
        if self.text[self.pos] == ")":
            raise self.error("'(' or atom")
        if self.text[self.pos] == '"':
            end = self.text.find('"', self.pos + 1)
            if end < 0:
                raise self.error("closing '\"'")
            self.pos = end + 1
            return Atom(self.text[start + 1 : end], start + 1)
        while self.pos < len(self.text) and self.text[self.pos] not in _DELIMITERS:
            self.pos += 1
        return Atom(self.text[start : self.pos], start)

    def document(self) -> Expr:
        expr = self.expr()
        self.skip_blank()
        if self.pos < len(self.text):
            raise self.error("end of input")
        return expr


class SexpFormat(ChordFormat):
    name = "sexp"
    extensions = (".sexp", ".scm", ".lisp")

    def parse(self, text: str) -> Score:
        reader = _Reader(text)
        expr = reader.document()
        if not isinstance(expr, SList) or expr.head != "score":
            raise ParseError(expr.position, "(score ...)", text)
        items: list[Item] = [Comment(c) for c in reader.comments]
        items.extend(self._measure(m, text) for m in expr.items[1:])
        return Score(items)

    def _measure(self, expr: Expr, text: str) -> Measure:
        if not isinstance(expr, SList):
            raise ParseError(expr.position, "measure list", text)
        if expr.head == "keyed":
            if len(expr.items) != 3 or not isinstance(expr.items[1], Atom):
                raise ParseError(expr.position, "(keyed PITCH MEASURE)", text)
            key = self._key(expr.items[1], text)
            if not isinstance(key, AbsoluteKey):
                raise ParseError(expr.items[1].position, "absolute pitch", text)
            measure = self._measure(expr.items[2], text)
            as_pitch(Score([measure]), key.pitch)
            return measure
        if not expr.items:
            raise ParseError(expr.position, "at least one node", text)
        return Measure([self._node(n, text) for n in expr.items])

    def _node(self, expr: Expr, text: str) -> Node:
        if isinstance(expr, SList):
            if expr.head != "chord" or len(expr.items) != 2 or not isinstance(expr.items[1], Atom):
                raise ParseError(expr.position, "(chord SYMBOL)", text)
            expr = expr.items[1]
        if expr.text in _ATOM_NODES:
            return _ATOM_NODES[expr.text]()
        try:
            return parse_chord_symbol(expr.text)
        except ParseError as e:
            raise ParseError(expr.position + e.position, e.expected, text) from e

    def _key(self, atom: Atom, text: str) -> Key:
        try:
            return parse_key(atom.text)
        except ParseError as e:
            raise ParseError(atom.position + e.position, e.expected, text) from e

    def render(self, score: Score) -> str:
        lines = [f"; {item.text}" for item in score.comments()]
        measures = [
            "  (" + " ".join(_atom(render_node(node)) for node in m.nodes) + ")"
            for m in score.measures()
        ]
        lines.append("(score" + ("\n" + "\n".join(measures) if measures else "") + ")")
        return "\n".join(lines) + "\n"


def _atom(text: str) -> str:
    """Quote a symbol that would not read back as a single atom."""
    if any(char in _DELIMITERS for char in text):
        return f'"{text}"'
    return text
