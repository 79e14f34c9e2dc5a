"""
Score rendering - the inverse of the parser.

Renders a Score back to the primary notation. For any tree the parser
produced, render(parse(render(score))) == render(score).

A few spellings differ from the shortest form so the text re-parses
to the same modifiers:
- Flat5th is written "-5" ("Eb5" would read as an E-flat chord)
- Major(n) directly after "m", "dim" or "aug" is written "maj{n}"
- inline tensions ("C7b9") are moved into the parenthesized group
"""

from __future__ import annotations

from collections.abc import Iterable

from chuk_mcp_chords.core.modifier import Modifier, ModifierKind
from chuk_mcp_chords.core.scale import Key

from .ast import ChordNode, Comment, Item, Node, Repeat, Rest, Score, Sustain

MEASURE_SEPARATOR = " | "

# Modifiers whose spelling would absorb a following bare number
_ABSORBING = frozenset({ModifierKind.DIM, ModifierKind.AUG})

_NODE_SYMBOLS: dict[type, str] = {
    Rest: "N.C.",
    Sustain: "=",
    Repeat: "%",
}


def render_key(key: Key) -> str:
    return str(key)


def render_modifier(modifier: Modifier, previous: Modifier | None = None) -> str:
    """Spell one modifier, given the one rendered just before it."""
    if modifier.kind == ModifierKind.MAJOR and modifier.degree != 5 and previous is not None:
        absorbs = previous.kind in _ABSORBING or previous == Modifier.minor(5)
        if absorbs:
            return f"maj{modifier.degree}"
    return str(modifier)


def render_modifiers(modifiers: Iterable[Modifier]) -> str:
    parts: list[str] = []
    previous: Modifier | None = None
    for modifier in modifiers:
        parts.append(render_modifier(modifier, previous))
        previous = modifier
    return "".join(parts)


def render_chord(node: ChordNode) -> str:
    inline = [m for m in node.modifiers if m.kind == ModifierKind.TENSION]
    body = [m for m in node.modifiers if m.kind != ModifierKind.TENSION]
    tensions = [*inline, *node.tensions]

    text = render_key(node.key) + render_modifiers(body)
    if tensions:
        text += "(" + ",".join(str(t) for t in tensions) + ")"
    if node.bass is not None:
        text += "/" + render_key(node.bass)
    return text


def render_node(node: Node) -> str:
    if isinstance(node, ChordNode):
        return render_chord(node)
    return _NODE_SYMBOLS[type(node)]


def render_item(item: Item) -> str:
    if isinstance(item, Comment):
        return f"# {item.text}\n" if item.text else "#\n"
    text = " ".join(render_node(node) for node in item.nodes) + MEASURE_SEPARATOR
    if item.hard_break:
        text += "\n"
    return text


def render(score: Score) -> str:
    """Render a whole Score to notation text."""
    return "".join(render_item(item) for item in score.items)
