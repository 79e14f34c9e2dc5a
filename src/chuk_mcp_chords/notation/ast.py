"""
Score tree - the parsed form of chord notation.

A Score is a flat list of comments and measures. A measure holds one
node per rhythmic slot: a chord symbol, a rest, a sustain or a repeat.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TypeAlias

from chuk_mcp_chords.core.modifier import Modifier
from chuk_mcp_chords.core.scale import Key


@dataclass
class ChordNode:
    """
    A chord symbol as written: root key, modifiers, tensions, bass.

    Keys are rewritten in place by transposition; everything else is
    read-only after parsing.
    """

    key: Key
    modifiers: list[Modifier] = field(default_factory=list)
    tensions: list[Modifier] = field(default_factory=list)
    bass: Key | None = None


@dataclass(frozen=True)
class Rest:
    """Silence for one slot ('_' or 'N.C.')."""


@dataclass(frozen=True)
class Sustain:
    """Extend the held chord by one slot ('=')."""


@dataclass(frozen=True)
class Repeat:
    """Restrike the previous chord for one slot ('%')."""


Node: TypeAlias = ChordNode | Rest | Sustain | Repeat


@dataclass
class Comment:
    """A '#' comment line."""

    text: str


@dataclass
class Measure:
    """
    One measure of nodes.

    hard_break records whether the measure ended a line; it only
    matters for re-rendering.
    """

    nodes: list[Node] = field(default_factory=list)
    hard_break: bool = False

    def chords(self) -> list[ChordNode]:
        return [node for node in self.nodes if isinstance(node, ChordNode)]


Item: TypeAlias = Comment | Measure


@dataclass
class Score:
    """A parsed document."""

    items: list[Item] = field(default_factory=list)

    def measures(self) -> list[Measure]:
        return [item for item in self.items if isinstance(item, Measure)]

    def comments(self) -> list[Comment]:
        return [item for item in self.items if isinstance(item, Comment)]

    def chord_nodes(self) -> Iterator[ChordNode]:
        """Every chord node, in document order."""
        for measure in self.measures():
            yield from measure.chords()

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
