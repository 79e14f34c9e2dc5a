"""
Error taxonomy for the chord pipeline.

Every fallible operation raises one of these. Nothing is transient:
an error aborts the whole document, there is no partial result.
"""

from __future__ import annotations

from typing import Any


class ChordMidiError(Exception):
    """Base class for all chord pipeline errors."""


class ParseError(ChordMidiError):
    """Source text did not match the grammar."""

    def __init__(self, position: int, expected: str, text: str = "") -> None:
        self.position = position
        self.expected = expected
        self.line, self.column = _line_column(text, position)
        super().__init__(
            f"parse error at line {self.line}, column {self.column}: expected {expected}"
        )


class UnknownModifier(ChordMidiError):
    """A modifier/degree combination has no defined chord shape."""

    def __init__(self, modifier: Any, degree: int | None = None) -> None:
        self.modifier = modifier
        self.degree = degree
        suffix = f" with degree {degree}" if degree is not None else ""
        super().__init__(f"unknown modifier: {modifier}{suffix}")


class InvalidMeasureLength(ChordMidiError):
    """A measure has a node count outside {1, 2, 4, 8, 16}."""

    def __init__(self, n: int) -> None:
        self.n = n
        super().__init__(f"invalid measure length: {n} nodes (expected 1, 2, 4, 8 or 16)")


class MissingTonic(ChordMidiError):
    """A degree-rooted chord was resolved without a tonic."""

    def __init__(self, key: Any = None) -> None:
        self.key = key
        detail = f" for {key}" if key is not None else ""
        super().__init__(f"tonic is not set{detail}")


class KeyTypeMismatch(ChordMidiError):
    """An absolute key was compared against a relative key."""

    def __init__(self, left: Any, right: Any) -> None:
        self.left = left
        self.right = right
        super().__init__(f"key type mismatch: {left!r} vs {right!r}")


def _line_column(text: str, position: int) -> tuple[int, int]:
    """1-based line and column of a character offset."""
    head = text[:position]
    line = head.count("\n") + 1
    column = position - (head.rfind("\n") + 1) + 1
    return line, column
