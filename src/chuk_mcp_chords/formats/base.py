"""
Format interface - a textual dialect that parses to and renders from a Score.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from chuk_mcp_chords.notation.ast import Score


class ChordFormat(ABC):
    """A chord notation dialect."""

    name: str = ""
    extensions: tuple[str, ...] = ()

    @abstractmethod
    def parse(self, text: str) -> Score:
        """Parse text into a Score."""

    @abstractmethod
    def render(self, score: Score) -> str:
        """Render a Score as text."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
