"""
Notation dialects.

Each dialect implements ChordFormat (parse text to Score, render Score
to text). The dialect for a file is chosen by its extension; anything
unrecognized is read as the primary notation.
"""

from __future__ import annotations

from pathlib import Path

from chuk_mcp_chords.constants import ErrorMessages
from chuk_mcp_chords.formats.base import ChordFormat
from chuk_mcp_chords.formats.rechord import RechordFormat
from chuk_mcp_chords.formats.sexp import SexpFormat

FORMATS: dict[str, type[ChordFormat]] = {
    RechordFormat.name: RechordFormat,
    SexpFormat.name: SexpFormat,
}


def get_format(name: str) -> ChordFormat:
    """Look up a dialect by name ('rechord' or 'sexp')."""
    try:
        return FORMATS[name.lower()]()
    except KeyError:
        raise ValueError(ErrorMessages.UNKNOWN_DIALECT.format(dialect=name)) from None


def format_for_path(path: str | Path) -> ChordFormat:
    """Pick the dialect for a file by its extension."""
    suffix = Path(path).suffix.lower()
    for format_type in FORMATS.values():
        if suffix in format_type.extensions:
            return format_type()
    return RechordFormat()


__all__ = [
    "FORMATS",
    "ChordFormat",
    "RechordFormat",
    "SexpFormat",
    "format_for_path",
    "get_format",
]
