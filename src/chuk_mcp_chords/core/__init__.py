"""
Core music primitives - the Radix layer.

These are the invariants the parser and interpreter compose on:
- PitchClass: The 12 chromatic pitch classes (0-11)
- Accidental: Sharp / flat / natural as a semitone offset
- ScaleType: Major and minor step patterns
- AbsoluteKey / RelativeKey: Chord roots, fixed or tonic-relative
- Modifier: Text-derived chord alterations
- Chord: A resolved chord and its voicing
"""

from chuk_mcp_chords.core.chord import Chord, find_voicing, nearest_octave, resolve
from chuk_mcp_chords.core.modifier import Modifier, ModifierKind, canonical_order
from chuk_mcp_chords.core.pitch import Accidental, PitchClass
from chuk_mcp_chords.core.scale import AbsoluteKey, Key, RelativeKey, ScaleType

__all__ = [
    # Pitch
    "PitchClass",
    "Accidental",
    # Scale
    "ScaleType",
    "Key",
    "AbsoluteKey",
    "RelativeKey",
    # Modifier
    "Modifier",
    "ModifierKind",
    "canonical_order",
    # Chord
    "Chord",
    "resolve",
    "find_voicing",
    "nearest_octave",
]
