"""
Transposition - rewrite a Score between absolute and relative keys.

Both passes mutate the Score in place, including bass keys, and return
it for chaining. Keys already in the target form are left alone, so
as_pitch(as_degree(score, k), k) restores every original pitch.
"""

from __future__ import annotations

from collections.abc import Callable

from chuk_mcp_chords.core.pitch import PitchClass
from chuk_mcp_chords.core.scale import Key

from .ast import Score


def _rewrite_keys(score: Score, rewrite: Callable[[Key], Key]) -> Score:
    for node in score.chord_nodes():
        node.key = rewrite(node.key)
        if node.bass is not None:
            node.bass = rewrite(node.bass)
    return score


def as_degree(score: Score, tonic: PitchClass) -> Score:
    """Absolute keys become roman-numeral distances above `tonic`."""
    return _rewrite_keys(score, lambda key: key.as_degree(tonic))


def as_pitch(score: Score, tonic: PitchClass) -> Score:
    """Roman-numeral keys become pitches, counted up from `tonic`."""
    return _rewrite_keys(score, lambda key: key.as_pitch(tonic))
