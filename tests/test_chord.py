"""
Tests for the chord resolution engine.

Tests cover:
- canonical modifier ordering
- triad, seventh and extension shapes
- scale-in-force for omit/add/tension
- bass voicing search and octave continuity
"""

from dataclasses import replace

import pytest

from chuk_mcp_chords.compiler import resolve_symbol
from chuk_mcp_chords.core import (
    AbsoluteKey,
    Chord,
    Modifier,
    ModifierKind,
    PitchClass,
    RelativeKey,
    canonical_order,
    find_voicing,
    nearest_octave,
    resolve,
)
from chuk_mcp_chords.core.chord import scale_in_force
from chuk_mcp_chords.core.pitch import Accidental
from chuk_mcp_chords.core.scale import ScaleType
from chuk_mcp_chords.errors import KeyTypeMismatch, MissingTonic, UnknownModifier

C = AbsoluteKey(PitchClass.C)


def intervals(symbol: str) -> list[int]:
    return resolve_symbol(symbol).intervals()


class TestCanonicalOrder:
    """Tests for modifier application order."""

    def test_shapes_before_omit_add_tension(self) -> None:
        """Shapes come first, then omit, add and tension."""
        mods = [
            Modifier.tension(9, Accidental.FLAT),
            Modifier.add(11),
            Modifier.omit(5),
            Modifier(ModifierKind.FLAT_5TH),
            Modifier.minor(7),
        ]
        ordered = canonical_order(mods)
        assert [m.kind for m in ordered] == [
            ModifierKind.MINOR,
            ModifierKind.FLAT_5TH,
            ModifierKind.OMIT,
            ModifierKind.ADD,
            ModifierKind.TENSION,
        ]

    def test_shapes_sorted_by_tag_then_degree(self) -> None:
        """Shape modifiers sort by tag, then degree."""
        ordered = canonical_order([Modifier.major(9), Modifier.minor(5), Modifier.major(7)])
        assert ordered == [Modifier.major(7), Modifier.major(9), Modifier.minor(5)]

    def test_duplicates_collapse(self) -> None:
        """Repeated modifiers apply once."""
        assert canonical_order([Modifier.minor(5), Modifier.minor(5)]) == [Modifier.minor(5)]

    def test_textual_order_is_irrelevant(self) -> None:
        """'Cb5m7' and 'Cm7b5' resolve identically."""
        assert intervals("C-5m7") == intervals("Cm7b5")


class TestChordShapes:
    """Tests for triad/seventh resolution (octave-free, root C)."""

    @pytest.mark.parametrize(
        ("symbol", "expected"),
        [
            ("C", [0, 4, 7]),
            ("Cm", [0, 3, 7]),
            ("CM7", [0, 4, 7, 11]),
            ("Cm7b5", [0, 3, 6, 10]),
            ("Caug", [0, 4, 8]),
            ("Cdim7", [0, 3, 6, 9]),
            ("Cm7", [0, 3, 7, 10]),
            ("Cmaj7", [0, 4, 7, 11]),
            ("CmM7", [0, 3, 7, 11]),
            ("C6", [0, 4, 7, 9]),
            ("C9", [0, 4, 7, 11, 14]),
            ("Cm9", [0, 3, 7, 10, 14]),
            ("Cdim", [0, 3, 6]),
            ("Co", [0, 3, 6]),
            ("C+", [0, 4, 8]),
            ("Caug7", [0, 4, 8, 12]),
            ("Csus2", [0, 3, 7]),
            ("Csus4", [0, 5, 7]),
            ("C-5", [0, 4, 6]),
            ("Cadd9", [0, 4, 7, 14]),
            ("Comit3", [0, 7]),
            ("Cno5", [0, 4]),
        ],
    )
    def test_shape(self, symbol: str, expected: list[int]) -> None:
        """Each symbol resolves to the expected intervals."""
        assert intervals(symbol) == expected

    def test_default_triad(self) -> None:
        """No modifiers means the major triad."""
        chord = resolve(C)
        assert chord.degrees == ((1, 0), (3, 0), (5, 0))

    def test_bare_number_is_major(self) -> None:
        """A bare number selects the major shape."""
        assert intervals("C7") == intervals("CM7")

    @pytest.mark.parametrize("symbol", ["C11", "C13", "Cm3", "CM11"])
    def test_unknown_shape(self, symbol: str) -> None:
        """Shapes other than 5, 6, 7 and 9 are rejected."""
        with pytest.raises(UnknownModifier):
            resolve_symbol(symbol)

    def test_minor_semitones_with_root(self) -> None:
        """semitones() adds the root without wrapping."""
        assert resolve_symbol("Am").semitones() == [9, 12, 16]
        assert resolve_symbol("F").semitones() == [5, 9, 12]
        assert resolve_symbol("G").semitones() == [7, 11, 14]


class TestScaleInForce:
    """Tests for tension/add resolution against the current third."""

    def test_minor_context(self) -> None:
        """A minor third selects the minor scale."""
        assert scale_in_force({1: 0, 3: -1, 5: 0}) == ScaleType.MINOR
        assert scale_in_force({1: 0, 3: 0, 5: 0}) == ScaleType.MAJOR

    def test_flat_nine_tension(self) -> None:
        """(b9) lands a semitone above the octave."""
        assert intervals("C7(b9)") == [0, 4, 7, 11, 13]
        assert intervals("Cm(b9)") == [0, 3, 7, 13]

    def test_sharp_eleven_tension(self) -> None:
        """(#11) on a major chord is an augmented fourth up an octave."""
        assert intervals("C(#11)") == [0, 4, 7, 18]

    def test_add_after_minor_uses_minor_scale(self) -> None:
        """add6 on a minor chord takes the minor sixth."""
        assert intervals("Cmadd6") == [0, 3, 7, 8]

    def test_inline_tension(self) -> None:
        """'C7#9' is the same as 'C7(#9)'."""
        assert intervals("C7#9") == intervals("C7(#9)")


class TestChordValue:
    """Tests for Chord voicing helpers."""

    def test_midi_notes(self) -> None:
        """Octave 4 C major is 60, 64, 67."""
        assert resolve(C).midi_notes() == [60, 64, 67]

    def test_inversion_rotates_up(self) -> None:
        """First inversion moves the root up an octave."""
        chord = replace(resolve(C), inversion=1)
        assert chord.midi_notes() == [64, 67, 72]

    def test_negative_octave_rejected(self) -> None:
        """Octave must be >= 0."""
        with pytest.raises(ValueError):
            Chord(root=C, octave=-1)

    def test_relative_root_needs_tonic(self) -> None:
        """Pitches of a roman-numeral chord need a tonic."""
        chord = resolve(RelativeKey(7))
        assert chord.semitones() == [7, 11, 14]
        with pytest.raises(MissingTonic):
            chord.midi_notes()

    def test_to_dict(self) -> None:
        """Dictionary form carries notes for absolute roots."""
        d = resolve(C).to_dict()
        assert d["root"] == "C"
        assert d["midi_notes"] == [60, 64, 67]
        assert d["degrees"] == {"1": 0, "3": 0, "5": 0}


class TestVoicing:
    """Tests for bass voicing and octave continuity."""

    def test_bass_on_fifth(self) -> None:
        """F/C puts C lowest (second inversion)."""
        chord = resolve_symbol("F/C")
        assert (chord.octave, chord.inversion) == (3, 2)
        assert chord.midi_notes() == [60, 65, 69]

    def test_bass_on_third(self) -> None:
        """Am/C puts C lowest (first inversion)."""
        chord = resolve_symbol("Am/C")
        assert (chord.octave, chord.inversion) == (3, 1)
        assert chord.midi_notes() == [60, 64, 69]

    def test_dominant_over_third(self) -> None:
        """G7/B puts B lowest."""
        chord = resolve_symbol("G7/B")
        assert chord.midi_notes()[0] % 12 == 11

    def test_non_chord_tone_bass_added_below(self) -> None:
        """A bass outside the chord is added under it."""
        chord = resolve_symbol("C/D")
        notes = chord.midi_notes()
        assert notes[0] % 12 == 2
        assert notes[1:] == [60, 64, 67]

    def test_find_voicing_first_minimum(self) -> None:
        """The search returns the first best (octave, inversion)."""
        chord = resolve(AbsoluteKey(PitchClass.F))
        assert find_voicing(chord, AbsoluteKey(PitchClass.C), 4) == (3, 2)

    def test_bass_frame_mismatch(self) -> None:
        """A relative bass under an absolute root is an error."""
        with pytest.raises(KeyTypeMismatch):
            resolve(C, bass=RelativeKey(4))

    def test_nearest_octave_keeps_f_with_c(self) -> None:
        """F after C at octave 4 stays at octave 4."""
        c = resolve(C)
        f = resolve(AbsoluteKey(PitchClass.F))
        assert c.distance(replace(f, octave=4)) == 20
        assert c.distance(replace(f, octave=3)) == 28
        assert nearest_octave(f, c) == 4

    def test_nearest_octave_moves_a_minor_down(self) -> None:
        """Am after C at octave 4 drops to octave 3."""
        am = resolve(AbsoluteKey(PitchClass.A), [Modifier.minor()])
        assert nearest_octave(am, resolve(C)) == 3

    def test_nearest_octave_tie_keeps_octave(self) -> None:
        """F# is a tritone from C either way; the smaller move wins."""
        c = resolve(C)
        fs = resolve(AbsoluteKey(PitchClass.Fs))
        assert c.distance(replace(fs, octave=4)) == 24
        assert c.distance(replace(fs, octave=3)) == 24
        assert nearest_octave(fs, c) == 4

    def test_nearest_octave_floor(self) -> None:
        """Octave never goes below 0."""
        c0 = resolve(C, octave=0)
        b = resolve(AbsoluteKey(PitchClass.B))
        assert nearest_octave(b, c0) >= 0
