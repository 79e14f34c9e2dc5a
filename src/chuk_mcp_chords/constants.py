"""
Constants for the chord pipeline.

No magic numbers in the engine - timing, register and MIDI defaults live here.
"""

from enum import Enum

# Rhythmic subunits per measure
MEASURE_LENGTH = 16

# Node counts a measure may hold (each divides MEASURE_LENGTH)
VALID_MEASURE_SIZES: tuple[int, ...] = (1, 2, 4, 8, 16)

# Octave a chord is built in before voicing (octave 4 C = MIDI 60)
DEFAULT_OCTAVE = 4

# Octave search range for bass voicing, [0, 8)
OCTAVE_RANGE = range(0, 8)

# MIDI note number of absolute semitone 0
MIDI_NOTE_OFFSET = 12

# Ticks per quarter note and per subunit (a sixteenth)
TICKS_PER_BEAT = 1024
UNIT = TICKS_PER_BEAT // 4

DEFAULT_BPM = 180
DEFAULT_CHANNEL = 0
DEFAULT_VELOCITY = 100

# General MIDI "Synth Voice" (0-indexed program number)
DEFAULT_PROGRAM = 54


class ConvertTarget(str, Enum):
    """Key representation produced by the convert operation."""

    PITCH = "pitch"
    DEGREE = "degree"


class ErrorMessages:
    """Standardized error messages."""

    INVALID_TONIC = "Invalid tonic: '{tonic}'. Expected a pitch name like 'C' or 'F#'."
    UNKNOWN_DIALECT = "Unknown dialect: '{dialect}'. Expected 'rechord' or 'sexp'."
    CONFLICTING_TARGETS = "Choose either as_pitch or as_degree, not both."
