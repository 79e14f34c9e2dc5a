"""
MIDI export - the end of the pipeline.

Notes from the interpreter are written to a MidiSink as note_on /
note_off pairs with tick deltas. MidoTrackSink collects them into a
mido MidiTrack; mido owns the binary file format.

All notes of one chord share a start and an end: the first note_on
carries the delta since the last event (including any rest before it),
the first note_off carries the chord's length.
All operations are deterministic: same notes, same file.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

from mido import Message, MetaMessage, MidiFile, MidiTrack, bpm2tempo

from chuk_mcp_chords.constants import (
    DEFAULT_BPM,
    DEFAULT_CHANNEL,
    DEFAULT_PROGRAM,
    DEFAULT_VELOCITY,
    TICKS_PER_BEAT,
    UNIT,
)

if TYPE_CHECKING:
    from chuk_mcp_chords.compiler.interpreter import Note
    from chuk_mcp_chords.models.settings import ExportSettings

logger = logging.getLogger(__name__)


class MidiSink(Protocol):
    """Receiver of abstract MIDI events."""

    def allocate_channel(self) -> int: ...

    def program_change(self, channel: int, program: int) -> None: ...

    def set_time_signature(self, numerator: int, denominator: int) -> None: ...

    def set_tempo(self, bpm: int) -> None: ...

    def note_on(self, tick_delta: int, channel: int, pitch: int, velocity: int) -> None: ...

    def note_off(self, tick_delta: int, channel: int, pitch: int, velocity: int) -> None: ...


def _check_note(channel: int, pitch: int, velocity: int, tick_delta: int) -> None:
    if not 0 <= pitch <= 127:
        raise ValueError(f"Pitch must be 0-127, got {pitch}")
    if not 0 <= velocity <= 127:
        raise ValueError(f"Velocity must be 0-127, got {velocity}")
    if not 0 <= channel <= 15:
        raise ValueError(f"Channel must be 0-15, got {channel}")
    if tick_delta < 0:
        raise ValueError(f"Tick delta must be >= 0, got {tick_delta}")


class MidoTrackSink:
    """
    MidiSink backed by a single mido track.

    Channels are handed out from `channel` upward; the chord writer
    only ever asks for one.
    """

    def __init__(self, channel: int = DEFAULT_CHANNEL) -> None:
        self.track = MidiTrack()
        self._next_channel = channel

    def allocate_channel(self) -> int:
        channel = self._next_channel
        if channel > 15:
            raise ValueError("No free MIDI channel")
        self._next_channel += 1
        return channel

    def program_change(self, channel: int, program: int) -> None:
        self.track.append(Message("program_change", channel=channel, program=program, time=0))

    def set_time_signature(self, numerator: int, denominator: int) -> None:
        self.track.append(
            MetaMessage("time_signature", numerator=numerator, denominator=denominator, time=0)
        )

    def set_tempo(self, bpm: int) -> None:
        self.track.append(MetaMessage("set_tempo", tempo=bpm2tempo(bpm), time=0))

    def note_on(self, tick_delta: int, channel: int, pitch: int, velocity: int) -> None:
        _check_note(channel, pitch, velocity, tick_delta)
        self.track.append(
            Message("note_on", channel=channel, note=pitch, velocity=velocity, time=tick_delta)
        )

    def note_off(self, tick_delta: int, channel: int, pitch: int, velocity: int) -> None:
        _check_note(channel, pitch, velocity, tick_delta)
        self.track.append(
            Message("note_off", channel=channel, note=pitch, velocity=velocity, time=tick_delta)
        )

    def close(self) -> MidiTrack:
        """Terminate the track and return it."""
        self.track.append(MetaMessage("end_of_track", time=0))
        return self.track


def write_chord(
    sink: MidiSink,
    channel: int,
    pitches: Sequence[int],
    duration: int,
    delay: int = 0,
    velocity: int = DEFAULT_VELOCITY,
) -> None:
    """Write one chord: all note_ons, then all note_offs."""
    for i, pitch in enumerate(pitches):
        sink.note_on(delay if i == 0 else 0, channel, pitch, velocity)
    for i, pitch in enumerate(pitches):
        sink.note_off(duration if i == 0 else 0, channel, pitch, velocity)


def write_notes(
    notes: Sequence[Note],
    sink: MidiSink,
    bpm: int = DEFAULT_BPM,
    velocity: int = DEFAULT_VELOCITY,
    program: int = DEFAULT_PROGRAM,
    time_signature: tuple[int, int] = (4, 4),
    unit: int = UNIT,
) -> int:
    """
    Write interpreter notes to a sink.

    Args:
        notes: Notes from the interpreter
        sink: Event receiver
        bpm: Tempo
        velocity: Velocity of every note
        program: General MIDI program for the channel
        time_signature: (numerator, denominator)
        unit: Ticks per subunit

    Returns:
        Total length written, in ticks (trailing rests excluded)
    """
    channel = sink.allocate_channel()
    sink.program_change(channel, program)
    sink.set_time_signature(*time_signature)
    sink.set_tempo(bpm)

    delay = 0
    total = 0
    for note in notes:
        ticks = note.duration * unit
        if note.chord is None:
            delay += ticks
            continue
        write_chord(sink, channel, note.chord.midi_notes(), ticks, delay, velocity)
        total += delay + ticks
        delay = 0
    logger.debug(f"wrote {len(notes)} notes, {total} ticks")
    return total


def notes_to_midi(notes: Sequence[Note], settings: ExportSettings | None = None) -> MidiFile:
    """
    Convert interpreter notes to a MidiFile.

    Args:
        notes: Notes from the interpreter
        settings: Export settings (defaults if omitted)

    Returns:
        A mido MidiFile ready to be saved
    """
    if settings is None:
        from chuk_mcp_chords.models.settings import ExportSettings

        settings = ExportSettings()

    mid = MidiFile(ticks_per_beat=settings.ticks_per_beat)
    sink = MidoTrackSink(settings.channel)
    # A subunit is a sixteenth note at any resolution
    write_notes(
        notes,
        sink,
        bpm=settings.bpm,
        velocity=settings.velocity,
        program=settings.program,
        time_signature=settings.get_time_signature(),
        unit=settings.ticks_per_beat // 4,
    )
    mid.tracks.append(sink.close())
    return mid


def midi_events(mid: MidiFile) -> list[tuple[int, str, int]]:
    """
    Flatten a MidiFile to (absolute_tick, type, note) for note messages.

    Handy for inspecting exported files in tests and tools.
    """
    events: list[tuple[int, str, int]] = []
    for track in mid.tracks:
        now = 0
        for msg in track:
            now += msg.time
            if msg.type in ("note_on", "note_off"):
                events.append((now, msg.type, msg.note))
    return events


def ticks_per_measure(ticks_per_beat: int = TICKS_PER_BEAT) -> int:
    """Ticks in one 16-subunit measure."""
    return ticks_per_beat * 4
