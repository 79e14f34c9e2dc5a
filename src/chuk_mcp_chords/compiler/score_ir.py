"""
Score IR - the inspectable form of an interpreted chord score.

Sits between the interpreter and MIDI. The IR is:
- Deterministic: same source and settings, same IR
- Serializable: JSON for inspection and golden-file testing
- Diffable: canonical note ordering

Schema version: chord_ir/v1
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from mido import Message, MetaMessage, MidiFile, MidiTrack, bpm2tempo

from chuk_mcp_chords.compiler.midi import ticks_per_measure

if TYPE_CHECKING:
    from chuk_mcp_chords.compiler.interpreter import Note
    from chuk_mcp_chords.models.settings import ExportSettings

# Current schema version
SCHEMA_VERSION = "chord_ir/v1"


@dataclass(frozen=True, order=True)
class IRNote:
    """
    A single sounding note.

    Ordered by (start_ticks, channel, pitch). Chord root and measure
    number are traceability only and do not take part in comparison.
    """

    start_ticks: int
    channel: int
    pitch: int  # MIDI note number (0-127)
    duration_ticks: int
    velocity: int

    root: str | None = field(default=None, compare=False)
    measure: int | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        """Validate MIDI ranges."""
        if not 0 <= self.pitch <= 127:
            raise ValueError(f"Pitch must be 0-127, got {self.pitch}")
        if not 0 <= self.velocity <= 127:
            raise ValueError(f"Velocity must be 0-127, got {self.velocity}")
        if not 0 <= self.channel <= 15:
            raise ValueError(f"Channel must be 0-15, got {self.channel}")
        if self.start_ticks < 0:
            raise ValueError(f"Start ticks must be >= 0, got {self.start_ticks}")
        if self.duration_ticks < 0:
            raise ValueError(f"Duration ticks must be >= 0, got {self.duration_ticks}")

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "start_ticks": self.start_ticks,
            "channel": self.channel,
            "pitch": self.pitch,
            "duration_ticks": self.duration_ticks,
            "velocity": self.velocity,
        }
        if self.root:
            d["root"] = self.root
        if self.measure is not None:
            d["measure"] = self.measure
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> IRNote:
        return cls(
            start_ticks=d["start_ticks"],
            channel=d["channel"],
            pitch=d["pitch"],
            duration_ticks=d["duration_ticks"],
            velocity=d["velocity"],
            root=d.get("root"),
            measure=d.get("measure"),
        )


@dataclass
class ScoreIR:
    """
    A compiled chord score before MIDI encoding.

    `events` keeps the interpreter's view (one entry per chord or rest)
    next to the flattened notes, so a snapshot shows both rhythm and
    voicing.
    """

    schema: str = SCHEMA_VERSION

    name: str = ""
    tonic: str = ""
    tempo: int = 180
    time_signature: tuple[int, int] = (4, 4)
    ticks_per_beat: int = 1024
    program: int = 54

    total_ticks: int = 0
    total_measures: int = 0

    notes: list[IRNote] = field(default_factory=list)
    events: list[dict[str, Any]] = field(default_factory=list)

    def canonicalize(self) -> ScoreIR:
        """Return a copy with notes in canonical order."""
        return ScoreIR(
            schema=self.schema,
            name=self.name,
            tonic=self.tonic,
            tempo=self.tempo,
            time_signature=self.time_signature,
            ticks_per_beat=self.ticks_per_beat,
            program=self.program,
            total_ticks=self.total_ticks,
            total_measures=self.total_measures,
            notes=sorted(self.notes),
            events=list(self.events),
        )

    def to_dict(self) -> dict[str, Any]:
        """Canonicalized dictionary for JSON serialization."""
        ir = self.canonicalize()
        return {
            "schema": ir.schema,
            "name": ir.name,
            "tonic": ir.tonic,
            "tempo": ir.tempo,
            "time_signature": {
                "numerator": ir.time_signature[0],
                "denominator": ir.time_signature[1],
            },
            "ticks_per_beat": ir.ticks_per_beat,
            "program": ir.program,
            "total_ticks": ir.total_ticks,
            "total_measures": ir.total_measures,
            "notes": [n.to_dict() for n in ir.notes],
            "events": ir.events,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ScoreIR:
        time_signature = d.get("time_signature", {"numerator": 4, "denominator": 4})
        return cls(
            schema=d.get("schema", SCHEMA_VERSION),
            name=d.get("name", ""),
            tonic=d.get("tonic", ""),
            tempo=d.get("tempo", 180),
            time_signature=(time_signature["numerator"], time_signature["denominator"]),
            ticks_per_beat=d.get("ticks_per_beat", 1024),
            program=d.get("program", 54),
            total_ticks=d.get("total_ticks", 0),
            total_measures=d.get("total_measures", 0),
            notes=[IRNote.from_dict(n) for n in d.get("notes", [])],
            events=list(d.get("events", [])),
        )

    @classmethod
    def from_json(cls, json_str: str) -> ScoreIR:
        return cls.from_dict(json.loads(json_str))

    def note_count(self) -> int:
        return len(self.notes)

    def notes_by_measure(self) -> dict[int, list[IRNote]]:
        """Group notes by the measure they start in."""
        result: dict[int, list[IRNote]] = {}
        for note in self.notes:
            result.setdefault(note.measure or 0, []).append(note)
        return result

    def summary(self) -> dict[str, Any]:
        """Generate a summary for quick inspection."""
        return {
            "name": self.name,
            "tonic": self.tonic,
            "tempo": self.tempo,
            "total_measures": self.total_measures,
            "total_notes": self.note_count(),
            "chords": sum(1 for e in self.events if e["root"] is not None),
            "rests": sum(1 for e in self.events if e["root"] is None),
            "pitch_range": (
                min(n.pitch for n in self.notes) if self.notes else 0,
                max(n.pitch for n in self.notes) if self.notes else 0,
            ),
        }

    def diff_summary(self, other: ScoreIR) -> dict[str, Any]:
        """Summary of what changed between two compilations."""
        self_notes = set(self.notes)
        other_notes = set(other.notes)
        return {
            "notes_added": len(other_notes - self_notes),
            "notes_removed": len(self_notes - other_notes),
            "notes_unchanged": len(self_notes & other_notes),
            "tempo_changed": self.tempo != other.tempo,
            "tonic_changed": self.tonic != other.tonic,
            "measures_changed": self.total_measures != other.total_measures,
        }


def build_score_ir(
    notes: Sequence[Note],
    settings: ExportSettings | None = None,
    name: str = "",
) -> ScoreIR:
    """
    Lay interpreter notes out on an absolute tick timeline.

    Rests advance time without producing notes, so the IR keeps trailing
    silence that the MIDI writer drops.
    """
    if settings is None:
        from chuk_mcp_chords.models.settings import ExportSettings

        settings = ExportSettings()

    unit = settings.ticks_per_beat // 4
    measure_ticks = ticks_per_measure(settings.ticks_per_beat)
    ir_notes: list[IRNote] = []
    events: list[dict[str, Any]] = []
    now = 0
    for note in notes:
        ticks = note.duration * unit
        root = str(note.chord.root) if note.chord is not None else None
        measure = now // measure_ticks + 1
        events.append(
            {"start_ticks": now, "duration_ticks": ticks, "root": root, "measure": measure}
        )
        if note.chord is not None:
            for pitch in note.chord.midi_notes():
                ir_notes.append(
                    IRNote(
                        start_ticks=now,
                        channel=settings.channel,
                        pitch=pitch,
                        duration_ticks=ticks,
                        velocity=settings.velocity,
                        root=root,
                        measure=measure,
                    )
                )
        now += ticks

    return ScoreIR(
        name=name,
        tonic=settings.tonic or "",
        tempo=settings.bpm,
        time_signature=settings.get_time_signature(),
        ticks_per_beat=settings.ticks_per_beat,
        program=settings.program,
        total_ticks=now,
        total_measures=-(-now // measure_ticks),
        notes=ir_notes,
        events=events,
    ).canonicalize()


def score_ir_to_midi(score_ir: ScoreIR) -> MidiFile:
    """
    Emit a MidiFile from a (possibly edited) Score IR.

    Example:
        ir = ScoreIR.from_json(json_str)
        ir.notes = [n for n in ir.notes if n.pitch >= 48]
        score_ir_to_midi(ir).save("no_low_notes.mid")
    """
    mid = MidiFile(ticks_per_beat=score_ir.ticks_per_beat)
    track = MidiTrack()
    mid.tracks.append(track)

    channels = sorted({n.channel for n in score_ir.notes}) or [0]
    for channel in channels:
        track.append(Message("program_change", channel=channel, program=score_ir.program, time=0))
    numerator, denominator = score_ir.time_signature
    track.append(
        MetaMessage("time_signature", numerator=numerator, denominator=denominator, time=0)
    )
    track.append(MetaMessage("set_tempo", tempo=bpm2tempo(score_ir.tempo), time=0))

    messages: list[tuple[int, Message]] = []
    for note in score_ir.notes:
        messages.append(
            (
                note.start_ticks,
                Message("note_on", channel=note.channel, note=note.pitch, velocity=note.velocity),
            )
        )
        messages.append(
            (
                note.start_ticks + note.duration_ticks,
                Message("note_off", channel=note.channel, note=note.pitch, velocity=note.velocity),
            )
        )

    # note_off before note_on at the same tick
    messages.sort(key=lambda x: (x[0], x[1].type != "note_off"))

    current = 0
    for abs_time, msg in messages:
        msg.time = abs_time - current
        track.append(msg)
        current = abs_time

    track.append(MetaMessage("end_of_track", time=0))
    return mid
