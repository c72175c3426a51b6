"""Turn a decoded track into the time-ordered notes a tape is punched from.

The input model is independent of any MIDI library: a `NoteSequence` holds
tracks of `TrackEvent`s, each with a delta time in ticks and one payload
(`NoteOn`, `NoteOff` or `Meta`).  See `musicbox.midi_source` for the mido
adapter.

Row-space keys
--------------
Notes are stored with ``key = 128 - pitch`` so that, among notes struck at
the same tick, higher pitches sort first.  `Note.pitch` recovers the MIDI
note number, which is what the configured pitch list is written in.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from itertools import accumulate
from typing import Iterable, List, Sequence, Tuple, Union

from .errors import EmptyTrack, InvalidNote, TrackNotFound, UnsupportedDivision

PITCH_KEY_BASE = 128


@dataclass(frozen=True)
class NoteOn:
    pitch: int
    velocity: int = 100


@dataclass(frozen=True)
class NoteOff:
    pitch: int


@dataclass(frozen=True)
class Meta:
    kind: str = "meta"


Payload = Union[NoteOn, NoteOff, Meta]


@dataclass(frozen=True)
class TrackEvent:
    delta_time: int
    payload: Payload


@dataclass(frozen=True)
class NoteSequence:
    """Already-decoded tracks plus the file's ticks-per-beat division."""

    tracks: Tuple[Tuple[TrackEvent, ...], ...]
    division: int

    @property
    def track_count(self) -> int:
        return len(self.tracks)


@dataclass(frozen=True, order=True)
class Note:
    time: int  # ticks since the first note once normalized
    key: int  # 128 - MIDI pitch

    @classmethod
    def from_pitch(cls, time: int, pitch: int) -> "Note":
        return cls(time=time, key=PITCH_KEY_BASE - pitch)

    @property
    def pitch(self) -> int:
        return PITCH_KEY_BASE - self.key


def collect_notes(events: Sequence[TrackEvent]) -> List[Note]:
    """Return one note per note-on event, stamped with its absolute tick."""

    clock = accumulate(event.delta_time for event in events)
    return [
        Note.from_pitch(time, event.payload.pitch)
        for time, event in zip(clock, events)
        if isinstance(event.payload, NoteOn)
    ]


def rebase_notes(notes: Iterable[Note]) -> List[Note]:
    """Sort notes by time and shift them so the earliest starts at tick 0.

    Applying this to its own output returns an equal list.
    """

    ordered = sorted(notes)
    if not ordered:
        return ordered
    start = ordered[0].time
    if start == 0:
        return ordered
    return [replace(note, time=note.time - start) for note in ordered]


def normalize_notes(sequence: NoteSequence, track_num: int) -> List[Note]:
    """Extract, sort and re-base the notes of one track.

    Raises `UnsupportedDivision` for timecode files, `TrackNotFound` when
    `track_num` is out of range and `EmptyTrack` when the track holds no
    note-on events.
    """

    if sequence.division <= 0:
        raise UnsupportedDivision(sequence.division)
    if not 0 <= track_num < sequence.track_count:
        raise TrackNotFound(track_num, sequence.track_count)

    notes = rebase_notes(collect_notes(sequence.tracks[track_num]))
    if not notes:
        raise EmptyTrack(track_num)
    return notes


def note_row(pitches: Sequence[int], pitch: int) -> int:
    """Return the row of `pitch`: its first position in `pitches`.

    The pitch list does not need to be sorted.
    """

    for row, candidate in enumerate(pitches):
        if candidate == pitch:
            return row
    raise InvalidNote(pitch)
