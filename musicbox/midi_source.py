"""Decode Standard MIDI Files into a `NoteSequence` using mido."""

from __future__ import annotations

from pathlib import Path
from typing import List

import mido

from .errors import TrackNotFound
from .notes import Meta, NoteOff, NoteOn, NoteSequence, TrackEvent, collect_notes


def _signed_division(ticks_per_beat: int) -> int:
    # A set top bit means SMPTE timecode; surface it as a negative division.
    if ticks_per_beat >= 0x8000:
        return ticks_per_beat - 0x10000
    return ticks_per_beat


def event_from_message(msg: mido.Message | mido.MetaMessage) -> TrackEvent:
    if msg.type == "note_on" and msg.velocity > 0:
        payload = NoteOn(pitch=msg.note, velocity=msg.velocity)
    elif msg.type == "note_off" or msg.type == "note_on":
        payload = NoteOff(pitch=msg.note)
    else:
        payload = Meta(kind=msg.type)
    return TrackEvent(delta_time=msg.time, payload=payload)


def sequence_from_midi(mid: mido.MidiFile) -> NoteSequence:
    tracks = tuple(
        tuple(event_from_message(msg) for msg in track) for track in mid.tracks
    )
    return NoteSequence(tracks=tracks, division=_signed_division(mid.ticks_per_beat))


def load_midi(path: Path | str) -> NoteSequence:
    midi_path = Path(path).expanduser()
    return sequence_from_midi(mido.MidiFile(str(midi_path)))


def track_pitches(sequence: NoteSequence, track_num: int) -> List[int]:
    """Return the distinct MIDI pitches struck in one track, ascending."""

    if not 0 <= track_num < sequence.track_count:
        raise TrackNotFound(track_num, sequence.track_count)
    return sorted({note.pitch for note in collect_notes(sequence.tracks[track_num])})
