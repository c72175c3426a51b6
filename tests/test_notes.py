from pathlib import Path
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from musicbox.errors import EmptyTrack, InvalidNote, TrackNotFound, UnsupportedDivision
from musicbox.notes import (
    Meta,
    Note,
    NoteOff,
    NoteOn,
    NoteSequence,
    TrackEvent,
    collect_notes,
    normalize_notes,
    note_row,
    rebase_notes,
)


def _track(*events: tuple) -> tuple:
    return tuple(TrackEvent(delta_time=delta, payload=payload) for delta, payload in events)


MELODY = _track(
    (100, Meta("track_name")),
    (20, NoteOn(60)),
    (48, NoteOff(60)),
    (0, NoteOn(64)),
    (48, NoteOff(64)),
    (10, Meta("marker")),
    (38, NoteOn(67)),
)


def test_collect_notes_accumulates_delta_times() -> None:
    notes = collect_notes(MELODY)
    assert [(n.time, n.pitch) for n in notes] == [(120, 60), (168, 64), (264, 67)]


def test_note_key_is_inverted_pitch() -> None:
    note = Note.from_pitch(0, 60)
    assert note.key == 68
    assert note.pitch == 60


def test_normalize_rebases_to_zero() -> None:
    sequence = NoteSequence(tracks=((), MELODY), division=96)
    notes = normalize_notes(sequence, 1)
    assert [n.time for n in notes] == [0, 48, 144]
    assert min(n.time for n in notes) == 0


def test_simultaneous_notes_put_higher_pitch_first() -> None:
    track = _track((0, NoteOn(60)), (0, NoteOn(72)), (0, NoteOn(64)))
    notes = normalize_notes(NoteSequence(tracks=(track,), division=96), 0)
    assert [n.pitch for n in notes] == [72, 64, 60]


def test_unordered_events_are_sorted_by_time() -> None:
    notes = rebase_notes([Note.from_pitch(50, 60), Note.from_pitch(10, 62), Note.from_pitch(30, 64)])
    assert [(n.time, n.pitch) for n in notes] == [(0, 62), (20, 64), (40, 60)]


def test_rebase_is_idempotent() -> None:
    once = rebase_notes(collect_notes(MELODY))
    assert rebase_notes(once) == once


def test_rebase_of_nothing_is_empty() -> None:
    assert rebase_notes([]) == []


@pytest.mark.parametrize("division", [0, -25])
def test_timecode_division_is_rejected(division: int) -> None:
    sequence = NoteSequence(tracks=(MELODY,), division=division)
    with pytest.raises(UnsupportedDivision) as excinfo:
        normalize_notes(sequence, 0)
    assert excinfo.value.division == division


def test_track_index_equal_to_track_count_is_not_found() -> None:
    sequence = NoteSequence(tracks=(MELODY, MELODY), division=96)
    with pytest.raises(TrackNotFound, match="track 2 not found"):
        normalize_notes(sequence, 2)


def test_division_is_checked_before_track() -> None:
    sequence = NoteSequence(tracks=(), division=0)
    with pytest.raises(UnsupportedDivision):
        normalize_notes(sequence, 5)


def test_meta_only_track_is_empty() -> None:
    track = _track((0, Meta("set_tempo")), (10, Meta("end_of_track")))
    with pytest.raises(EmptyTrack):
        normalize_notes(NoteSequence(tracks=(track,), division=96), 0)


def test_note_off_only_track_is_empty() -> None:
    track = _track((0, NoteOff(60)), (10, NoteOff(62)))
    with pytest.raises(EmptyTrack):
        normalize_notes(NoteSequence(tracks=(track,), division=96), 0)


def test_errors_are_value_errors() -> None:
    with pytest.raises(ValueError):
        normalize_notes(NoteSequence(tracks=(), division=96), 0)


def test_note_row_uses_first_match_in_unsorted_list() -> None:
    pitches = [72, 60, 64, 60]
    assert note_row(pitches, 72) == 0
    assert note_row(pitches, 60) == 1
    assert note_row(pitches, 64) == 2


def test_note_row_reports_missing_pitch() -> None:
    with pytest.raises(InvalidNote, match="note 61") as excinfo:
        note_row([60, 62, 64], 61)
    assert excinfo.value.pitch == 61
