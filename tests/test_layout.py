from pathlib import Path
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from musicbox.errors import EmptyTrack, InvalidNote
from musicbox.geometry import JoinStyle, Point
from musicbox.layout import layout, layout_notes
from musicbox.notes import Meta, Note, NoteOn, NoteSequence, TrackEvent
from musicbox.options import LayoutOptions

PITCHES = tuple(range(55, 84))  # 29 rows, pitch 60 on row 5


def _sequence(beats: list[tuple[int, int]], division: int = 96) -> NoteSequence:
    """One-track sequence from (beat, pitch) pairs."""

    events = []
    last = 0
    for beat, pitch in sorted(beats):
        tick = beat * division
        events.append(TrackEvent(delta_time=tick - last, payload=NoteOn(pitch)))
        last = tick
    return NoteSequence(tracks=(tuple(events),), division=division)


def _options(**overrides) -> LayoutOptions:
    values = dict(track_num=0, pitches=PITCHES)
    values.update(overrides)
    return LayoutOptions(**values)


def _long_tune() -> NoteSequence:
    # 40 beats at 16 mm each: 624 mm from first to last note, three strips.
    return _sequence([(beat, 60 + beat % 12) for beat in range(40)])


def test_single_note_lands_after_lead_in() -> None:
    options = _options(margin_top=0.0)
    sequence = NoteSequence(
        tracks=((TrackEvent(96, Meta("marker")), TrackEvent(0, NoteOn(60))),),
        division=96,
    )

    pages = layout(sequence, options)

    assert len(pages) == 1
    assert len(pages[0].strips) == 1
    strip = pages[0].strips[0]
    assert len(strip.holes) == 1
    x, y = strip.holes[0]
    assert x == pytest.approx(options.margin_left + 15 + 20 + 1.2)
    assert y == pytest.approx(5 * (68.6 - 6 - 5) / 28 + 6, abs=1e-6)
    assert y == pytest.approx(16.285714, abs=1e-6)


def test_hole_rows_follow_pitch_list_position() -> None:
    options = _options(pitches=(72, 60, 64), margin_top=0.0)
    pages = layout(_sequence([(0, 60), (1, 64), (2, 72)]), options)

    ys = [y for _, y in pages[0].strips[0].holes]
    spacing = options.row_spacing
    assert ys == pytest.approx([6 + spacing, 6 + 2 * spacing, 6.0])


def test_holes_are_kerf_compensated() -> None:
    options = _options(cut_stroke_width=0.2, hole_diameter=3.0)
    pages = layout(_long_tune(), options)
    for page in pages:
        for strip in page.strips:
            assert strip.hole_radius == pytest.approx(1.5 - 0.1)


def test_long_tune_splits_across_strips_and_pages() -> None:
    pages = layout(_long_tune(), _options())

    assert [len(page.strips) for page in pages] == [2, 1]
    first, second = pages[0].strips
    (third,) = pages[1].strips

    # Stacked strips on one page, restarting at the top of the next page.
    assert first.outline[0] == Point(10.0, 10.0)
    assert second.outline[0] == Point(10.0, pytest.approx(10.0 + 68.6 + 10.0))
    assert third.outline[0] == Point(10.0, 10.0)


def test_holes_within_strip_are_time_ordered_and_on_the_strip() -> None:
    options = _options()
    pages = layout(_long_tune(), options)
    right_limit = options.page_width - options.margin_right
    radius = options.hole_radius

    for page in pages:
        for strip in page.strips:
            xs = [x for x, _ in strip.holes]
            assert xs == sorted(xs)
            assert all(x + radius >= options.margin_left for x in xs)
            assert all(x - radius <= right_limit for x in xs)


def test_every_note_gets_a_hole() -> None:
    pages = layout(_long_tune(), _options())
    total = sum(len(strip.holes) for page in pages for strip in page.strips)
    assert total >= 40


def test_first_strip_has_lead_in_outline() -> None:
    options = _options()
    first = layout(_long_tune(), options).pop(0).strips[0]

    assert first.outline[:3] == (
        Point(10.0, 10.0),
        Point(10.0, pytest.approx(10.0 + 68.6 - 35.0)),
        Point(25.0, pytest.approx(78.6)),
    )
    # Right side is the reversed zig-zag at the join.
    assert first.outline[3] == Point(282.0, pytest.approx(78.6))
    assert first.outline[-1] == Point(282.0, 10.0)
    assert len(first.outline) == 3 + 11


def test_middle_strip_has_zig_zag_on_both_sides() -> None:
    middle = layout(_long_tune(), _options())[0].strips[1]
    assert len(middle.outline) == 22
    assert middle.outline[1].x == 15.0
    assert middle.outline[11].x == 282.0


def test_last_strip_is_only_as_long_as_its_notes() -> None:
    options = _options()
    last = layout(_long_tune(), options)[-1].strips[-1]

    # Beat 39 is 624 mm in; strip 3 starts after first + one middle strip.
    last_x = 624.0 - (277 - 36.2 - 5) - (277 - 5)
    right_edge = 10.0 + last_x + 20.0 + 1.2
    assert last.outline[-2] == Point(pytest.approx(right_edge), pytest.approx(78.6))
    assert last.outline[-1] == Point(pytest.approx(right_edge), 10.0)
    assert last.holes[-1].x == pytest.approx(10.0 + last_x)


def test_only_strip_has_lead_in_and_square_end() -> None:
    strip = layout(_sequence([(0, 60), (4, 62)]), _options())[0].strips[0]
    assert len(strip.outline) == 5
    assert strip.outline[-1].x == strip.outline[-2].x


@pytest.mark.parametrize(
    "style,expected_points",
    [(JoinStyle.STRAIGHT, 4), (JoinStyle.DIAGONAL, 4), (JoinStyle.ZIGZAG, 22)],
)
def test_join_style_shapes_middle_strip(style: JoinStyle, expected_points: int) -> None:
    options = _options(join_style=style)
    middle = layout(_long_tune(), options)[0].strips[1]
    assert len(middle.outline) == expected_points


def test_diagonal_join_leans_by_join_width() -> None:
    middle = layout(_long_tune(), _options(join_style=JoinStyle.DIAGONAL))[0].strips[1]
    top_left, bottom_left = middle.outline[:2]
    assert bottom_left.x - top_left.x == pytest.approx(5.0)
    assert bottom_left.y - top_left.y == pytest.approx(68.6)


def test_labels_name_the_strip() -> None:
    pages = layout(_long_tune(), _options(title="Waltz"))
    strips = [strip for page in pages for strip in page.strips]

    assert [s.texts[0].text for s in strips] == [
        "Waltz (1 of 3)",
        "Waltz (2 of 3)",
        "Waltz (3 of 3)",
    ]
    assert strips[0].texts[0].position == Point(25.0, 13.0)
    assert strips[1].texts[0].position == Point(16.0, pytest.approx(88.6 + 3.0))
    assert all(s.texts[0].font_size == 3.0 for s in strips)


def test_no_title_means_no_labels() -> None:
    pages = layout(_long_tune(), _options())
    assert all(not strip.texts for page in pages for strip in page.strips)


def test_note_outside_pitch_list_fails_whole_layout() -> None:
    with pytest.raises(InvalidNote) as excinfo:
        layout(_sequence([(0, 60), (50, 61)]), _options(pitches=(60, 62, 64)))
    assert excinfo.value.pitch == 61


def test_empty_track_fails() -> None:
    sequence = NoteSequence(tracks=((TrackEvent(0, Meta("text")),),), division=96)
    with pytest.raises(EmptyTrack):
        layout(sequence, _options())


def test_layout_is_deterministic() -> None:
    assert layout(_long_tune(), _options()) == layout(_long_tune(), _options())


def test_layout_notes_accepts_normalized_notes() -> None:
    notes = [Note.from_pitch(0, 60), Note.from_pitch(96, 62)]
    pages = layout_notes(notes, 96, _options())
    assert len(pages[0].strips[0].holes) == 2
