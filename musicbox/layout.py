"""Lay normalized notes out as cuttable strips of tape on pages.

The output model (`Page` → `Strip` → outline, holes, texts) is the only
thing renderers see.  Coordinates are nominal: outlines trace the exact
strip boundary and hole centres sit on the row lines.  Renderers are
expected to compensate for kerf on outlines themselves (stroke at double
width and clip to the outline, or offset the outline outward by half the
stroke).  Holes already carry the compensated radius in
`Strip.hole_radius`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .geometry import Point
from .notes import Note, NoteSequence, normalize_notes, note_row
from .options import LayoutOptions, validate_layout_options
from .packer import StripPlan, plan_strips

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Text:
    position: Point
    text: str
    font_size: float


@dataclass(frozen=True)
class Strip:
    texts: Tuple[Text, ...]
    outline: Tuple[Point, ...]
    holes: Tuple[Point, ...]
    hole_radius: float


@dataclass(frozen=True)
class Page:
    strips: Tuple[Strip, ...]


def _outline(
    options: LayoutOptions,
    plan: StripPlan,
    strip_num: int,
    left_edge: float,
    right_edge: float,
    top_edge: float,
) -> List[Point]:
    bottom_edge = top_edge + options.tape_height
    join_style = options.join_style
    edge_kwargs = dict(
        tape_height=options.tape_height,
        join_width=options.join_width,
        num_zig_zags=options.num_zig_zags,
    )

    points: List[Point] = []
    if plan.is_first(strip_num):
        lead_in_top = top_edge + (options.tape_height - options.lead_in_height)
        points.append(Point(left_edge, top_edge))
        points.append(Point(left_edge, lead_in_top))
        points.append(Point(left_edge + options.lead_in_width, bottom_edge))
    else:
        points.extend(join_style.edge(left_edge, top_edge, **edge_kwargs))

    if plan.is_last(strip_num):
        points.append(Point(right_edge, bottom_edge))
        points.append(Point(right_edge, top_edge))
    else:
        points.extend(reversed(join_style.edge(right_edge, top_edge, **edge_kwargs)))
    return points


def _label(
    options: LayoutOptions, plan: StripPlan, strip_num: int, left_edge: float, top_edge: float
) -> Tuple[Text, ...]:
    if not options.title:
        return ()
    if plan.is_first(strip_num):
        x = left_edge + options.lead_in_width
    else:
        x = left_edge + options.effective_join_width + 1.0
    font_size = options.interior_margin_top / 2.0
    return (
        Text(
            position=Point(x, top_edge + options.interior_margin_top / 2.0),
            text=f"{options.title} ({strip_num + 1} of {plan.strip_count})",
            font_size=font_size,
        ),
    )


def build_strip(
    strip_num: int,
    plan: StripPlan,
    notes: Sequence[Note],
    rows: Sequence[int],
    division: int,
    options: LayoutOptions,
) -> Strip:
    """Build the outline, label and holes of one strip.

    `notes` must be time-ordered and `rows[i]` is the tape row of
    `notes[i]`.  Holes are emitted for every note whose circle reaches into
    the strip, up to the far edge of the strip's right-hand join.
    """

    _, strip_on_page = plan.placement(strip_num)
    radius = options.hole_radius
    offset = plan.offset(strip_num)
    left_edge = options.margin_left
    top_edge = options.margin_top + strip_on_page * (options.tape_height + options.gap)
    right_limit = options.page_width - options.margin_right

    if plan.is_last(strip_num):
        last_x = options.time_to_width(notes[-1].time, division) + offset
        right_edge = left_edge + last_x + options.interior_margin_right + radius
    else:
        right_edge = right_limit - options.effective_join_width

    holes: List[Point] = []
    row_spacing = options.row_spacing
    for note, row in zip(notes, rows):
        x = options.time_to_width(note.time, division) + offset
        if x + radius < 0:
            continue
        if left_edge + x - radius > right_limit:
            # Notes are time-ordered, so nothing later can land on this strip.
            break
        y = row * row_spacing + options.interior_margin_top
        holes.append(Point(left_edge + x, top_edge + y))

    logger.debug("strip %d: %d hole(s), right edge %.2f", strip_num + 1, len(holes), right_edge)
    return Strip(
        texts=_label(options, plan, strip_num, left_edge, top_edge),
        outline=tuple(_outline(options, plan, strip_num, left_edge, right_edge, top_edge)),
        holes=tuple(holes),
        hole_radius=options.cut_hole_radius,
    )


def layout_notes(
    notes: Sequence[Note], division: int, options: LayoutOptions
) -> List[Page]:
    """Lay out already-normalized notes.  Every note must be in the pitch list."""

    if not notes:
        raise ValueError("need at least one note")
    validate_layout_options(options)
    rows = [note_row(options.pitches, note.pitch) for note in notes]
    total_width = options.time_to_width(notes[-1].time, division)
    plan = plan_strips(total_width, options)
    logger.debug(
        "total width %.2f mm -> %d strip(s), %d per page, %d page(s)",
        total_width,
        plan.strip_count,
        plan.strips_per_page,
        plan.page_count,
    )

    return [
        Page(
            strips=tuple(
                build_strip(strip_num, plan, notes, rows, division, options)
                for strip_num in plan.strips_on_page(page_num)
            )
        )
        for page_num in range(plan.page_count)
    ]


def layout(sequence: NoteSequence, options: LayoutOptions) -> List[Page]:
    """Normalize the selected track of `sequence` and lay it out as pages."""

    notes = normalize_notes(sequence, options.track_num)
    return layout_notes(notes, sequence.division, options)
