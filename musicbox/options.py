from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional, Tuple

from .geometry import JoinStyle


DEFAULT_PITCHES: Tuple[int, ...] = (
    40, 42, 44, 45, 46, 47, 48, 49, 50, 51, 52, 53, 54, 55, 56,
    57, 58, 59, 60, 61, 62, 63, 64, 66, 68, 69, 71, 73, 78, 80,
)

# Fields that must be strictly positive; every other float field may be zero.
POSITIVE_FIELDS = {"tape_height", "hole_diameter", "page_width", "page_height", "stretch"}


@dataclass(frozen=True)
class LayoutOptions:
    """Everything that shapes a tape layout.  All measurements are in mm."""

    track_num: int = 1
    pitches: Tuple[int, ...] = DEFAULT_PITCHES
    tape_height: float = 68.6
    interior_margin_top: float = 6.0
    interior_margin_bottom: float = 5.0
    interior_margin_left: float = 20.0
    interior_margin_right: float = 20.0
    gap: float = 10.0
    hole_diameter: float = 2.4
    page_width: float = 297.0
    page_height: float = 210.0
    margin_left: float = 10.0
    margin_top: float = 10.0
    margin_right: float = 10.0
    margin_bottom: float = 10.0
    cut_stroke_width: float = 0.08
    cut_color: str = "red"
    engrave_color: str = "black"
    stretch: float = 16.0  # mm per beat
    lead_in_width: float = 15.0
    lead_in_height: float = 35.0
    num_zig_zags: int = 5
    join_width: float = 5.0
    join_style: JoinStyle = JoinStyle.ZIGZAG
    title: str = ""
    font_file: Optional[str] = field(default=None)

    @property
    def hole_radius(self) -> float:
        return self.hole_diameter / 2.0

    @property
    def cut_hole_radius(self) -> float:
        """Radius to cut so the finished hole, after kerf, has `hole_diameter`."""

        return self.hole_radius - self.cut_stroke_width / 2.0

    @property
    def row_spacing(self) -> float:
        usable = self.tape_height - self.interior_margin_top - self.interior_margin_bottom
        return usable / (len(self.pitches) - 1)

    @property
    def effective_join_width(self) -> float:
        return self.join_style.effective_width(self.join_width)

    @property
    def usable_page_width(self) -> float:
        return self.page_width - self.margin_left - self.margin_right

    def time_to_width(self, ticks: int, division: int) -> float:
        return ticks * self.stretch / division


def _number(value: object, *, where: str, positive: bool = False) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{where} must be a number")
    if positive and value <= 0:
        raise ValueError(f"{where} must be positive")
    if value < 0:
        raise ValueError(f"{where} must not be negative")
    return float(value)


def _int_at_least(value: object, *, where: str, low: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{where} must be an integer")
    if value < low:
        raise ValueError(f"{where} must be at least {low}")
    return value


def _parse_pitches(value: object) -> Tuple[int, ...]:
    if not isinstance(value, (list, tuple)):
        raise ValueError("pitches must be an array")
    if len(value) < 2:
        raise ValueError("pitches must contain at least 2 entries")
    parsed = []
    for idx, pitch in enumerate(value):
        where = f"pitches[{idx}]"
        if not isinstance(pitch, int) or isinstance(pitch, bool):
            raise ValueError(f"{where} must be an integer")
        if not 0 <= pitch <= 127:
            raise ValueError(f"{where} must be in [0, 127]")
        parsed.append(pitch)
    return tuple(parsed)


def _optional_str(value: object, *, where: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or not value:
        raise ValueError(f"{where} must be a non-empty string when provided")
    return value


def validate_layout_options(options: LayoutOptions) -> LayoutOptions:
    """Check the constraints every `LayoutOptions` must meet, however it was built."""

    for name in sorted(POSITIVE_FIELDS):
        if getattr(options, name) <= 0:
            raise ValueError(f"{name} must be positive")
    if len(options.pitches) < 2:
        raise ValueError("pitches must contain at least 2 entries")
    if options.num_zig_zags < 1:
        raise ValueError("num_zig_zags must be at least 1")
    if options.cut_stroke_width >= options.hole_diameter:
        raise ValueError("cut_stroke_width must be smaller than hole_diameter")
    if options.interior_margin_top + options.interior_margin_bottom >= options.tape_height:
        raise ValueError("interior margins leave no room for rows on the tape")
    if options.lead_in_height > options.tape_height:
        raise ValueError("lead_in_height must not exceed tape_height")
    if options.page_height - options.margin_top - options.margin_bottom < options.tape_height:
        raise ValueError("page is too short to hold a single strip of tape")
    if options.usable_page_width - options.effective_join_width <= 0:
        raise ValueError("page is too narrow to hold a strip between its margins")
    return options


def parse_layout_options(data: object) -> LayoutOptions:
    """Build `LayoutOptions` from a JSON-like mapping of field names.

    Missing keys keep their defaults; unknown keys are rejected.
    """

    if not isinstance(data, dict):
        raise ValueError("options must be an object")
    known = {f.name: f for f in fields(LayoutOptions)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ValueError(f"unknown option(s): {', '.join(unknown)}")

    values: dict = {}
    for name, raw in data.items():
        if name == "pitches":
            values[name] = _parse_pitches(raw)
        elif name == "join_style":
            values[name] = JoinStyle.parse(raw)
        elif name == "track_num":
            values[name] = _int_at_least(raw, where=name, low=0)
        elif name == "num_zig_zags":
            values[name] = _int_at_least(raw, where=name, low=1)
        elif name in ("title", "cut_color", "engrave_color"):
            if not isinstance(raw, str):
                raise ValueError(f"{name} must be a string")
            values[name] = raw
        elif name == "font_file":
            values[name] = _optional_str(raw, where=name)
        else:
            values[name] = _number(raw, where=name, positive=name in POSITIVE_FIELDS)

    return validate_layout_options(LayoutOptions(**values))


def load_layout_options(path: Path | str) -> LayoutOptions:
    options_path = Path(path).expanduser().resolve()
    payload = json.loads(options_path.read_text(encoding="utf-8"))
    return parse_layout_options(payload)
