"""Split a tape's musical width into page-width strips and pages.

A strip's *offset* maps the continuous timeline onto that strip's local x
axis: ``local_x = time_width + offset``.  The first strip pushes notes right
past the lead-in; every later strip pulls them left by the width already
consumed, so a note's absolute time alone decides which strip shows it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from .options import LayoutOptions


@dataclass(frozen=True)
class StripPlan:
    first_width: float
    middle_width: float
    last_width: float
    only_width: float
    lead_offset: float
    strip_count: int
    strips_per_page: int

    @property
    def page_count(self) -> int:
        return -(-self.strip_count // self.strips_per_page)

    def is_first(self, strip_num: int) -> bool:
        return strip_num == 0

    def is_last(self, strip_num: int) -> bool:
        return strip_num + 1 == self.strip_count

    def offset(self, strip_num: int) -> float:
        if strip_num == 0:
            return self.lead_offset
        return -(self.first_width + (strip_num - 1) * self.middle_width)

    def placement(self, strip_num: int) -> Tuple[int, int]:
        """Return ``(page_num, strip_on_page)`` for a strip index."""

        return divmod(strip_num, self.strips_per_page)

    def strips_on_page(self, page_num: int) -> range:
        start = page_num * self.strips_per_page
        return range(start, min(start + self.strips_per_page, self.strip_count))


def plan_strips(total_width: float, options: LayoutOptions) -> StripPlan:
    """Work out how many strips and pages a tape `total_width` mm long needs."""

    usable = options.usable_page_width
    join_width = options.effective_join_width
    radius = options.hole_radius
    lead_offset = options.lead_in_width + options.interior_margin_left + radius

    first_width = usable - lead_offset - join_width
    middle_width = usable - join_width
    last_width = usable - options.interior_margin_right - radius
    only_width = usable - lead_offset - options.interior_margin_right - radius

    if total_width <= only_width:
        strip_count = 1
    else:
        strip_count = 2 + math.ceil((total_width - first_width - last_width) / middle_width)

    vertical_room = options.page_height - options.margin_top - options.margin_bottom
    strips_per_page = 1 + math.floor(
        (vertical_room - options.tape_height) / (options.gap + options.tape_height)
    )

    return StripPlan(
        first_width=first_width,
        middle_width=middle_width,
        last_width=last_width,
        only_width=only_width,
        lead_offset=lead_offset,
        strip_count=strip_count,
        strips_per_page=strips_per_page,
    )
