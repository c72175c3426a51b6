from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from .geometry import Point
from .layout import Page


class PageCanvas(Protocol):
    """Drawing surface a renderer exposes to `render_pages`."""

    def begin_page(self, index: int) -> None: ...

    def draw_polygon(self, points: Sequence[Point]) -> None: ...

    def draw_circle(self, center: Point, radius: float) -> None: ...

    def draw_text(self, position: Point, text: str, font_size: float) -> None: ...

    def finish(self) -> None: ...


def render_pages(pages: Iterable[Page], canvas: PageCanvas) -> None:
    """Replay a layout onto `canvas`, one outline per strip then its texts and holes."""

    for index, page in enumerate(pages):
        canvas.begin_page(index)
        for strip in page.strips:
            canvas.draw_polygon(strip.outline)
            for text in strip.texts:
                canvas.draw_text(text.position, text.text, text.font_size)
            for hole in strip.holes:
                canvas.draw_circle(hole, strip.hole_radius)
    canvas.finish()
