"""Write a layout as one SVG document per page.

Cut lines are stroked at the cut width.  Each strip outline is drawn at
twice that width inside a clip path of the outline itself, so only the
outer half of the stroke survives and, with a stroke equal to the kerf, the
cut strip comes out at exactly its nominal size.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, TextIO
from xml.sax.saxutils import escape

from reportlab.lib import colors

from .geometry import Point
from .layout import Page
from .options import LayoutOptions
from .render import render_pages

StreamFactory = Callable[[int], TextIO]


def css_rgba(value: str) -> str:
    """Convert any CSS colour reportlab understands to ``rgba(r,g,b,a)``."""

    color = colors.toColor(value)
    r, g, b = (round(channel * 255) for channel in (color.red, color.green, color.blue))
    return f"rgba({r},{g},{b},{color.alpha:.2f})"


def polygon_element(points: Sequence[Point]) -> str:
    coords = " ".join(f"{x:.2f},{y:.2f}" for x, y in points)
    return f'<polygon points="{coords}"/>'


class SvgCanvas:
    def __init__(
        self,
        options: LayoutOptions,
        make_output_stream: StreamFactory,
        *,
        close_streams: bool = True,
    ) -> None:
        self.options = options
        self.make_output_stream = make_output_stream
        self.close_streams = close_streams
        self.cut_color = css_rgba(options.cut_color)
        self.engrave_color = css_rgba(options.engrave_color)
        self._output: Optional[TextIO] = None
        self._strip_open = False
        self._strip_count = 0

    def _write(self, *lines: str) -> None:
        if self._output is None:
            raise RuntimeError("begin_page() must be called first")
        for line in lines:
            self._output.write(line + "\n")

    def _end_strip(self) -> None:
        if self._strip_open:
            self._write("</g>")
            self._strip_open = False

    def _end_page(self) -> None:
        if self._output is None:
            return
        self._end_strip()
        self._write("</g>", "</svg>")
        self._output.flush()
        if self.close_streams:
            self._output.close()
        self._output = None

    def begin_page(self, index: int) -> None:
        self._end_page()
        self._output = self.make_output_stream(index)
        width = self.options.page_width
        height = self.options.page_height
        self._write(
            '<?xml version="1.0" encoding="UTF-8" ?>',
            '<svg xmlns="http://www.w3.org/2000/svg" version="1.1" '
            f'width="{width:.2f}mm" height="{height:.2f}mm" '
            f'viewBox="0 0 {width:.2f} {height:.2f}">',
            f'<g fill="none" stroke-width="{self.options.cut_stroke_width:.2f}" '
            f'stroke="{self.cut_color}">',
        )

    def draw_polygon(self, points: Sequence[Point]) -> None:
        self._end_strip()
        clip_id = f"strip_{self._strip_count}_border"
        self._strip_count += 1
        outline = polygon_element(points)
        self._write(
            f'<defs><clipPath id="{clip_id}">',
            outline,
            "</clipPath></defs>",
            f'<g clip-path="url(#{clip_id})">',
            f'<g stroke-width="{self.options.cut_stroke_width * 2.0:.2f}">',
            outline,
            "</g>",
        )
        self._strip_open = True

    def draw_circle(self, center: Point, radius: float) -> None:
        x, y = center
        self._write(f'<circle cx="{x:.2f}" cy="{y:.2f}" r="{radius:.2f}" />')

    def draw_text(self, position: Point, text: str, font_size: float) -> None:
        x, y = position
        self._write(
            f'<text x="{x:.2f}" y="{y:.2f}" font-size="{font_size:.2f}" '
            f'fill="{self.engrave_color}" stroke="none">{escape(text)}</text>'
        )

    def finish(self) -> None:
        self._end_page()


def write_svg(
    pages: List[Page],
    options: LayoutOptions,
    make_output_stream: StreamFactory,
    *,
    close_streams: bool = True,
) -> None:
    render_pages(pages, SvgCanvas(options, make_output_stream, close_streams=close_streams))
