"""Write a layout as a single multi-page PDF with reportlab.

PDF has no clip-and-double-stroke trick that cutters honour reliably, so
strip outlines are grown outward by half the cut width instead: the centre
of the cut then runs half a kerf outside the nominal edge and the strip
keeps its nominal size.
"""

from __future__ import annotations

from typing import BinaryIO, List, Optional, Sequence, Union

from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas
from shapely.geometry import Polygon

from .geometry import Point
from .layout import Page
from .options import LayoutOptions
from .render import render_pages

BUILTIN_FONT = "Times-Roman"
LABEL_FONT = "TapeLabel"


def grow_outline(points: Sequence[Point], distance: float) -> List[Point]:
    """Offset a closed outline outward by `distance` with mitred corners."""

    if distance <= 0:
        return list(points)
    grown = Polygon(points).buffer(distance, join_style="mitre")
    return [Point(x, y) for x, y in grown.exterior.coords[:-1]]


class PdfCanvas:
    def __init__(self, options: LayoutOptions, output: Union[str, BinaryIO]) -> None:
        self.options = options
        self.canvas = canvas.Canvas(
            output, pagesize=(options.page_width * mm, options.page_height * mm)
        )
        if options.title:
            self.canvas.setTitle(options.title)
        self.cut_color = colors.toColor(options.cut_color)
        self.engrave_color = colors.toColor(options.engrave_color)
        self._font: Optional[str] = None
        self._started = False

    def _pdf_xy(self, point: Point) -> tuple[float, float]:
        x, y = point
        return x * mm, (self.options.page_height - y) * mm

    def _label_font(self) -> str:
        if self._font is None:
            if self.options.font_file:
                pdfmetrics.registerFont(TTFont(LABEL_FONT, self.options.font_file))
                self._font = LABEL_FONT
            else:
                self._font = BUILTIN_FONT
        return self._font

    def begin_page(self, index: int) -> None:
        if self._started:
            self.canvas.showPage()
        self._started = True
        self.canvas.setStrokeColor(self.cut_color)
        self.canvas.setLineWidth(self.options.cut_stroke_width * mm)

    def draw_polygon(self, points: Sequence[Point]) -> None:
        grown = grow_outline(points, self.options.cut_stroke_width / 2.0)
        path = self.canvas.beginPath()
        path.moveTo(*self._pdf_xy(grown[0]))
        for point in grown[1:]:
            path.lineTo(*self._pdf_xy(point))
        path.close()
        self.canvas.drawPath(path, stroke=1, fill=0)

    def draw_circle(self, center: Point, radius: float) -> None:
        x, y = self._pdf_xy(center)
        self.canvas.circle(x, y, radius * mm, stroke=1, fill=0)

    def draw_text(self, position: Point, text: str, font_size: float) -> None:
        x, y = self._pdf_xy(position)
        self.canvas.setFillColor(self.engrave_color)
        self.canvas.setFont(self._label_font(), font_size * mm)
        self.canvas.drawString(x, y, text)

    def finish(self) -> None:
        self.canvas.showPage()
        self.canvas.save()


def write_pdf(pages: List[Page], options: LayoutOptions, output: Union[str, BinaryIO]) -> None:
    render_pages(pages, PdfCanvas(options, output))
