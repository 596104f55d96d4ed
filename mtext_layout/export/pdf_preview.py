"""
PDF preview of laid out MText - outlines, decorations and optional bounds.

Useful for eyeballing layout results; drawing units are scaled so the text
block fits the page.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from reportlab.lib.colors import Color
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from reportlab.pdfgen.canvas import FILL_EVEN_ODD

from ..engine.geometry import BoundingBox, Point
from ..engine.placement import PlacedMText
from ..engine.primitives import LayoutResult
from ..exceptions import RenderingError
from ..utils.color_utils import int_to_unit_rgb
from ..utils.enums import GeometryTag

logger = logging.getLogger(__name__)

PAGE_MARGIN = 36.0
LINE_WIDTH = 0.5


class PdfPreviewRenderer:
    def __init__(
        self,
        output_path: Union[str, Path] = "mtext_preview.pdf",
        pagesize: Tuple[float, float] = A4,
        draw_bbox: bool = True,
        background: Optional[int] = None,
    ):
        """
        Args:
            output_path: Path of the PDF file to write
            pagesize: Page size in points
            draw_bbox: Frame the layout bounding box with a dashed rectangle
            background: Optional 24-bit page background color; white text on a
                white page is otherwise invisible
        """
        self.output_path = str(output_path)
        self.pagesize = pagesize
        self.draw_bbox = draw_bbox
        self.background = background

    def render(self, layout: Union[LayoutResult, PlacedMText]) -> str:
        """Write ``layout`` as a single page PDF and return the output path."""
        if isinstance(layout, PlacedMText):
            layout = layout.layout
        bbox = layout.bbox
        c = canvas.Canvas(self.output_path, pagesize=self.pagesize)

        if self.background is not None:
            c.setFillColor(Color(*int_to_unit_rgb(self.background)))
            c.rect(0, 0, self.pagesize[0], self.pagesize[1], stroke=0, fill=1)

        if bbox is None:
            logger.debug("Empty layout, writing blank preview page")
        else:
            transform = self._fit_transform(bbox)
            self._draw_outlines(c, layout, transform)
            self._draw_decorations(c, layout, transform)
            if self.draw_bbox:
                self._draw_bbox(c, bbox, transform)

        c.showPage()
        try:
            c.save()
        except OSError as exc:
            raise RenderingError(f"Cannot write PDF preview to {self.output_path}", str(exc)) from exc
        logger.info(f"MText preview written to {self.output_path}")
        return self.output_path

    # ------------------------------------------------------------------
    def _fit_transform(self, bbox: BoundingBox):
        page_width, page_height = self.pagesize
        available_w = page_width - 2 * PAGE_MARGIN
        available_h = page_height - 2 * PAGE_MARGIN
        scales = []
        if bbox.width > 0:
            scales.append(available_w / bbox.width)
        if bbox.height > 0:
            scales.append(available_h / bbox.height)
        scale = min(scales) if scales else 1.0

        def transform(point: Point) -> Point:
            return (
                PAGE_MARGIN + (point[0] - bbox.min_x) * scale,
                PAGE_MARGIN + (point[1] - bbox.min_y) * scale,
            )

        return transform

    def _draw_outlines(self, c, layout: LayoutResult, transform) -> None:
        c.setLineWidth(LINE_WIDTH)
        for tag, color, outlines in layout.geometry_groups():
            rgb = Color(*int_to_unit_rgb(color))
            c.setFillColor(rgb)
            c.setStrokeColor(rgb)
            for glyph in outlines:
                if tag is GeometryTag.FILL:
                    path = c.beginPath()
                    for contour in glyph.contours:
                        self._add_contour(path, contour, transform, close=True)
                    c.drawPath(path, stroke=0, fill=1, fillMode=FILL_EVEN_ODD)
                else:
                    for contour in glyph.contours:
                        path = c.beginPath()
                        self._add_contour(path, contour, transform, close=False)
                        c.drawPath(path, stroke=1, fill=0)

    @staticmethod
    def _add_contour(path, contour: Sequence[Point], transform, close: bool) -> None:
        if len(contour) < 2:
            return
        x, y = transform(contour[0])
        path.moveTo(x, y)
        for point in contour[1:]:
            x, y = transform(point)
            path.lineTo(x, y)
        if close:
            path.close()

    def _draw_decorations(self, c, layout: LayoutResult, transform) -> None:
        c.setLineWidth(LINE_WIDTH)
        for run in layout.runs:
            if not run.decorations:
                continue
            c.setStrokeColor(Color(*int_to_unit_rgb(run.color)))
            for segment in run.decorations:
                x1, y1 = transform(segment.start)
                x2, y2 = transform(segment.end)
                c.line(x1, y1, x2, y2)

    def _draw_bbox(self, c, bbox: BoundingBox, transform) -> None:
        x1, y1 = transform((bbox.min_x, bbox.min_y))
        x2, y2 = transform((bbox.max_x, bbox.max_y))
        c.setStrokeColor(Color(0.7, 0.7, 0.7))
        c.setLineWidth(0.25)
        c.setDash([2, 2])
        c.rect(x1, y1, x2 - x1, y2 - y1)
        c.setDash()
