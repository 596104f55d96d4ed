"""

TextAlignmentEngine - horizontal placement of finished lines.

Supports:
- left: left edge on the left margin (plus the indent on a paragraph's first line)
- center: centered in the usable width
- right: right edge on the right margin
- distributed: uniform gaps between runs so the line spans the usable width

Justified and default alignment are laid out as left.

"""

from __future__ import annotations

import logging

from ..utils.enums import ParagraphAlignment
from .context import ParagraphState
from .primitives import LineGroup

logger = logging.getLogger(__name__)


class TextAlignmentEngine:
    """
    Translates the geometry of one line according to its paragraph alignment.
    """

    def __init__(self, max_width: float) -> None:
        self.max_width = max_width

    @property
    def bounded(self) -> bool:
        return self.max_width > 0

    def usable_width(self, paragraph: ParagraphState) -> float:
        """Width between the margins; zero for unbounded text."""
        if not self.bounded:
            return 0.0
        return max(0.0, self.max_width - paragraph.left_margin - paragraph.right_margin)

    def align_line(self, line: LineGroup, paragraph: ParagraphState) -> None:
        bbox = line.bbox()
        if bbox is None:
            return

        alignment = paragraph.alignment
        usable = self.usable_width(paragraph)

        if alignment == ParagraphAlignment.CENTER:
            dx = paragraph.left_margin + (usable - bbox.width) / 2 - bbox.min_x
        elif alignment == ParagraphAlignment.RIGHT:
            dx = paragraph.left_margin + usable - bbox.max_x
        elif alignment == ParagraphAlignment.DISTRIBUTED:
            self._distribute(line, usable)
            bbox = line.bbox()
            dx = paragraph.left_margin - bbox.min_x
        else:
            target = paragraph.left_margin
            if line.first_in_paragraph:
                target += paragraph.indent
            dx = target - bbox.min_x

        line.translate(dx, 0.0)

    def _distribute(self, line: LineGroup, usable: float) -> None:
        runs = [run for run in line.runs if run.bbox() is not None]
        if len(runs) < 2 or not self.bounded:
            return
        runs.sort(key=lambda run: run.bbox().min_x)
        span = line.bbox().width
        gap = (usable - span) / (len(runs) - 1)
        if gap < 0:
            logger.debug(f"Line {line.index} wider than usable width, not distributed")
            return
        for k, run in enumerate(runs):
            run.translate(gap * k, 0.0)
