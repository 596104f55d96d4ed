"""

Data structures describing MTextProcessor output.

Every piece of geometry lives in a GlyphRun: the glyphs and decoration
segments emitted for one word or one stacked expression, sharing a color.
Runs are grouped into LineGroups, and the LineGroups of one pass form the
LayoutResult handed to entity placement and renderers.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from ..utils.enums import GeometryTag
from .geometry import BoundingBox, Point, union_boxes

Contour = Tuple[Point, ...]
PointTransform = Callable[[Point], Point]


def _translate_fn(dx: float, dy: float) -> PointTransform:
    return lambda p: (p[0] + dx, p[1] + dy)


###############################################################################
# Leaf geometry
###############################################################################


@dataclass(slots=True)
class PositionedGlyph:
    """Outline of one character in the local layout frame."""

    char: str
    contours: Tuple[Contour, ...]
    tag: GeometryTag
    advance: float = 0.0

    def bbox(self) -> Optional[BoundingBox]:
        return BoundingBox.from_points(p for contour in self.contours for p in contour)

    def transform(self, fn: PointTransform) -> None:
        self.contours = tuple(tuple(fn(p) for p in contour) for contour in self.contours)


class DecorationKind(str, Enum):
    UNDERLINE = "underline"
    OVERLINE = "overline"
    STRIKE_THROUGH = "strike_through"
    STACK_DIVIDER = "stack_divider"


@dataclass(slots=True)
class DecorationSegment:
    """Straight line segment drawn independently of glyph outlines."""

    kind: DecorationKind
    start: Point
    end: Point

    def bbox(self) -> BoundingBox:
        return BoundingBox(
            min(self.start[0], self.end[0]),
            min(self.start[1], self.end[1]),
            max(self.start[0], self.end[0]),
            max(self.start[1], self.end[1]),
        )

    def transform(self, fn: PointTransform) -> None:
        self.start = fn(self.start)
        self.end = fn(self.end)


###############################################################################
# Runs and lines
###############################################################################


@dataclass(slots=True)
class GlyphRun:
    """Glyphs and decorations emitted together with one color."""

    color: int
    glyphs: List[PositionedGlyph] = field(default_factory=list)
    decorations: List[DecorationSegment] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.glyphs and not self.decorations

    def outlines(self, tag: GeometryTag) -> List[PositionedGlyph]:
        return [glyph for glyph in self.glyphs if glyph.tag is tag]

    def bbox(self) -> Optional[BoundingBox]:
        return union_boxes(
            [glyph.bbox() for glyph in self.glyphs] + [d.bbox() for d in self.decorations]
        )

    def transform(self, fn: PointTransform) -> None:
        for glyph in self.glyphs:
            glyph.transform(fn)
        for decoration in self.decorations:
            decoration.transform(fn)

    def translate(self, dx: float, dy: float) -> None:
        if dx == 0 and dy == 0:
            return
        self.transform(_translate_fn(dx, dy))


@dataclass(slots=True)
class LineGroup:
    """Runs laid out on one visual line."""

    index: int
    paragraph_index: int
    first_in_paragraph: bool
    runs: List[GlyphRun] = field(default_factory=list)

    def bbox(self) -> Optional[BoundingBox]:
        return union_boxes(run.bbox() for run in self.runs)

    def translate(self, dx: float, dy: float) -> None:
        for run in self.runs:
            run.translate(dx, dy)

    def transform(self, fn: PointTransform) -> None:
        for run in self.runs:
            run.transform(fn)


###############################################################################
# Pass output
###############################################################################


@dataclass(slots=True)
class LayoutDiagnostics:
    """Counters reported instead of errors."""

    unsupported_chars: Dict[str, int] = field(default_factory=dict)
    missed_fonts: Dict[str, int] = field(default_factory=dict)
    unsupported_text_styles: Dict[str, int] = field(default_factory=dict)
    ignored_commands: Dict[str, int] = field(default_factory=dict)


@dataclass(slots=True)
class LayoutResult:
    total_height: float
    lines: List[LineGroup] = field(default_factory=list)
    diagnostics: LayoutDiagnostics = field(default_factory=LayoutDiagnostics)

    @property
    def runs(self) -> List[GlyphRun]:
        return [run for line in self.lines for run in line.runs]

    @property
    def decorations(self) -> List[DecorationSegment]:
        return [d for run in self.runs for d in run.decorations]

    @property
    def bbox(self) -> Optional[BoundingBox]:
        return union_boxes(line.bbox() for line in self.lines)

    def geometry_groups(self) -> Iterator[Tuple[GeometryTag, int, List[PositionedGlyph]]]:
        """Yield ``(tag, color, outlines)`` batches, fills before strokes within each run."""
        for run in self.runs:
            for tag in (GeometryTag.FILL, GeometryTag.STROKE):
                outlines = run.outlines(tag)
                if outlines:
                    yield tag, run.color, outlines

    def translate(self, dx: float, dy: float) -> None:
        for line in self.lines:
            line.translate(dx, dy)

    def transform(self, fn: PointTransform) -> None:
        for line in self.lines:
            line.transform(fn)
