"""Filled fonts backed by TrueType / OpenType files read with fontTools."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from fontTools.pens.basePen import BasePen
from fontTools.ttLib import TTFont, TTLibError

from ..exceptions import FontError
from .base import BaseFont, Contour, FontKind, GlyphShape, Point

logger = logging.getLogger(__name__)

_UnitGlyph = Tuple[float, Tuple[Contour, ...]]


class FlatteningPen(BasePen):
    """Pen that flattens quadratic and cubic segments into polygon contours."""

    def __init__(self, glyph_set=None, curve_steps: int = 8) -> None:
        super().__init__(glyphSet=glyph_set)
        self.curve_steps = max(1, int(curve_steps))
        self.contours: List[Contour] = []
        self._current: List[Point] = []

    def _moveTo(self, pt):
        self._flush()
        self._current = [(float(pt[0]), float(pt[1]))]

    def _lineTo(self, pt):
        self._current.append((float(pt[0]), float(pt[1])))

    def _curveToOne(self, pt1, pt2, pt3):
        x0, y0 = self._current[-1]
        for i in range(1, self.curve_steps + 1):
            t = i / self.curve_steps
            mt = 1 - t
            x = mt ** 3 * x0 + 3 * mt ** 2 * t * pt1[0] + 3 * mt * t ** 2 * pt2[0] + t ** 3 * pt3[0]
            y = mt ** 3 * y0 + 3 * mt ** 2 * t * pt1[1] + 3 * mt * t ** 2 * pt2[1] + t ** 3 * pt3[1]
            self._current.append((x, y))

    def _qCurveToOne(self, pt1, pt2):
        x0, y0 = self._current[-1]
        for i in range(1, self.curve_steps + 1):
            t = i / self.curve_steps
            mt = 1 - t
            x = mt ** 2 * x0 + 2 * mt * t * pt1[0] + t ** 2 * pt2[0]
            y = mt ** 2 * y0 + 2 * mt * t * pt1[1] + t ** 2 * pt2[1]
            self._current.append((x, y))

    def _closePath(self):
        if len(self._current) > 1 and self._current[0] == self._current[-1]:
            self._current.pop()
        self._flush()

    def _endPath(self):
        self._flush()

    def _flush(self) -> None:
        if len(self._current) > 1:
            self.contours.append(tuple(self._current))
        self._current = []


class TrueTypeFont(BaseFont):
    """
    Filled font read from a TrueType / OpenType file.

    Glyph outlines are flattened once per character in font units and scaled
    on request. The scale factor makes the capital ``A`` exactly as tall as
    the requested text height, which is how CAD text height is defined.
    """

    kind = FontKind.FILLED
    NOT_FOUND_CHAR = "?"

    def __init__(self, font: Union[TTFont, str, Path], name: Optional[str] = None, curve_steps: int = 8) -> None:
        if isinstance(font, TTFont):
            tt_font = font
            default_name = name or "truetype"
        else:
            path = Path(font)
            try:
                tt_font = TTFont(str(path))
            except (OSError, TTLibError) as exc:
                raise FontError(f"Cannot load font file {path}", str(exc)) from exc
            default_name = path.stem
        super().__init__(name or default_name)

        self._font = tt_font
        self._glyph_set = tt_font.getGlyphSet()
        self._cmap: Dict[int, str] = tt_font.getBestCmap() or {}
        self.units_per_em = float(tt_font["head"].unitsPerEm)
        self.curve_steps = curve_steps
        self._unit_glyphs: Dict[str, Optional[_UnitGlyph]] = {}
        self._scale_factor: Optional[float] = None

    def _unit_glyph(self, char: str) -> Optional[_UnitGlyph]:
        with self._lock:
            if char in self._unit_glyphs:
                return self._unit_glyphs[char]
            glyph_name = self._cmap.get(ord(char))
            unit_glyph: Optional[_UnitGlyph] = None
            if glyph_name is not None and glyph_name in self._glyph_set:
                glyph = self._glyph_set[glyph_name]
                pen = FlatteningPen(self._glyph_set, self.curve_steps)
                glyph.draw(pen)
                unit_glyph = (float(glyph.width), tuple(pen.contours))
            self._unit_glyphs[char] = unit_glyph
            return unit_glyph

    def get_scale_factor(self) -> float:
        if self._scale_factor is None:
            scale_factor = 1.0
            unit_glyph = self._unit_glyph("A")
            if unit_glyph is not None:
                y_max = max((y for contour in unit_glyph[1] for _, y in contour), default=0.0)
                if y_max > 0:
                    scale_factor = self.units_per_em / y_max
            self._scale_factor = scale_factor
        return self._scale_factor

    def get_char_shape(self, char: str, size: float) -> Optional[GlyphShape]:
        unit_glyph = self._unit_glyph(char)
        if unit_glyph is None:
            self.add_unsupported_char(char)
            return None
        advance, unit_contours = unit_glyph
        scale = size / self.units_per_em
        contours = tuple(
            tuple((x * scale, y * scale) for x, y in contour)
            for contour in unit_contours
        )
        return GlyphShape(char=char, width=advance * scale, contours=contours, kind=self.kind)

    def get_not_found_shape(self, size: float) -> Optional[GlyphShape]:
        if self._unit_glyph(self.NOT_FOUND_CHAR) is None:
            return None
        return self.get_char_shape(self.NOT_FOUND_CHAR, size)
