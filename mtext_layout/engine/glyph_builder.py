"""
GlyphRunBuilder - turning characters into positioned outlines.

Looks a character up through the font fallback chain, then applies the
character formatting of the active context: width factor, synthetic bold,
oblique shear (with italic simulated as an extra shear) and the translation
to the pen position. Decoration segments are derived from the pen position
and the advance, not from the outline.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from ..fonts.base import FontKind, GlyphProvider, GlyphShape
from ..parser.tokens import NBSP
from .context import FormattingContext
from .geometry import Point, shear_x
from .primitives import DecorationKind, DecorationSegment, PositionedGlyph

logger = logging.getLogger(__name__)

ITALIC_ANGLE = 15.0

# Synthetic bold draws every contour a second time shifted right by this
# fraction of the text height and widens the advance by the same amount.
BOLD_OFFSET_RATIO = 0.04

UNDERLINE_OFFSET = -0.2
OVERLINE_OFFSET = 1.2
STRIKE_THROUGH_OFFSET = 0.5


def effective_oblique(context: FormattingContext, kind: FontKind) -> float:
    """Shear angle in degrees for glyphs of ``kind`` under ``context``."""
    if not context.italic:
        return context.oblique_angle
    if kind.behavior.italic_adds_to_oblique:
        return context.oblique_angle + ITALIC_ANGLE
    return ITALIC_ANGLE


class GlyphRunBuilder:
    """Builds positioned glyphs for one layout pass."""

    def __init__(self, provider: GlyphProvider, big_font: str = "") -> None:
        self.provider = provider
        self.big_font = big_font or ""
        self.unsupported_chars: Dict[str, int] = {}

    def resolve_shape(self, char: str, font: str, size: float, record: bool = False) -> Optional[GlyphShape]:
        """
        Find a shape for ``char``: primary font, big font, any font, placeholder.

        Each level is only consulted when the previous one returned nothing.
        With ``record`` set, a miss in the primary font is counted in
        ``unsupported_chars``.
        """
        shape = self.provider.get_char_shape(char, font, size)
        if shape is None and record:
            self.unsupported_chars[char] = self.unsupported_chars.get(char, 0) + 1
        if shape is None and self.big_font:
            shape = self.provider.get_char_shape(char, self.big_font, size)
        if shape is None:
            shape = self.provider.get_char_shape(char, "", size)
        if shape is None:
            logger.debug(f"No glyph for {char!r}, using not-found placeholder")
            shape = self.provider.get_not_found_shape(size)
        return shape

    @staticmethod
    def bold_offset(context: FormattingContext) -> float:
        return context.font_size * BOLD_OFFSET_RATIO if context.bold else 0.0

    def advance(self, shape: GlyphShape, context: FormattingContext, ignore_tracking: bool = False) -> float:
        advance = shape.width * context.width_factor
        if not ignore_tracking:
            advance *= context.word_space
        return advance + self.bold_offset(context)

    def char_advance(self, char: str, context: FormattingContext, ignore_tracking: bool = False) -> float:
        """Pen advance of one character of a word, as layout will apply it."""
        if char == NBSP:
            return context.blank_width
        shape = self.resolve_shape(char, context.font, context.font_size)
        if shape is None:
            return context.blank_width
        return self.advance(shape, context, ignore_tracking)

    def measure(self, text: str, context: FormattingContext, ignore_tracking: bool = False) -> float:
        """Total advance of ``text`` without emitting geometry."""
        return sum(self.char_advance(char, context, ignore_tracking) for char in text)

    def build(
        self,
        shape: GlyphShape,
        context: FormattingContext,
        origin: Point,
        ignore_tracking: bool = False,
    ) -> Tuple[PositionedGlyph, List[DecorationSegment], float]:
        """
        Position ``shape`` with its baseline-left corner at ``origin``.

        Returns the glyph, its decoration segments and the pen advance.
        """
        x0, y0 = origin
        width_factor = context.width_factor
        oblique = effective_oblique(context, shape.kind)
        bold = self.bold_offset(context)

        positioned = []
        for shift in ((0.0, bold) if bold else (0.0,)):
            for contour in shape.contours:
                points = []
                for x, y in contour:
                    px, py = shear_x((x * width_factor + shift, y), oblique)
                    points.append((px + x0, py + y0))
                positioned.append(tuple(points))

        advance = self.advance(shape, context, ignore_tracking)
        glyph = PositionedGlyph(
            char=shape.char,
            contours=tuple(positioned),
            tag=shape.kind.tag,
            advance=advance,
        )
        return glyph, self.decorations(context, origin, advance), advance

    @staticmethod
    def decorations(context: FormattingContext, origin: Point, advance: float) -> List[DecorationSegment]:
        x0, baseline = origin
        height = context.font_size
        segments = []
        for enabled, kind, offset in (
            (context.underline, DecorationKind.UNDERLINE, UNDERLINE_OFFSET),
            (context.overline, DecorationKind.OVERLINE, OVERLINE_OFFSET),
            (context.strike_through, DecorationKind.STRIKE_THROUGH, STRIKE_THROUGH_OFFSET),
        ):
            if enabled:
                y = baseline + height * offset
                segments.append(DecorationSegment(kind, (x0, y), (x0 + advance, y)))
        return segments
