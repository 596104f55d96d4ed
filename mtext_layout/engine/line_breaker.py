"""Word level line breaking for the MText processor."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from .context import FormattingContext, ParagraphState
from .glyph_builder import GlyphRunBuilder

logger = logging.getLogger(__name__)

# Tolerance for words that fill the line exactly
FIT_EPSILON = 1e-9


@dataclass(slots=True)
class WrapDecision:
    width: float
    wrap: bool = False


class LineBreaker:
    """Greedy breaker that moves whole words to the next line.

    A word is measured before any of its glyphs is emitted; words are never
    split, and a word wider than an empty line stays on that line.
    """

    def __init__(self, builder: GlyphRunBuilder, max_width: float) -> None:
        self.builder = builder
        self.max_width = max_width

    @property
    def bounded(self) -> bool:
        return self.max_width > 0

    def usable_width(self, paragraph: ParagraphState) -> float:
        if not self.bounded:
            return math.inf
        return max(0.0, self.max_width - paragraph.left_margin - paragraph.right_margin)

    def check_word(
        self,
        word: str,
        context: FormattingContext,
        h_offset: float,
        paragraph: ParagraphState,
        line_has_content: bool,
        ignore_tracking: bool = False,
    ) -> WrapDecision:
        width = self.builder.measure(word, context, ignore_tracking)
        if not line_has_content or not self.bounded:
            return WrapDecision(width)
        if h_offset + width > self.usable_width(paragraph) + FIT_EPSILON:
            logger.debug(f"Line break before {word!r}: {h_offset:.3f} + {width:.3f} exceeds usable width")
            return WrapDecision(width, wrap=True)
        return WrapDecision(width)
