"""
Stacked expression layout (``\\S`` codes).

Fractions put the numerator above and the denominator below the text line,
both centered over the wider of the two, with a horizontal rule for the
``/`` and ``#`` dividers. ``^`` stacks with a single populated side are
superscripts or subscripts drawn at 70% size.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from ..parser.tokens import NBSP, StackData
from ..utils.enums import FlowDirection
from .context import FormattingContext
from .glyph_builder import GlyphRunBuilder
from .primitives import DecorationKind, DecorationSegment, PositionedGlyph

logger = logging.getLogger(__name__)

RULE_DIVIDERS = ("/", "#")
SCRIPT_DIVIDER = "^"

SCRIPT_SCALE = 0.7
SUPERSCRIPT_OFFSET = 0.1
SUBSCRIPT_OFFSET = -0.6
# Fraction parts hang from these offsets of the vertical cursor, and the rule
# sits this far above the baseline of the surrounding text. Relative to the
# cursor the rule (-0.7 x size) stays between the numerator bottom (-0.65)
# and the denominator top (-0.75).
NUMERATOR_OFFSET = 0.35
DENOMINATOR_OFFSET = -0.75
RULE_OFFSET = 0.3


@dataclass(slots=True)
class StackLayout:
    """Geometry of one stacked expression and the cursor advance it needs."""

    glyphs: List[PositionedGlyph] = field(default_factory=list)
    decorations: List[DecorationSegment] = field(default_factory=list)
    advance: float = 0.0
    stack_width: float = 0.0
    numerator_width: float = 0.0
    denominator_width: float = 0.0
    font_size: float = 0.0


class StackedExpressionLayout:
    def __init__(self, builder: GlyphRunBuilder, flow_direction: FlowDirection) -> None:
        self.builder = builder
        self.flow_direction = flow_direction

    def _baseline(self, v_offset: float, glyph_size: float) -> float:
        if self.flow_direction == FlowDirection.BOTTOM_TO_TOP:
            return v_offset
        return v_offset - glyph_size

    def layout(self, stack: StackData, context: FormattingContext, h_offset: float, v_offset: float) -> StackLayout:
        # Measure with tracking forced to 1 so letter spacing does not inflate the stack
        measure_context = context.copy()
        measure_context.word_space = 1.0
        numerator_width = self.builder.measure(stack.numerator, measure_context)
        denominator_width = self.builder.measure(stack.denominator, measure_context)
        stack_width = max(numerator_width, denominator_width)

        result = StackLayout(
            stack_width=stack_width,
            numerator_width=numerator_width,
            denominator_width=denominator_width,
            font_size=context.font_size,
        )
        size = context.font_size

        if stack.divider == SCRIPT_DIVIDER and bool(stack.numerator) != bool(stack.denominator):
            script_context = measure_context.copy()
            script_context.font_size_scale_factor *= SCRIPT_SCALE
            script_context.font_size = size * SCRIPT_SCALE
            if stack.numerator:
                text, width, offset = stack.numerator, numerator_width, SUPERSCRIPT_OFFSET
            else:
                text, width, offset = stack.denominator, denominator_width, SUBSCRIPT_OFFSET
            baseline = self._baseline(v_offset + size * offset, script_context.font_size)
            self._emit(text, script_context, h_offset, baseline, result)
            result.font_size = script_context.font_size
            result.advance = width + context.blank_width
            return result

        if not stack.numerator and not stack.denominator:
            result.advance = context.blank_width
            return result

        numerator_x = h_offset + (stack_width - numerator_width) / 2
        denominator_x = h_offset + (stack_width - denominator_width) / 2
        self._emit(stack.numerator, measure_context, numerator_x,
                   self._baseline(v_offset + size * NUMERATOR_OFFSET, size), result)
        self._emit(stack.denominator, measure_context, denominator_x,
                   self._baseline(v_offset + size * DENOMINATOR_OFFSET, size), result)

        if stack.divider in RULE_DIVIDERS:
            y = self._baseline(v_offset, size) + size * RULE_OFFSET
            result.decorations.append(
                DecorationSegment(DecorationKind.STACK_DIVIDER, (h_offset, y), (h_offset + stack_width, y))
            )

        result.advance = stack_width + context.blank_width
        return result

    def _emit(self, text: str, context: FormattingContext, x: float, baseline: float, result: StackLayout) -> None:
        for char in text:
            if char == NBSP:
                x += context.blank_width
                continue
            shape = self.builder.resolve_shape(char, context.font, context.font_size, record=True)
            if shape is None:
                x += context.blank_width
                continue
            glyph, decorations, advance = self.builder.build(shape, context, (x, baseline))
            result.glyphs.append(glyph)
            result.decorations.extend(decorations)
            x += advance
