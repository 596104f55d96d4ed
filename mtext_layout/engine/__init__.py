"""Layout engine: formatting interpreter, line driver, stacks, alignment and placement."""

from .context import ContextStack, FormattingContext, LineCursor, ParagraphState
from .geometry import BoundingBox, Vector3
from .glyph_builder import GlyphRunBuilder
from .line_breaker import LineBreaker
from .options import MTextFormatOptions, TextStyle
from .placement import EntityPlacement, PlacedMText, alignment_for_attachment, calculate_anchor_point
from .primitives import (
    DecorationKind,
    DecorationSegment,
    GlyphRun,
    LayoutDiagnostics,
    LayoutResult,
    LineGroup,
    PositionedGlyph,
)
from .processor import MTextProcessor
from .stack_layout import StackedExpressionLayout
from .text_alignment import TextAlignmentEngine

__all__ = [
    "BoundingBox",
    "ContextStack",
    "DecorationKind",
    "DecorationSegment",
    "EntityPlacement",
    "FormattingContext",
    "GlyphRun",
    "GlyphRunBuilder",
    "LayoutDiagnostics",
    "LayoutResult",
    "LineBreaker",
    "LineCursor",
    "LineGroup",
    "MTextFormatOptions",
    "MTextProcessor",
    "ParagraphState",
    "PlacedMText",
    "PositionedGlyph",
    "StackedExpressionLayout",
    "TextAlignmentEngine",
    "TextStyle",
    "Vector3",
    "alignment_for_attachment",
    "calculate_anchor_point",
]
