"""
MText Layout - typesetting engine for AutoCAD multi-line text.

Turns MText markup (inline formatting codes, paragraphs, stacked fractions)
into positioned glyph outlines and decoration segments:

- Parser: tokenizer for MText formatting codes
- Fonts: stroke and TrueType glyph sources behind a font registry
- Engine: formatting interpreter, line breaking, stacks, alignment, placement
- Export: PDF preview of laid out text
- Utils: logging, caching, ACI colors
- CLI: `mtext-layout` command writing a PDF preview
"""

from .api import MTextData, create_registry, format_options, render_mtext
from .config import LayoutSettings
from .engine import (
    EntityPlacement,
    LayoutResult,
    MTextFormatOptions,
    MTextProcessor,
    PlacedMText,
    TextStyle,
)
from .exceptions import (
    ConfigurationError,
    FontError,
    MTextLayoutError,
    ParsingError,
    RenderingError,
)
from .fonts import FontKind, FontRegistry, StrokeFont, TrueTypeFont
from .parser import tokenize

__version__ = "0.1.0"

__all__ = [
    "MTextData",
    "create_registry",
    "format_options",
    "render_mtext",
    "LayoutSettings",
    "EntityPlacement",
    "LayoutResult",
    "MTextFormatOptions",
    "MTextProcessor",
    "PlacedMText",
    "TextStyle",
    "ConfigurationError",
    "FontError",
    "MTextLayoutError",
    "ParsingError",
    "RenderingError",
    "FontKind",
    "FontRegistry",
    "StrokeFont",
    "TrueTypeFont",
    "tokenize",
    "__version__",
]
