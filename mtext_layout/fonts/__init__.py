"""Fonts: glyph provider interface, stroke and TrueType fonts, and the font registry."""

from .base import BaseFont, FontKind, GlyphProvider, GlyphShape
from .registry import FontRegistry, strip_font_extension
from .stroke_font import StrokeFont
from .truetype_font import TrueTypeFont

__all__ = [
    "BaseFont",
    "FontKind",
    "GlyphProvider",
    "GlyphShape",
    "FontRegistry",
    "strip_font_extension",
    "StrokeFont",
    "TrueTypeFont",
]
