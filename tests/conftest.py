"""
Pytest configuration for mtext_layout
"""

import io
import logging
import sys

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import TTFont

from mtext_layout.engine.options import MTextFormatOptions, TextStyle
from mtext_layout.fonts import FontRegistry, StrokeFont, TrueTypeFont

UNIT_FONT_CHARS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789?"


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


def unit_box():
    """One closed polyline spanning the unit square."""
    return [[[0, 0], [0, 1], [1, 1], [1, 0], [0, 0]]]


def make_unit_font(name="unit", chars=UNIT_FONT_CHARS):
    """Stroke font where every glyph is a 1 x 1 box with advance 1 at height 1."""
    return StrokeFont.from_dict({
        "name": name,
        "height": 1,
        "glyphs": {char: {"advance": 1, "strokes": unit_box()} for char in chars},
    })


@pytest.fixture
def unit_font():
    return make_unit_font()


@pytest.fixture
def registry(unit_font):
    return FontRegistry([unit_font], default_font="unit")


@pytest.fixture
def style():
    return TextStyle(name="Standard", font="unit")


@pytest.fixture
def make_options():
    """Factory for format options with a 1.0 text height."""
    def _make(**overrides):
        values = {"font_size": 1.0}
        values.update(overrides)
        return MTextFormatOptions(**values)
    return _make


def _square(width, height):
    pen = TTGlyphPen(None)
    pen.moveTo((0, 0))
    pen.lineTo((0, height))
    pen.lineTo((width, height))
    pen.lineTo((width, 0))
    pen.closePath()
    return pen.glyph()


@pytest.fixture
def box_ttfont():
    """In-memory TrueType font: 'A' is 600 x 700, '?' is 500 x 700, 1000 units per em."""
    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder([".notdef", "A", "question"])
    fb.setupCharacterMap({ord("A"): "A", ord("?"): "question"})
    fb.setupGlyf({
        ".notdef": _square(500, 700),
        "A": _square(600, 700),
        "question": _square(500, 700),
    })
    glyf = fb.font["glyf"]
    advances = {".notdef": 500, "A": 600, "question": 500}
    fb.setupHorizontalMetrics({name: (advance, glyf[name].xMin) for name, advance in advances.items()})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "BoxTest", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, usWinAscent=800, usWinDescent=200)
    fb.setupPost()

    buffer = io.BytesIO()
    fb.save(buffer)
    buffer.seek(0)
    return TTFont(buffer)


@pytest.fixture
def box_font(box_ttfont):
    return TrueTypeFont(box_ttfont, name="box")


@pytest.fixture
def font_factory():
    """Builds additional unit fonts: ``font_factory(name, chars)``."""
    return make_unit_font
