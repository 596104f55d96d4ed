"""Tests for GlyphRunBuilder, LineBreaker and the formatting context stack."""

import math
from unittest.mock import Mock

import pytest

from mtext_layout.engine.context import ContextStack, FormattingContext, ParagraphState
from mtext_layout.engine.glyph_builder import GlyphRunBuilder, effective_oblique
from mtext_layout.engine.line_breaker import LineBreaker
from mtext_layout.engine.primitives import DecorationKind
from mtext_layout.fonts import FontKind, GlyphShape
from mtext_layout.utils.enums import GeometryTag, ParagraphAlignment


@pytest.fixture
def context():
    return FormattingContext(font="unit", text_height=2.0, font_size=2.0, blank_width=1.0)


@pytest.fixture
def builder(registry):
    return GlyphRunBuilder(registry)


class TestContextStack:
    """Test suite for ContextStack."""

    def test_push_pop_restores_snapshot(self):
        """Test a popped context equals the one saved by push."""
        stack = ContextStack(FormattingContext(font="unit", color=1))
        stack.push()
        stack.current.color = 2
        stack.current.underline = True

        assert stack.depth == 1
        assert stack.pop() is True
        assert stack.current.color == 1
        assert stack.current.underline is False

    def test_pop_on_empty_stack_is_noop(self):
        """Test popping without a matching push keeps the base context."""
        base = FormattingContext(font="unit", color=5)
        stack = ContextStack(base)

        assert stack.pop() is False
        assert stack.current is base

    def test_paragraph_reset(self):
        """Test ParagraphState.reset clears indent and margins."""
        paragraph = ParagraphState(ParagraphAlignment.CENTER, indent=2, left_margin=1, right_margin=3)
        paragraph.reset(ParagraphAlignment.LEFT)

        assert paragraph == ParagraphState()


class TestGlyphRunBuilder:
    """Test suite for GlyphRunBuilder."""

    def test_fallback_chain_order(self):
        """Test primary font, big font and any font are consulted in order."""
        shape = GlyphShape("x", 1.0, (), FontKind.STROKE)
        provider = Mock()
        provider.get_char_shape.side_effect = [None, None, shape]
        builder = GlyphRunBuilder(provider, big_font="bigfont")

        assert builder.resolve_shape("x", "main", 1.0, record=True) is shape
        assert [c.args for c in provider.get_char_shape.call_args_list] == [
            ("x", "main", 1.0),
            ("x", "bigfont", 1.0),
            ("x", "", 1.0),
        ]
        assert builder.unsupported_chars == {"x": 1}
        provider.get_not_found_shape.assert_not_called()

    def test_placeholder_when_no_font_has_char(self):
        """Test the not-found shape is used as the last resort."""
        placeholder = GlyphShape("?", 1.0, (), FontKind.STROKE)
        provider = Mock()
        provider.get_char_shape.return_value = None
        provider.get_not_found_shape.return_value = placeholder
        builder = GlyphRunBuilder(provider)

        assert builder.resolve_shape("x", "main", 1.0) is placeholder
        assert builder.unsupported_chars == {}

    def test_build_positions_glyph(self, builder, registry, context):
        """Test the glyph is translated to the pen position."""
        shape = registry.get_char_shape("a", "unit", 2.0)

        glyph, decorations, advance = builder.build(shape, context, (3.0, -2.0))

        box = glyph.bbox()
        assert (box.min_x, box.min_y, box.max_x, box.max_y) == pytest.approx((3.0, -2.0, 5.0, 0.0))
        assert advance == pytest.approx(2.0)
        assert glyph.tag is GeometryTag.STROKE
        assert decorations == []

    def test_width_factor_and_tracking(self, builder, registry, context):
        """Test width factor scales outlines while tracking only scales the advance."""
        shape = registry.get_char_shape("a", "unit", 2.0)
        context.width_factor = 0.5
        context.word_space = 2.0

        glyph, _, advance = builder.build(shape, context, (0.0, 0.0))

        assert glyph.bbox().width == pytest.approx(1.0)
        assert advance == pytest.approx(2.0)
        assert builder.advance(shape, context, ignore_tracking=True) == pytest.approx(1.0)

    def test_synthetic_bold(self, builder, registry, context):
        """Test bold doubles the contours with a small offset and widens the advance."""
        shape = registry.get_char_shape("a", "unit", 2.0)
        context.bold = True

        glyph, _, advance = builder.build(shape, context, (0.0, 0.0))

        assert len(glyph.contours) == 2 * len(shape.contours)
        assert advance == pytest.approx(2.0 + 0.08)
        assert glyph.bbox().max_x == pytest.approx(2.08)

    def test_oblique_shear(self, builder, registry, context):
        """Test oblique angle shears the top of the glyph to the right."""
        shape = registry.get_char_shape("a", "unit", 2.0)
        context.oblique_angle = 45.0

        glyph, _, _ = builder.build(shape, context, (0.0, 0.0))

        assert glyph.bbox().max_x == pytest.approx(4.0)

    def test_effective_oblique(self):
        """Test italic adds 15 degrees for filled fonts and replaces the angle for stroke fonts."""
        context = FormattingContext(oblique_angle=10.0, italic=True)

        assert effective_oblique(context, FontKind.FILLED) == pytest.approx(25.0)
        assert effective_oblique(context, FontKind.STROKE) == pytest.approx(15.0)
        context.italic = False
        assert effective_oblique(context, FontKind.STROKE) == pytest.approx(10.0)

    def test_decorations(self, builder, registry, context):
        """Test underline, overline and strike-through positions relative to the baseline."""
        shape = registry.get_char_shape("a", "unit", 2.0)
        context.underline = context.overline = context.strike_through = True

        _, decorations, _ = builder.build(shape, context, (3.0, -2.0))

        by_kind = {d.kind: d for d in decorations}
        assert by_kind[DecorationKind.UNDERLINE].start == pytest.approx((3.0, -2.4))
        assert by_kind[DecorationKind.UNDERLINE].end == pytest.approx((5.0, -2.4))
        assert by_kind[DecorationKind.OVERLINE].start[1] == pytest.approx(0.4)
        assert by_kind[DecorationKind.STRIKE_THROUGH].start[1] == pytest.approx(-1.0)

    def test_measure(self, builder, context):
        """Test measuring sums the advances without emitting geometry."""
        assert builder.measure("abc", context) == pytest.approx(6.0)
        assert builder.measure("", context) == 0.0

    def test_measure_non_breaking_space(self, builder, context):
        """Test a non-breaking space is measured as one blank, not the placeholder."""
        assert builder.char_advance("\u00a0", context) == pytest.approx(1.0)
        assert builder.measure("a\u00a0b", context) == pytest.approx(5.0)


class TestLineBreaker:
    """Test suite for LineBreaker."""

    def test_fits_exactly(self, builder, context):
        """Test a word ending exactly on the usable width stays on the line."""
        breaker = LineBreaker(builder, max_width=6.0)

        decision = breaker.check_word("ab", context, 2.0, ParagraphState(), True)

        assert decision.wrap is False
        assert decision.width == pytest.approx(4.0)

    def test_wraps_when_too_wide(self, builder, context):
        """Test a word crossing the usable width wraps."""
        breaker = LineBreaker(builder, max_width=6.0)

        assert breaker.check_word("ab", context, 2.5, ParagraphState(), True).wrap is True

    def test_never_wraps_empty_line(self, builder, context):
        """Test a word wider than an empty line is kept."""
        breaker = LineBreaker(builder, max_width=1.0)

        assert breaker.check_word("abcdef", context, 0.0, ParagraphState(), False).wrap is False

    def test_unbounded_never_wraps(self, builder, context):
        """Test max_width 0 disables wrapping."""
        breaker = LineBreaker(builder, max_width=0.0)

        assert breaker.usable_width(ParagraphState()) == math.inf
        assert breaker.check_word("abcdef", context, 100.0, ParagraphState(), True).wrap is False

    def test_margins_reduce_usable_width(self, builder, context):
        """Test left and right margins narrow the line."""
        breaker = LineBreaker(builder, max_width=10.0)
        paragraph = ParagraphState(left_margin=2.0, right_margin=3.0)

        assert breaker.usable_width(paragraph) == pytest.approx(5.0)
        assert breaker.check_word("ab", context, 2.0, paragraph, True).wrap is True
