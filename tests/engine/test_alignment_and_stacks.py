"""Tests for TextAlignmentEngine and StackedExpressionLayout."""

import pytest

from mtext_layout.engine.context import FormattingContext, ParagraphState
from mtext_layout.engine.glyph_builder import GlyphRunBuilder
from mtext_layout.engine.primitives import DecorationKind, GlyphRun, LineGroup, PositionedGlyph
from mtext_layout.engine.stack_layout import StackedExpressionLayout
from mtext_layout.engine.text_alignment import TextAlignmentEngine
from mtext_layout.parser.tokens import StackData
from mtext_layout.utils.enums import FlowDirection, GeometryTag, ParagraphAlignment


def _run(x0, x1):
    contour = ((x0, 0.0), (x0, 1.0), (x1, 1.0), (x1, 0.0))
    return GlyphRun(color=0, glyphs=[PositionedGlyph("a", (contour,), GeometryTag.STROKE, x1 - x0)])


def _line(*spans, first=True):
    return LineGroup(index=0, paragraph_index=0, first_in_paragraph=first, runs=[_run(a, b) for a, b in spans])


def _extent(line):
    box = line.bbox()
    return pytest.approx(box.min_x), pytest.approx(box.max_x)


class TestTextAlignmentEngine:
    """Test suite for TextAlignmentEngine."""

    def test_left_with_indent_on_first_line(self):
        """Test the indent only applies to a paragraph's first line."""
        engine = TextAlignmentEngine(10.0)
        paragraph = ParagraphState(indent=2.0, left_margin=1.0)

        first = _line((0.0, 2.0))
        other = _line((0.0, 2.0), first=False)
        engine.align_line(first, paragraph)
        engine.align_line(other, paragraph)

        assert _extent(first) == (3.0, 5.0)
        assert _extent(other) == (1.0, 3.0)

    def test_center(self):
        """Test centered lines sit in the middle of the usable width."""
        line = _line((0.0, 2.0))
        TextAlignmentEngine(10.0).align_line(line, ParagraphState(ParagraphAlignment.CENTER))

        assert _extent(line) == (4.0, 6.0)

    def test_right_respects_margin(self):
        """Test right aligned lines end on max_width minus the right margin."""
        line = _line((0.0, 2.0))
        TextAlignmentEngine(10.0).align_line(line, ParagraphState(ParagraphAlignment.RIGHT, right_margin=1.0))

        assert _extent(line) == (7.0, 9.0)

    def test_distributed_spans_usable_width(self):
        """Test distributed lines are spread to the full usable width."""
        line = _line((0.0, 2.0), (2.5, 4.5), (5.0, 6.0))
        TextAlignmentEngine(10.0).align_line(line, ParagraphState(ParagraphAlignment.DISTRIBUTED))

        assert _extent(line) == (0.0, 10.0)
        starts = sorted(run.bbox().min_x for run in line.runs)
        assert starts == pytest.approx([0.0, 4.5, 9.0])

    def test_distributed_single_run_is_left_aligned(self):
        """Test a single run gets no gap."""
        line = _line((3.0, 5.0))
        TextAlignmentEngine(10.0).align_line(line, ParagraphState(ParagraphAlignment.DISTRIBUTED))

        assert _extent(line) == (0.0, 2.0)

    def test_distributed_overfull_line_untouched(self):
        """Test lines wider than the usable width are not squeezed."""
        line = _line((0.0, 6.0), (6.5, 12.0))
        TextAlignmentEngine(10.0).align_line(line, ParagraphState(ParagraphAlignment.DISTRIBUTED))

        assert _extent(line) == (0.0, 12.0)

    def test_distributed_unbounded_gets_no_gaps(self):
        """Test distributed alignment without max width leaves runs in place."""
        line = _line((0.0, 2.0), (2.5, 4.5))
        TextAlignmentEngine(0.0).align_line(line, ParagraphState(ParagraphAlignment.DISTRIBUTED))

        assert _extent(line) == (0.0, 4.5)

    def test_justified_behaves_as_left(self):
        """Test justified alignment is laid out as left."""
        line = _line((3.0, 5.0))
        TextAlignmentEngine(10.0).align_line(line, ParagraphState(ParagraphAlignment.JUSTIFIED))

        assert _extent(line) == (0.0, 2.0)

    def test_empty_line(self):
        """Test empty lines are ignored."""
        line = LineGroup(index=0, paragraph_index=0, first_in_paragraph=True)
        TextAlignmentEngine(10.0).align_line(line, ParagraphState(ParagraphAlignment.CENTER))

        assert line.bbox() is None


@pytest.fixture
def stacks(registry):
    return StackedExpressionLayout(GlyphRunBuilder(registry), FlowDirection.LEFT_TO_RIGHT)


@pytest.fixture
def context():
    return FormattingContext(font="unit", text_height=1.0, font_size=1.0, blank_width=0.5)


class TestStackedExpressionLayout:
    """Test suite for StackedExpressionLayout."""

    def test_fraction_centers_parts_over_rule(self, stacks, context):
        """Test both parts are centered and the rule spans the wider part."""
        layout = stacks.layout(StackData("1", "22", "/"), context, 0.0, 0.0)

        numerator, *denominator = layout.glyphs
        assert numerator.bbox().min_x == pytest.approx(0.5)
        assert numerator.bbox().min_y == pytest.approx(-0.65)
        assert denominator[0].bbox().min_x == pytest.approx(0.0)
        assert denominator[0].bbox().min_y == pytest.approx(-1.75)

        (rule,) = layout.decorations
        assert rule.kind is DecorationKind.STACK_DIVIDER
        assert rule.start == pytest.approx((0.0, -0.7))
        assert rule.end == pytest.approx((2.0, -0.7))
        assert layout.stack_width == pytest.approx(2.0)
        assert layout.advance == pytest.approx(2.5)

    def test_fraction_rule_clears_both_parts(self, stacks, context):
        """Test the rule runs between the numerator bottom and the denominator top."""
        layout = stacks.layout(StackData("1", "2", "/"), context, 0.0, 0.0)

        numerator, denominator = (glyph.bbox() for glyph in layout.glyphs)
        (rule,) = layout.decorations
        assert denominator.max_y < rule.start[1] < numerator.min_y
        assert numerator.max_y == pytest.approx(0.35)
        assert denominator.max_y == pytest.approx(-0.75)

    def test_hash_divider_draws_rule(self, stacks, context):
        """Test the '#' divider also draws a rule."""
        layout = stacks.layout(StackData("1", "2", "#"), context, 0.0, 0.0)

        assert [d.kind for d in layout.decorations] == [DecorationKind.STACK_DIVIDER]

    def test_tolerance_stack_has_no_rule(self, stacks, context):
        """Test a '^' stack with both parts stacks them without a rule."""
        layout = stacks.layout(StackData("1", "2", "^"), context, 0.0, 0.0)

        assert len(layout.glyphs) == 2
        assert layout.decorations == []

    def test_superscript(self, stacks, context):
        """Test '^' with only a numerator is a raised, reduced superscript."""
        layout = stacks.layout(StackData("2", "", "^"), context, 1.0, 0.0)

        (glyph,) = layout.glyphs
        box = glyph.bbox()
        assert box.height == pytest.approx(0.7)
        assert box.min_x == pytest.approx(1.0)
        assert box.min_y == pytest.approx(-0.6)
        assert layout.font_size == pytest.approx(0.7)
        assert layout.advance == pytest.approx(1.5)

    def test_subscript(self, stacks, context):
        """Test '^' with only a denominator is a lowered, reduced subscript."""
        layout = stacks.layout(StackData("", "2", "^"), context, 0.0, 0.0)

        (glyph,) = layout.glyphs
        assert glyph.bbox().min_y == pytest.approx(-1.3)

    def test_empty_stack_advances_one_blank(self, stacks, context):
        """Test an empty stack only moves the pen."""
        layout = stacks.layout(StackData("", "", "/"), context, 0.0, 0.0)

        assert layout.glyphs == []
        assert layout.decorations == []
        assert layout.advance == pytest.approx(0.5)

    def test_tracking_does_not_widen_stack(self, stacks, context):
        """Test stacks are measured with tracking 1."""
        context.word_space = 3.0

        layout = stacks.layout(StackData("1", "22", "/"), context, 0.0, 0.0)

        assert layout.stack_width == pytest.approx(2.0)

    def test_bottom_to_top_baseline(self, registry, context):
        """Test bottom-to-top flow puts the baseline on the cursor."""
        stacks = StackedExpressionLayout(GlyphRunBuilder(registry), FlowDirection.BOTTOM_TO_TOP)

        layout = stacks.layout(StackData("1", "2", "/"), context, 0.0, 0.0)

        assert layout.decorations[0].start[1] == pytest.approx(0.3)
