"""

MTextProcessor - interprets an MText token stream into laid out geometry.

One processor instance performs one layout pass:

- formatting commands update the active FormattingContext (``{`` / ``}``
  save and restore it) or the ParagraphState
- words are measured and wrapped as a whole, then emitted glyph by glyph
- stacked expressions are delegated to StackedExpressionLayout
- every finished line is aligned before the pen moves to the next one

Geometry is produced in a local frame: the first line starts at the origin
and the text flows downward (upward for bottom-to-top flow). Entity
placement (anchor, rotation, insertion point) is applied afterwards.

"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..fonts.base import GlyphProvider
from ..fonts.registry import strip_font_extension
from ..parser.tokens import NBSP, PropertyChange, StackData, Token, TokenType
from ..utils.color_utils import resolve_aci, rgb_to_int
from ..utils.enums import FlowDirection, ParagraphAlignment
from .context import ContextStack, FormattingContext, LineCursor, ParagraphState
from .glyph_builder import GlyphRunBuilder
from .line_breaker import LineBreaker
from .options import MTextFormatOptions, TextStyle
from .primitives import GlyphRun, LayoutDiagnostics, LayoutResult, LineGroup
from .stack_layout import StackedExpressionLayout
from .text_alignment import TextAlignmentEngine

logger = logging.getLogger(__name__)

# Absolute \W values are slightly condensed to match reference renderers
ABSOLUTE_WIDTH_FACTOR_SCALE = 0.93


class MTextProcessor:
    """
    Layout pass over a token stream.

    Usage:
        processor = MTextProcessor(style, registry, options)
        result = processor.process_text(tokenize(text))
    """

    def __init__(self, style: TextStyle, provider: GlyphProvider, options: MTextFormatOptions) -> None:
        self.style = style
        self.provider = provider
        self.options = options

        self.builder = GlyphRunBuilder(provider, style.big_font)
        self.line_breaker = LineBreaker(self.builder, options.max_width)
        self.aligner = TextAlignmentEngine(options.max_width)
        self.stack_layout = StackedExpressionLayout(self.builder, options.flow_direction)
        self.diagnostics = LayoutDiagnostics()

        base = FormattingContext(
            text_height=options.font_size or style.fixed_text_height,
            color=options.colors.by_layer_color if style.color is None else style.color,
            oblique_angle=style.oblique_angle,
            width_factor=options.width_factor * (style.width_factor or 1.0),
        )
        self.contexts = ContextStack(base)
        self.contexts.current.font = self._resolve_font(style.font)
        self._update_font_metrics()

        self.paragraph = ParagraphState(alignment=self.default_alignment)
        self.cursor = LineCursor()
        self._total_height = 0.0
        self.lines: List[LineGroup] = []
        self._line = LineGroup(index=0, paragraph_index=0, first_in_paragraph=True)
        self._run: Optional[GlyphRun] = None

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------
    @property
    def context(self) -> FormattingContext:
        return self.contexts.current

    @property
    def default_alignment(self) -> ParagraphAlignment:
        alignment = self.options.horizontal_alignment
        return ParagraphAlignment.LEFT if alignment == ParagraphAlignment.DEFAULT else alignment

    @property
    def ignore_tracking(self) -> bool:
        return self.paragraph.alignment == ParagraphAlignment.DISTRIBUTED

    @property
    def line_max_font_size(self) -> float:
        """Largest glyph size on the current line; an empty line uses the active size."""
        return self.cursor.max_font_size or self.context.font_size

    @property
    def current_line_height(self) -> float:
        leading = self.options.line_space_factor * self.context.font_size * self.options.line_spacing_scale
        return leading + self.line_max_font_size

    @property
    def total_height(self) -> float:
        if self.cursor.line_count == 1:
            return self.cursor.max_font_size
        return self._total_height + self.current_line_height

    def _resolve_font(self, font_name: str) -> str:
        name = font_name or ""
        if self.options.remove_font_extension:
            name = strip_font_extension(name)
        resolved = self.provider.find_and_replace_font(name)
        if name and resolved.lower() != name.lower():
            missed = self.diagnostics.missed_fonts
            missed[name] = missed.get(name, 0) + 1
        return resolved

    def _update_font_metrics(self) -> None:
        """Recompute font size and blank width after a font or height change."""
        context = self.context
        context.font_scale_factor = self.provider.get_font_scale_factor(context.font)
        context.font_size = context.text_height * context.font_scale_factor * context.font_size_scale_factor
        kind = self.provider.get_font_kind(context.font)
        context.blank_width = context.font_size * kind.blank_ratio

    def _record_font_size(self, size: float) -> None:
        if size > self.cursor.max_font_size:
            self.cursor.max_font_size = size

    def _baseline(self) -> float:
        if self.options.flow_direction == FlowDirection.BOTTOM_TO_TOP:
            return self.cursor.v_offset
        return self.cursor.v_offset - self.context.font_size

    # ------------------------------------------------------------------
    # Formatting commands
    # ------------------------------------------------------------------
    def process_format(self, change: PropertyChange) -> None:
        """Apply one formatting command to the context or paragraph state."""
        command = change.command
        context = self.context

        if command == "{":
            self.contexts.push()
        elif command == "}":
            if not self.contexts.pop():
                logger.debug("Unbalanced '}' ignored")
        elif command in ("f", "F"):
            if change.font_face is None:
                self._ignore(command)
                return
            context.font = self._resolve_font(change.font_face.family)
            context.bold = change.font_face.bold
            context.italic = change.font_face.italic
            self._update_font_metrics()
        elif command in ("C", "c"):
            if change.aci is not None:
                context.color = resolve_aci(change.aci, self.options.colors)
            elif change.rgb is not None:
                context.color = rgb_to_int(*change.rgb)
            else:
                self._ignore(command)
        elif command == "W":
            self._change_width_factor(change)
        elif command == "H":
            factor = change.cap_height
            if factor is None:
                self._ignore(command)
                return
            if factor.is_relative:
                context.font_size_scale_factor *= factor.value
            else:
                context.text_height = factor.value
            self._update_font_metrics()
        elif command == "T":
            factor = change.char_tracking_factor
            if factor is None:
                self._ignore(command)
            elif factor.is_relative:
                context.word_space *= factor.value
            else:
                context.word_space = factor.value
        elif command == "Q":
            if change.oblique is None:
                self._ignore(command)
            else:
                context.oblique_angle = change.oblique
        elif command in ("L", "l"):
            context.underline = bool(change.underline)
        elif command in ("O", "o"):
            context.overline = bool(change.overline)
        elif command in ("K", "k"):
            context.strike_through = bool(change.strike_through)
        elif command in ("p", "q"):
            self._change_paragraph(change)
        else:
            self._ignore(command)

    def _change_width_factor(self, change: PropertyChange) -> None:
        factor = change.width_factor
        if factor is None:
            self._ignore(change.command)
            return
        context = self.context
        if not factor.is_relative:
            context.width_factor = factor.value * ABSOLUTE_WIDTH_FACTOR_SCALE
        elif self.options.legacy_relative_width_factor:
            context.width_factor = factor.value * self.options.max_width
        else:
            context.width_factor *= factor.value

    def _change_paragraph(self, change: PropertyChange) -> None:
        properties = change.paragraph
        if properties is None:
            self._ignore(change.command)
            return
        if properties.align is not None:
            if properties.align == ParagraphAlignment.DEFAULT:
                self.paragraph.alignment = self.default_alignment
            else:
                self.paragraph.alignment = properties.align
        if properties.indent is not None:
            self.paragraph.indent = properties.indent
        if properties.left is not None:
            self.paragraph.left_margin = properties.left
        if properties.right is not None:
            self.paragraph.right_margin = properties.right

    def _ignore(self, command: str) -> None:
        ignored = self.diagnostics.ignored_commands
        ignored[command] = ignored.get(command, 0) + 1
        logger.debug(f"Ignoring MText command \\{command}")

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------
    def process_text(self, tokens: Iterable[Token]) -> LayoutResult:
        """Lay out ``tokens`` and return the aligned lines with the total height."""
        for token in tokens:
            if token.type == TokenType.NEW_PARAGRAPH:
                self._new_paragraph()
            elif token.type == TokenType.WORD:
                words = [token.data] if isinstance(token.data, str) else list(token.data or [])
                for word in words:
                    self._process_word(word)
                    self._flush_run()
            elif token.type == TokenType.SPACE:
                self._process_blank()
            elif token.type == TokenType.PROPERTIES_CHANGED:
                if isinstance(token.data, PropertyChange):
                    self._flush_run()
                    self.process_format(token.data)
            elif token.type == TokenType.STACK:
                if isinstance(token.data, StackData):
                    self._process_stack(token.data)
                    self._flush_run()

        self._flush_run()
        self._finish_line()

        self.diagnostics.unsupported_chars = dict(self.builder.unsupported_chars)
        logger.debug(f"Laid out {len(self.lines)} line(s), total height {self.total_height:.3f}")
        return LayoutResult(total_height=self.total_height, lines=self.lines, diagnostics=self.diagnostics)

    def _ensure_line_started(self) -> None:
        if self.cursor.started:
            return
        self.cursor.started = True
        self.cursor.h_offset = self.paragraph.indent if self.cursor.first_in_paragraph else 0.0

    def _run_for_context(self) -> GlyphRun:
        if self._run is None:
            self._run = GlyphRun(color=self.context.color)
        return self._run

    def _flush_run(self) -> None:
        if self._run is not None and not self._run.is_empty:
            self._line.runs.append(self._run)
        self._run = None

    def _process_word(self, word: str) -> None:
        self._ensure_line_started()
        ignore_tracking = self.ignore_tracking
        decision = self.line_breaker.check_word(
            word,
            self.context,
            self.cursor.h_offset,
            self.paragraph,
            self.cursor.has_content,
            ignore_tracking,
        )
        if decision.wrap:
            self._start_new_line()
            self._ensure_line_started()
        for char in word:
            self._process_char(char, ignore_tracking)

    def _process_char(self, char: str, ignore_tracking: bool) -> None:
        context = self.context
        if char == NBSP:
            self.cursor.h_offset += context.blank_width
            return
        shape = self.builder.resolve_shape(char, context.font, context.font_size, record=True)
        if shape is None:
            self.cursor.h_offset += context.blank_width
            return
        self._record_font_size(context.font_size)
        glyph, decorations, advance = self.builder.build(
            shape, context, (self.cursor.h_offset, self._baseline()), ignore_tracking
        )
        run = self._run_for_context()
        run.glyphs.append(glyph)
        run.decorations.extend(decorations)
        self.cursor.h_offset += advance
        self.cursor.has_content = True

    def _process_blank(self) -> None:
        self._ensure_line_started()
        self.cursor.h_offset += self.context.blank_width

    def _process_stack(self, stack: StackData) -> None:
        self._ensure_line_started()
        layout = self.stack_layout.layout(stack, self.context, self.cursor.h_offset, self.cursor.v_offset)
        if layout.glyphs:
            self._record_font_size(layout.font_size)
        run = self._run_for_context()
        run.glyphs.extend(layout.glyphs)
        run.decorations.extend(layout.decorations)
        self.cursor.h_offset += layout.advance
        self.cursor.has_content = self.cursor.has_content or not run.is_empty

    # ------------------------------------------------------------------
    # Lines and paragraphs
    # ------------------------------------------------------------------
    def _finish_line(self) -> None:
        self.aligner.align_line(self._line, self.paragraph)
        self.lines.append(self._line)

    def _start_new_line(self) -> None:
        self._flush_run()
        self._finish_line()

        line_height = self.current_line_height
        if self.options.flow_direction == FlowDirection.BOTTOM_TO_TOP:
            self.cursor.v_offset += line_height
        else:
            self.cursor.v_offset -= line_height

        if self.cursor.line_count == 1:
            self._total_height = self.line_max_font_size
        else:
            self._total_height += line_height
        self.cursor.line_count += 1

        self.cursor.h_offset = 0.0
        self.cursor.max_font_size = 0.0
        self.cursor.started = False
        self.cursor.has_content = False
        self.cursor.first_in_paragraph = False
        self._line = LineGroup(
            index=len(self.lines),
            paragraph_index=self.cursor.paragraph_index,
            first_in_paragraph=False,
        )

    def _new_paragraph(self) -> None:
        self._start_new_line()
        self.paragraph.reset(self.default_alignment)
        self.cursor.paragraph_index += 1
        self.cursor.first_in_paragraph = True
        self._line.paragraph_index = self.cursor.paragraph_index
        self._line.first_in_paragraph = True
