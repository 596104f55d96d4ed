"""
Formatting state of a layout pass.

FormattingContext holds the character-level attributes that ``{`` / ``}``
groups save and restore; ParagraphState holds the paragraph-level ones that
groups do not touch; LineCursor is the pen position of the pass.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List

from ..utils.color_utils import WHITE
from ..utils.enums import ParagraphAlignment


@dataclass
class FormattingContext:
    """Snapshot of all inline style attributes."""

    font: str = ""
    font_scale_factor: float = 1.0
    text_height: float = 1.0
    font_size: float = 1.0
    font_size_scale_factor: float = 1.0
    color: int = WHITE
    underline: bool = False
    overline: bool = False
    strike_through: bool = False
    oblique_angle: float = 0.0
    italic: bool = False
    bold: bool = False
    width_factor: float = 1.0
    word_space: float = 1.0
    blank_width: float = 0.0

    def copy(self) -> "FormattingContext":
        return replace(self)


class ContextStack:
    """Stack of saved FormattingContexts; the active context is not on the stack."""

    def __init__(self, base: FormattingContext) -> None:
        self.current = base
        self._saved: List[FormattingContext] = []

    def push(self) -> None:
        self._saved.append(self.current.copy())

    def pop(self) -> bool:
        """Restore the last saved context; a pop without matching push is a no-op."""
        if not self._saved:
            return False
        self.current = self._saved.pop()
        return True

    @property
    def depth(self) -> int:
        return len(self._saved)


@dataclass
class ParagraphState:
    alignment: ParagraphAlignment = ParagraphAlignment.LEFT
    indent: float = 0.0
    left_margin: float = 0.0
    right_margin: float = 0.0

    def reset(self, alignment: ParagraphAlignment) -> None:
        self.alignment = alignment
        self.indent = 0.0
        self.left_margin = 0.0
        self.right_margin = 0.0


@dataclass
class LineCursor:
    h_offset: float = 0.0
    v_offset: float = 0.0
    line_count: int = 1
    max_font_size: float = 0.0
    started: bool = False
    has_content: bool = False
    paragraph_index: int = 0
    first_in_paragraph: bool = True
