"""Inputs of a layout pass: the text style and the per-entity format options."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..config import DEFAULT_LINE_SPACE_FACTOR, LINE_SPACING_SCALE_FACTOR
from ..utils.color_utils import ColorSettings
from ..utils.enums import FlowDirection, ParagraphAlignment


@dataclass
class TextStyle:
    """Drawing text style (DXF STYLE table entry)."""

    name: str = "Standard"
    font: str = ""
    big_font: str = ""
    fixed_text_height: float = 0.0
    width_factor: float = 1.0
    oblique_angle: float = 0.0
    # None follows the layer color
    color: Optional[int] = None


@dataclass
class MTextFormatOptions:
    font_size: float
    width_factor: float = 1.0
    line_space_factor: float = DEFAULT_LINE_SPACE_FACTOR
    horizontal_alignment: ParagraphAlignment = ParagraphAlignment.LEFT
    # Maximum width of one line; 0 disables wrapping
    max_width: float = 0.0
    flow_direction: FlowDirection = FlowDirection.LEFT_TO_RIGHT
    colors: ColorSettings = field(default_factory=ColorSettings)
    remove_font_extension: bool = True
    line_spacing_scale: float = LINE_SPACING_SCALE_FACTOR
    # Relative \W values are multiplied by max_width, as older renderers did
    legacy_relative_width_factor: bool = True
