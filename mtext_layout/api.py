"""
High-level entry point: lay out and place one MText entity.

Example:
    registry = create_registry([StrokeFont.from_json_file("txt.json")])
    placed = render_mtext(MTextData(text="{\\C1;Hello}\\PWorld", height=2.5), TextStyle(font="txt"), registry)
    for tag, color, outlines in placed.geometry_groups():
        ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .config import LayoutSettings
from .engine.geometry import Point, Vector3
from .engine.options import MTextFormatOptions, TextStyle
from .engine.placement import EntityPlacement, PlacedMText, alignment_for_attachment
from .engine.processor import MTextProcessor
from .fonts.base import BaseFont, GlyphProvider
from .fonts.registry import FontRegistry
from .parser.tokenizer import tokenize
from .utils.enums import FlowDirection

logger = logging.getLogger(__name__)

DEFAULT_TEXT_HEIGHT = 1.0


@dataclass
class MTextData:
    """Entity-level MText parameters as read from a drawing."""

    text: str
    height: float = DEFAULT_TEXT_HEIGHT
    width: float = 0.0
    position: Point = (0.0, 0.0)
    rotation: float = 0.0
    direction_vector: Optional[Vector3] = None
    attachment_point: Optional[int] = None
    drawing_direction: FlowDirection = FlowDirection.LEFT_TO_RIGHT
    line_space_factor: Optional[float] = None
    width_factor: float = 1.0


def create_registry(fonts: Iterable[BaseFont], settings: Optional[LayoutSettings] = None) -> FontRegistry:
    """FontRegistry configured with the default font and font mapping of ``settings``."""
    settings = settings or LayoutSettings()
    return FontRegistry(fonts, default_font=settings.default_font, font_mapping=settings.font_mapping)


def format_options(data: MTextData, settings: LayoutSettings) -> MTextFormatOptions:
    """Per-pass options derived from the entity and the shared settings."""
    line_space_factor = data.line_space_factor
    if line_space_factor is None:
        line_space_factor = settings.default_line_space_factor
    return MTextFormatOptions(
        font_size=data.height or DEFAULT_TEXT_HEIGHT,
        width_factor=data.width_factor if data.width_factor is not None else 1.0,
        line_space_factor=line_space_factor,
        horizontal_alignment=alignment_for_attachment(data.width, data.attachment_point),
        max_width=data.width or 0.0,
        flow_direction=data.drawing_direction or FlowDirection.LEFT_TO_RIGHT,
        colors=settings.colors,
        remove_font_extension=settings.remove_font_extension,
        line_spacing_scale=settings.line_spacing_scale,
    )


def render_mtext(
    data: MTextData,
    style: TextStyle,
    fonts: GlyphProvider,
    settings: Optional[LayoutSettings] = None,
) -> PlacedMText:
    """Tokenize ``data.text``, lay it out with ``style`` and place it in drawing coordinates."""
    settings = settings or LayoutSettings()
    options = format_options(data, settings)

    processor = MTextProcessor(style, fonts, options)
    if style.font and not fonts.has_font(style.font):
        key = f"{style.font}_{style.name}"
        styles = processor.diagnostics.unsupported_text_styles
        styles[key] = styles.get(key, 0) + 1
        logger.debug(f"Text style {style.name} uses unavailable font {style.font}")

    layout = processor.process_text(tokenize(data.text or ""))
    return EntityPlacement().place(
        layout,
        position=data.position,
        width=data.width or 0.0,
        attachment_point=data.attachment_point,
        flow_direction=options.flow_direction,
        rotation=data.rotation,
        direction_vector=data.direction_vector,
    )
