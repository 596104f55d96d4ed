"""
Utils module for MText layout.

Logging helpers, the glyph cache, color conversion and shared enumerations.
"""

from .cache import Cache
from .color_utils import (
    ACI_PALETTE,
    BY_BLOCK,
    BY_LAYER,
    ColorSettings,
    get_color_by_index,
    int_to_rgb,
    resolve_aci,
    rgb_to_int,
)
from .enums import AttachmentPoint, FlowDirection, GeometryTag, ParagraphAlignment
from .logger import configure_logging

__all__ = [
    "Cache",
    "ACI_PALETTE",
    "BY_BLOCK",
    "BY_LAYER",
    "ColorSettings",
    "get_color_by_index",
    "int_to_rgb",
    "resolve_aci",
    "rgb_to_int",
    "AttachmentPoint",
    "FlowDirection",
    "GeometryTag",
    "ParagraphAlignment",
    "configure_logging",
]
