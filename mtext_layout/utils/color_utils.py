"""Color utilities: AutoCAD Color Index palette and 24-bit RGB helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

BY_BLOCK = 0
BY_LAYER = 256

WHITE = 0xFFFFFF

# Indices 1-9 are fixed named colors, 250-255 a gray ramp.
_STANDARD_COLORS = {
    1: (255, 0, 0),
    2: (255, 255, 0),
    3: (0, 255, 0),
    4: (0, 255, 255),
    5: (0, 0, 255),
    6: (255, 0, 255),
    7: (255, 255, 255),
    8: (128, 128, 128),
    9: (192, 192, 192),
}

_GRAY_RAMP = (51, 80, 105, 130, 190, 255)

# Indices 10-249: 24 hues in 15 degree steps, each with five brightness levels
# in a full-saturation / half-saturation pair.
_LEVELS = (1.0, 1.0, 0.8, 0.8, 0.6, 0.6, 0.5, 0.5, 0.3, 0.3)


@dataclass(frozen=True)
class ColorSettings:
    """Colors substituted for the reserved by-layer / by-block indices."""

    by_layer_color: int = WHITE
    by_block_color: int = WHITE


def rgb_to_int(r: int, g: int, b: int) -> int:
    """Pack an RGB triple into a 24-bit integer."""
    return ((int(r) & 0xFF) << 16) + ((int(g) & 0xFF) << 8) + (int(b) & 0xFF)


def int_to_rgb(value: int) -> Tuple[int, int, int]:
    """Unpack a 24-bit integer into an RGB triple."""
    value = int(value)
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


def int_to_unit_rgb(value: int) -> Tuple[float, float, float]:
    """Color channels in the 0-1 range, as expected by PDF canvases."""
    r, g, b = int_to_rgb(value)
    return r / 255.0, g / 255.0, b / 255.0


def hex_to_int(hex_color: str) -> Optional[int]:
    """Convert ``#rrggbb`` (or ``#rgb``) to a 24-bit integer."""
    if not hex_color or not isinstance(hex_color, str):
        return None

    hex_color = hex_color.lstrip('#')
    if len(hex_color) == 3:
        hex_color = ''.join([c * 2 for c in hex_color])

    try:
        return int(hex_color, 16) & 0xFFFFFF if len(hex_color) == 6 else None
    except ValueError:
        return None


def _hsv_channels(hue: float, saturation: float, value: float) -> Tuple[int, int, int]:
    high = value
    low = value * (1.0 - saturation)
    sector = hue / 60.0
    index = int(math.floor(sector)) % 6
    fraction = sector - math.floor(sector)
    rising = low + (high - low) * fraction
    falling = high - (high - low) * fraction
    r, g, b = (
        (high, rising, low),
        (falling, high, low),
        (low, high, rising),
        (low, falling, high),
        (rising, low, high),
        (high, low, falling),
    )[index]
    return int(math.floor(r)), int(math.floor(g)), int(math.floor(b))


def _build_palette() -> List[Tuple[int, int, int]]:
    palette: List[Tuple[int, int, int]] = [(0, 0, 0)] * 256
    for index, rgb in _STANDARD_COLORS.items():
        palette[index] = rgb
    for index in range(10, 250):
        hue = ((index - 10) // 10) * 15.0
        variant = (index - 10) % 10
        saturation = 1.0 if variant % 2 == 0 else 0.5
        value = math.floor(255 * _LEVELS[variant])
        palette[index] = _hsv_channels(hue, saturation, value)
    for offset, gray in enumerate(_GRAY_RAMP):
        palette[250 + offset] = (gray, gray, gray)
    return palette


ACI_PALETTE: Sequence[Tuple[int, int, int]] = tuple(_build_palette())


def get_color_by_index(index: int) -> int:
    """
    Resolve a non-reserved ACI index (1-255) to a 24-bit RGB value.

    Out-of-range indices resolve to white so that malformed color codes never
    interrupt a layout pass.
    """
    if 1 <= index <= 255:
        return rgb_to_int(*ACI_PALETTE[index])
    return WHITE


def resolve_aci(index: int, settings: ColorSettings) -> int:
    """Resolve an ACI index, deferring 0 and 256 to the supplied color settings."""
    if index == BY_BLOCK:
        return settings.by_block_color
    if index == BY_LAYER:
        return settings.by_layer_color
    return get_color_by_index(index)
