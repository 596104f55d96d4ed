"""
Layout settings.

Engine-wide knobs that are not carried by the MText entity itself: line
spacing calibration, default/fallback fonts, font name mapping and the colors
substituted for the by-layer / by-block color indices.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from .exceptions import ConfigurationError
from .utils.color_utils import ColorSettings, WHITE, hex_to_int

logger = logging.getLogger(__name__)

# The line spacing shown in the MText property palette is this multiple of
# the line space factor times the text height.
LINE_SPACING_SCALE_FACTOR = 1.666666

DEFAULT_LINE_SPACE_FACTOR = 0.3


@dataclass
class LayoutSettings:
    """Settings shared by all layout passes of one application."""

    line_spacing_scale: float = LINE_SPACING_SCALE_FACTOR
    default_line_space_factor: float = DEFAULT_LINE_SPACE_FACTOR
    default_font: str = "simsun"
    font_mapping: Dict[str, str] = field(default_factory=dict)
    remove_font_extension: bool = True
    colors: ColorSettings = field(default_factory=ColorSettings)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.line_spacing_scale <= 0:
            raise ConfigurationError(
                "Invalid line spacing scale", f"expected a positive number, got {self.line_spacing_scale}"
            )
        if self.default_line_space_factor < 0:
            raise ConfigurationError(
                "Invalid line space factor", f"expected a non-negative number, got {self.default_line_space_factor}"
            )
        if not isinstance(self.font_mapping, dict):
            raise ConfigurationError("Font mapping must be a dictionary")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LayoutSettings":
        """
        Build settings from a plain mapping (e.g. parsed JSON).

        Colors may be given as integers or ``#rrggbb`` strings under
        ``by_layer_color`` / ``by_block_color``. Unknown keys are ignored.
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError("Layout settings must be a mapping", type(data).__name__)

        known = {f.name for f in fields(cls)} - {"colors"}
        kwargs: Dict[str, Any] = {key: value for key, value in data.items() if key in known}
        unknown = set(data) - known - {"by_layer_color", "by_block_color"}
        if unknown:
            logger.debug(f"Ignoring unknown layout settings: {sorted(unknown)}")

        kwargs["colors"] = ColorSettings(
            by_layer_color=_parse_color(data.get("by_layer_color", WHITE)),
            by_block_color=_parse_color(data.get("by_block_color", WHITE)),
        )
        try:
            return cls(**kwargs)
        except TypeError as exc:
            raise ConfigurationError("Invalid layout settings", str(exc)) from exc

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "LayoutSettings":
        """Load settings from a JSON file."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"Cannot read layout settings from {path}", str(exc)) from exc
        return cls.from_dict(data)


def _parse_color(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError("Invalid color value", repr(value))
    if isinstance(value, int):
        return value & 0xFFFFFF
    if isinstance(value, str):
        parsed = hex_to_int(value)
        if parsed is not None:
            return parsed
    raise ConfigurationError("Invalid color value", repr(value))
