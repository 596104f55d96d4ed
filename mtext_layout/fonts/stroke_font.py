"""Stroke (SHX style) fonts described as polylines in font units."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from ..exceptions import FontError
from .base import BaseFont, Contour, FontKind, GlyphShape

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StrokeGlyph:
    advance: float
    strokes: Tuple[Contour, ...]


class StrokeFont(BaseFont):
    """
    Font whose glyphs are open polylines.

    The description is a mapping::

        {
            "name": "txt",
            "height": 9,
            "glyphs": {
                "A": {"advance": 7, "strokes": [[[0, 0], [3, 9], [6, 0]], [[1, 3], [5, 3]]]},
                "U+003F": {...}
            }
        }

    ``height`` is the capital height in font units; a glyph requested at size
    ``s`` is scaled by ``s / height``. When ``advance`` is omitted the glyph's
    horizontal extent is used, as SHX shapes do.
    """

    kind = FontKind.STROKE
    NOT_FOUND_CHARS = ("?", "？")

    def __init__(self, name: str, height: float, glyphs: Mapping[str, StrokeGlyph]) -> None:
        super().__init__(name)
        if height <= 0:
            raise FontError(f"Invalid stroke font height for {name}", str(height))
        self.height = float(height)
        self.glyphs: Dict[str, StrokeGlyph] = dict(glyphs)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], name: Optional[str] = None) -> "StrokeFont":
        try:
            font_name = name or data["name"]
            height = float(data.get("height", 1.0))
            raw_glyphs = data["glyphs"]
            glyphs = {_parse_char(key): _parse_glyph(value) for key, value in raw_glyphs.items()}
        except (KeyError, TypeError, ValueError) as exc:
            raise FontError("Malformed stroke font description", str(exc)) from exc
        logger.debug(f"Stroke font {font_name} loaded with {len(glyphs)} glyphs")
        return cls(font_name, height, glyphs)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "StrokeFont":
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise FontError(f"Cannot load stroke font {path}", str(exc)) from exc
        return cls.from_dict(data, name=data.get("name") or path.stem)

    def get_scale_factor(self) -> float:
        """Stroke fonts are drawn at the requested height."""
        return 1.0

    def get_char_shape(self, char: str, size: float) -> Optional[GlyphShape]:
        glyph = self.glyphs.get(char)
        if glyph is None:
            self.add_unsupported_char(char)
            return None
        scale = size / self.height
        contours = tuple(
            tuple((x * scale, y * scale) for x, y in stroke)
            for stroke in glyph.strokes
        )
        return GlyphShape(char=char, width=glyph.advance * scale, contours=contours, kind=self.kind)

    def get_not_found_shape(self, size: float) -> Optional[GlyphShape]:
        for char in self.NOT_FOUND_CHARS:
            if char in self.glyphs:
                return self.get_char_shape(char, size)
        return None


def _parse_char(key: str) -> str:
    if len(key) > 2 and key[:2].upper() == "U+":
        return chr(int(key[2:], 16))
    if len(key) != 1:
        raise ValueError(f"glyph key must be a single character or U+XXXX, got {key!r}")
    return key


def _parse_glyph(value: Mapping[str, Any]) -> StrokeGlyph:
    strokes = tuple(
        tuple((float(x), float(y)) for x, y in stroke)
        for stroke in value.get("strokes", ())
    )
    advance = value.get("advance")
    if advance is None:
        xs = [x for stroke in strokes for x, _ in stroke]
        advance = (max(xs) - min(xs)) if xs else 0.0
    return StrokeGlyph(advance=float(advance), strokes=strokes)
