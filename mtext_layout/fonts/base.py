"""
Font abstractions shared by the layout engine and the font implementations.

A font turns one character at one size into a :class:`GlyphShape`: an advance
width plus outline contours in drawing units, with the glyph origin at the
left end of its baseline. Two font kinds exist: stroke fonts (SHX style,
open polylines rendered as line segments) and filled fonts (TrueType /
OpenType, closed contours rendered as filled meshes).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from threading import RLock
from typing import Dict, Optional, Protocol, Tuple, runtime_checkable

from ..utils.enums import GeometryTag

Point = Tuple[float, float]
Contour = Tuple[Point, ...]


@dataclass(frozen=True)
class FontKindBehavior:
    """Per-kind constants consulted by the layout engine."""

    blank_ratio: float
    italic_adds_to_oblique: bool
    tag: GeometryTag


class FontKind(str, Enum):
    """Kind of glyph geometry a font produces."""

    STROKE = "shx"
    FILLED = "mesh"

    @property
    def behavior(self) -> FontKindBehavior:
        return _KIND_BEHAVIOR[self]

    @property
    def blank_ratio(self) -> float:
        """Width of a blank as a fraction of the text height."""
        return self.behavior.blank_ratio

    @property
    def tag(self) -> GeometryTag:
        return self.behavior.tag


_KIND_BEHAVIOR: Dict[FontKind, FontKindBehavior] = {
    # Stroke fonts: blank is half the text height, italic is a plain 15 degree shear.
    FontKind.STROKE: FontKindBehavior(blank_ratio=0.5, italic_adds_to_oblique=False, tag=GeometryTag.STROKE),
    FontKind.FILLED: FontKindBehavior(blank_ratio=0.3, italic_adds_to_oblique=True, tag=GeometryTag.FILL),
}


@dataclass(frozen=True)
class GlyphShape:
    """Outline and advance of one character at one size."""

    char: str
    width: float
    contours: Tuple[Contour, ...]
    kind: FontKind

    @property
    def closed(self) -> bool:
        return self.kind is FontKind.FILLED


@runtime_checkable
class GlyphProvider(Protocol):
    """Read-only glyph queries issued by the layout engine."""

    def get_char_shape(self, char: str, font_name: str, size: float) -> Optional[GlyphShape]:
        """Shape of ``char`` in ``font_name``; an empty font name searches every loaded font."""

    def get_not_found_shape(self, size: float) -> Optional[GlyphShape]:
        """Placeholder shape drawn for characters no font can render."""

    def get_font_kind(self, font_name: str) -> FontKind:
        ...

    def get_font_scale_factor(self, font_name: str) -> float:
        ...

    def find_and_replace_font(self, font_name: str) -> str:
        """Return ``font_name`` when available, otherwise its mapped or default replacement."""

    def has_font(self, font_name: str) -> bool:
        ...


class BaseFont(ABC):
    """Abstract base class for font implementations."""

    kind: FontKind = FontKind.FILLED

    def __init__(self, name: str) -> None:
        self.name = name.lower()
        self.unsupported_chars: Dict[str, int] = {}
        self._lock = RLock()

    @abstractmethod
    def get_char_shape(self, char: str, size: float) -> Optional[GlyphShape]:
        """Shape of ``char`` scaled to ``size`` or ``None`` if the font lacks it."""

    @abstractmethod
    def get_scale_factor(self) -> float:
        """Ratio applied to the requested text height so capitals reach that height."""

    @abstractmethod
    def get_not_found_shape(self, size: float) -> Optional[GlyphShape]:
        """Replacement shape for characters missing from every font."""

    def add_unsupported_char(self, char: str) -> None:
        with self._lock:
            self.unsupported_chars[char] = self.unsupported_chars.get(char, 0) + 1

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
