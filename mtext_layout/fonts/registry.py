"""
Font registry: the glyph provider handed to the layout engine.

Keeps the loaded fonts keyed by lower-case name (extension stripped),
resolves missing font names through a mapping table and a default font,
answers glyph queries with a fallback search across every loaded font and
records the characters and fonts that could not be served.
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import Dict, Iterable, Mapping, Optional

from ..utils.cache import Cache
from .base import BaseFont, FontKind, GlyphShape

logger = logging.getLogger(__name__)

FONT_EXTENSIONS = (".ttf", ".otf", ".woff", ".shx")


def strip_font_extension(font_name: str) -> str:
    lowered = font_name.lower()
    for extension in FONT_EXTENSIONS:
        if lowered.endswith(extension):
            return font_name[: -len(extension)]
    return font_name


class FontRegistry:
    """Glyph provider backed by an ordered set of fonts.

    Registration order is search order for the "any font" fallback. All
    queries are read-only apart from the diagnostic counters and the shape
    cache, which are lock protected, so one registry can serve concurrent
    layout passes.
    """

    def __init__(
        self,
        fonts: Iterable[BaseFont] = (),
        default_font: str = "simsun",
        font_mapping: Optional[Mapping[str, str]] = None,
        cache_size: int = 4096,
    ) -> None:
        self._fonts: Dict[str, BaseFont] = {}
        self.default_font = default_font.lower()
        self.font_mapping: Dict[str, str] = {}
        self.missed_fonts: Dict[str, int] = {}
        self._cache = Cache(max_size=cache_size)
        self._lock = RLock()
        if font_mapping:
            self.set_font_mapping(font_mapping)
        for font in fonts:
            self.register(font)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register(self, font: BaseFont) -> None:
        with self._lock:
            key = strip_font_extension(font.name).lower()
            self._fonts[key] = font
            self._cache.clear()
        logger.debug(f"Font registered: {key} ({font.kind.value})")

    def unregister(self, font_name: str) -> None:
        with self._lock:
            self._fonts.pop(self._key(font_name), None)
            self._cache.clear()

    def set_font_mapping(self, mapping: Mapping[str, str]) -> None:
        self.font_mapping = {self._key(name): target for name, target in mapping.items()}

    def release(self) -> None:
        with self._lock:
            self._fonts.clear()
            self._cache.clear()

    def __len__(self) -> int:
        return len(self._fonts)

    @staticmethod
    def _key(font_name: Optional[str]) -> str:
        return strip_font_extension(font_name or "").lower()

    def get_font(self, font_name: str) -> Optional[BaseFont]:
        return self._fonts.get(self._key(font_name))

    def has_font(self, font_name: str) -> bool:
        return self._key(font_name) in self._fonts

    # ------------------------------------------------------------------
    # Queries used by the layout engine
    # ------------------------------------------------------------------
    def find_and_replace_font(self, font_name: str) -> str:
        """Return ``font_name`` if loaded, else its mapped replacement, else the default font."""
        if self.has_font(font_name):
            return font_name
        mapped = self.font_mapping.get(self._key(font_name))
        if mapped:
            logger.debug(f"Font {font_name} mapped to {mapped}")
            return mapped
        self.record_missed_font(font_name)
        logger.debug(f"Font {font_name} not found, using default font {self.default_font}")
        return self.default_font

    def get_font_kind(self, font_name: str) -> FontKind:
        font = self.get_font(font_name)
        return font.kind if font is not None else FontKind.FILLED

    def get_font_scale_factor(self, font_name: str) -> float:
        font = self.get_font(font_name)
        return font.get_scale_factor() if font is not None else 1.0

    def get_char_shape(self, char: str, font_name: str, size: float) -> Optional[GlyphShape]:
        """
        Shape of ``char`` in ``font_name`` at ``size``.

        An unknown or empty font name searches every loaded font in
        registration order and uses the first one that has the character.
        Never raises for missing glyphs.
        """
        if not self._fonts:
            return None
        key = (self._key(font_name), char, round(float(size), 9))
        return self._cache.get_or_set(key, lambda: self._lookup(char, font_name, size))

    def _lookup(self, char: str, font_name: str, size: float) -> Optional[GlyphShape]:
        font = self.get_font(font_name)
        if font is not None:
            return font.get_char_shape(char, size)
        self.record_missed_font(font_name)
        for candidate in list(self._fonts.values()):
            shape = candidate.get_char_shape(char, size)
            if shape is not None:
                return shape
        return None

    def get_not_found_shape(self, size: float) -> Optional[GlyphShape]:
        for font in list(self._fonts.values()):
            shape = font.get_not_found_shape(size)
            if shape is not None:
                return shape
        return None

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    def record_missed_font(self, font_name: str) -> None:
        if not font_name:
            return
        with self._lock:
            self.missed_fonts[font_name] = self.missed_fonts.get(font_name, 0) + 1

    def get_unsupported_chars(self) -> Dict[str, int]:
        """Unsupported character counts merged over all fonts."""
        merged: Dict[str, int] = {}
        for font in list(self._fonts.values()):
            for char, count in font.unsupported_chars.items():
                merged[char] = merged.get(char, 0) + count
        return merged
