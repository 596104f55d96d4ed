"""Tests for stroke fonts, TrueType fonts and the font registry."""

import json

import pytest

from mtext_layout.exceptions import FontError
from mtext_layout.fonts import (
    FontKind,
    FontRegistry,
    GlyphProvider,
    StrokeFont,
    TrueTypeFont,
    strip_font_extension,
)


class TestStrokeFont:
    """Test suite for StrokeFont."""

    def test_shape_is_scaled_by_size(self, unit_font):
        """Test glyph outline and advance scale with the requested size."""
        shape = unit_font.get_char_shape("a", 2.5)

        assert shape.width == pytest.approx(2.5)
        assert shape.kind is FontKind.STROKE
        assert not shape.closed
        xs = [x for contour in shape.contours for x, _ in contour]
        assert max(xs) == pytest.approx(2.5)

    def test_missing_char_is_counted(self, unit_font):
        """Test unsupported characters return None and are counted."""
        assert unit_font.get_char_shape("é", 1.0) is None
        assert unit_font.get_char_shape("é", 1.0) is None
        assert unit_font.unsupported_chars == {"é": 2}

    def test_advance_defaults_to_extent(self):
        """Test the advance falls back to the horizontal extent of the strokes."""
        font = StrokeFont.from_dict({
            "name": "narrow",
            "height": 10,
            "glyphs": {"U+0049": {"strokes": [[[2, 0], [2, 10]], [[0, 0], [4, 0]]]}},
        })

        assert font.get_char_shape("I", 10).width == pytest.approx(4)

    def test_not_found_shape(self, unit_font):
        """Test the placeholder is the question mark glyph."""
        shape = unit_font.get_not_found_shape(1.0)

        assert shape.char == "?"

    def test_not_found_shape_absent(self, font_factory):
        """Test fonts without a question mark have no placeholder."""
        font = font_factory(name="letters", chars="ab")

        assert font.get_not_found_shape(1.0) is None

    def test_malformed_description_raises(self):
        """Test broken descriptions raise FontError."""
        with pytest.raises(FontError):
            StrokeFont.from_dict({"name": "broken"})
        with pytest.raises(FontError):
            StrokeFont.from_dict({"name": "broken", "glyphs": {"ab": {"strokes": []}}})

    def test_invalid_height_raises(self):
        """Test non-positive height raises FontError."""
        with pytest.raises(FontError):
            StrokeFont.from_dict({"name": "flat", "height": 0, "glyphs": {}})

    def test_from_json_file(self, tmp_path):
        """Test loading a description from disk uses the file stem as name."""
        path = tmp_path / "simplex.json"
        path.write_text(json.dumps({"height": 1, "glyphs": {"a": {"advance": 1, "strokes": []}}}))

        font = StrokeFont.from_json_file(path)

        assert font.name == "simplex"
        assert font.get_char_shape("a", 1.0) is not None

    def test_from_missing_file_raises(self, tmp_path):
        """Test a missing file raises FontError."""
        with pytest.raises(FontError):
            StrokeFont.from_json_file(tmp_path / "missing.json")


class TestTrueTypeFont:
    """Test suite for TrueTypeFont."""

    def test_scale_factor_from_capital_height(self, box_font):
        """Test scale factor is units per em over the height of 'A'."""
        assert box_font.get_scale_factor() == pytest.approx(1000 / 700)

    def test_shape(self, box_font):
        """Test outlines are closed contours scaled to the requested size."""
        shape = box_font.get_char_shape("A", 10)

        assert shape.kind is FontKind.FILLED
        assert shape.closed
        assert shape.width == pytest.approx(6.0)
        assert len(shape.contours) == 1
        ys = [y for _, y in shape.contours[0]]
        assert max(ys) == pytest.approx(7.0)

    def test_missing_char(self, box_font):
        """Test characters outside the cmap are counted as unsupported."""
        assert box_font.get_char_shape("Z", 1.0) is None
        assert box_font.unsupported_chars == {"Z": 1}

    def test_not_found_shape(self, box_font):
        """Test the placeholder is the question mark glyph."""
        assert box_font.get_not_found_shape(1.0).char == "?"

    def test_unreadable_file_raises(self, tmp_path):
        """Test a file that is not a font raises FontError."""
        path = tmp_path / "broken.ttf"
        path.write_bytes(b"not a font")

        with pytest.raises(FontError):
            TrueTypeFont(path)


class TestFontRegistry:
    """Test suite for FontRegistry."""

    def test_is_glyph_provider(self, registry):
        """Test the registry satisfies the GlyphProvider protocol."""
        assert isinstance(registry, GlyphProvider)

    def test_strip_font_extension(self):
        """Test known font extensions are stripped."""
        assert strip_font_extension("Arial.TTF") == "Arial"
        assert strip_font_extension("txt.shx") == "txt"
        assert strip_font_extension("romans") == "romans"

    def test_lookup_is_case_and_extension_insensitive(self, registry):
        """Test fonts are found regardless of case and extension."""
        assert registry.has_font("UNIT.shx")
        assert registry.get_char_shape("a", "Unit", 1.0) is not None

    def test_find_and_replace_font(self, unit_font):
        """Test found, mapped and default resolution."""
        registry = FontRegistry([unit_font], default_font="unit", font_mapping={"Arial": "unit"})

        assert registry.find_and_replace_font("unit") == "unit"
        assert registry.find_and_replace_font("arial.ttf") == "unit"
        assert registry.find_and_replace_font("nope") == "unit"
        assert registry.missed_fonts == {"nope": 1}

    def test_unknown_font_searches_all_fonts(self, unit_font, font_factory):
        """Test an unknown font name falls back to any font with the glyph."""
        other = font_factory(name="digits", chars="0123456789")
        registry = FontRegistry([other, unit_font])

        shape = registry.get_char_shape("x", "missing", 1.0)

        assert shape is not None
        assert shape.char == "x"
        assert registry.missed_fonts["missing"] == 1

    def test_empty_font_name_searches_all_fonts(self, registry):
        """Test an empty font name searches without recording a missed font."""
        assert registry.get_char_shape("a", "", 1.0) is not None
        assert registry.missed_fonts == {}

    def test_shapes_are_cached(self, registry, unit_font):
        """Test repeated lookups hit the cache."""
        registry.get_char_shape("é", "unit", 1.0)
        registry.get_char_shape("é", "unit", 1.0)

        assert unit_font.unsupported_chars == {"é": 1}
        assert registry.get_unsupported_chars() == {"é": 1}

    def test_font_kind_and_scale(self, unit_font, box_font):
        """Test kind and scale factor come from the named font."""
        registry = FontRegistry([unit_font, box_font])

        assert registry.get_font_kind("unit") is FontKind.STROKE
        assert registry.get_font_kind("box") is FontKind.FILLED
        assert registry.get_font_kind("unknown") is FontKind.FILLED
        assert registry.get_font_scale_factor("unit") == 1.0
        assert registry.get_font_scale_factor("box") == pytest.approx(1000 / 700)

    def test_empty_registry(self):
        """Test an empty registry answers every glyph query with None."""
        registry = FontRegistry()

        assert registry.get_char_shape("a", "unit", 1.0) is None
        assert registry.get_not_found_shape(1.0) is None

    def test_unregister_and_release(self, registry, font_factory):
        """Test fonts can be removed individually or all at once."""
        registry.unregister("unit")
        assert not registry.has_font("unit")

        registry.register(font_factory())
        registry.release()
        assert len(registry) == 0
