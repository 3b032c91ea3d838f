"""
Tests for enum conversion utilities
"""

import logging

from core.enums import ColorScheme, TransformKind
from core.utils.enum_converter import enum_to_string, parse_enum


class TestParseEnum:
    """Test parse_enum with fallbacks"""

    def test_enum_instance_passes_through(self):
        assert parse_enum(ColorScheme.PASTEL, ColorScheme, ColorScheme.RAINBOW) == ColorScheme.PASTEL

    def test_normalize(self):
        """Test case-insensitive matching"""
        assert parse_enum("SOBEL", TransformKind, None, normalize=True) == TransformKind.SOBEL
        assert parse_enum("SOBEL", TransformKind, None) is None

    def test_unknown_value_warns_when_asked(self, caplog):
        """Test that the fallback path logs the rejected name"""
        with caplog.at_level(logging.WARNING, logger="core.utils.enum_converter"):
            result = parse_enum("neon", ColorScheme, ColorScheme.RAINBOW, warn=True)

        assert result == ColorScheme.RAINBOW
        assert "neon" in caplog.text
        assert "rainbow" in caplog.text

    def test_unknown_value_silent_by_default(self, caplog):
        with caplog.at_level(logging.WARNING, logger="core.utils.enum_converter"):
            assert parse_enum("neon", ColorScheme, None) is None

        assert caplog.text == ""

    def test_none_and_valid_names_do_not_warn(self, caplog):
        """Test that only a rejected name is warned about"""
        with caplog.at_level(logging.WARNING, logger="core.utils.enum_converter"):
            assert parse_enum(None, ColorScheme, ColorScheme.RAINBOW, warn=True) == ColorScheme.RAINBOW
            assert (
                parse_enum("highContrast", ColorScheme, ColorScheme.RAINBOW, warn=True)
                == ColorScheme.HIGH_CONTRAST
            )

        assert caplog.text == ""


def test_enum_to_string():
    assert enum_to_string(TransformKind.CANNY) == "canny"
    assert enum_to_string("canny") == "canny"
