"""
Tests for hex color parsing.
"""
import pytest

from chromadepth.utils.colors import RGB, is_hex_color, parse_hex_color, to_hex


class TestParseHexColor:
    """Test well-formed and malformed hex strings."""

    def test_white_with_hash(self):
        """Test '#ffffff' parses to white."""
        assert parse_hex_color("#ffffff") == RGB(255, 255, 255)

    def test_black_without_hash(self):
        """Test '000000' parses to black."""
        assert parse_hex_color("000000") == RGB(0, 0, 0)

    def test_mixed_case_channels(self):
        """Test each channel is read from its own digit pair."""
        assert parse_hex_color("#FF8000") == RGB(255, 128, 0)
        assert parse_hex_color("1a2B3c") == RGB(26, 43, 60)

    @pytest.mark.parametrize("text", [
        "#xyz",
        "",
        "#",
        "fffff",
        "#fffffff",
        "##ffffff",
        "#ggggg0",
        " #ffffff",
        "#ffffff\n",
    ])
    def test_malformed_returns_black(self, text):
        """Test malformed strings yield black instead of raising."""
        assert parse_hex_color(text) == RGB(0, 0, 0)

    @pytest.mark.parametrize("value", [None, 0xFFFFFF, b"#ffffff", ["#ffffff"]])
    def test_non_string_returns_black(self, value):
        """Test non-string input yields black."""
        assert parse_hex_color(value) == RGB(0, 0, 0)


class TestHexHelpers:
    """Test validation and formatting helpers."""

    def test_is_hex_color(self):
        """Test is_hex_color agrees with the parser's notion of well-formed."""
        assert is_hex_color("#00FF00")
        assert is_hex_color("00ff00")
        assert not is_hex_color("#0f0")
        assert not is_hex_color(None)

    def test_to_hex(self):
        """Test formatting uses uppercase and a leading '#'."""
        assert to_hex(RGB(255, 128, 0)) == "#FF8000"
        assert parse_hex_color(to_hex(RGB(1, 2, 3))) == RGB(1, 2, 3)
