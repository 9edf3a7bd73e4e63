"""Hex color parsing."""

import re
from typing import NamedTuple

from chromadepth.utils.logger import get_logger

logger = get_logger(__name__)

_HEX_RE = re.compile(r"#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})")


class RGB(NamedTuple):
    """8-bit RGB triple."""
    r: int
    g: int
    b: int


BLACK = RGB(0, 0, 0)


def parse_hex_color(text) -> RGB:
    """
    Parse ``#RRGGBB`` or ``RRGGBB`` into an RGB triple.

    Malformed input (wrong length, non-hex digits, empty or non-string)
    is not an error: it yields black.

    Args:
        text: Hex color string, leading '#' optional, either case.

    Returns:
        RGB triple with channels in 0-255.
    """
    if not isinstance(text, str):
        logger.debug(f"Non-string color {text!r}, using black")
        return BLACK

    match = _HEX_RE.fullmatch(text)
    if match is None:
        logger.debug(f"Malformed hex color {text!r}, using black")
        return BLACK

    return RGB(*(int(part, 16) for part in match.groups()))


def is_hex_color(text) -> bool:
    """True if text is a well-formed 6-digit hex color."""
    return isinstance(text, str) and _HEX_RE.fullmatch(text) is not None


def to_hex(color: RGB) -> str:
    """Format an RGB triple as ``#RRGGBB``."""
    return "#{:02X}{:02X}{:02X}".format(*color)
