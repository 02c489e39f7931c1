"""Hex color parsing and WCAG contrast selection."""

import logging
import re
from typing import Tuple

logger = logging.getLogger(__name__)

WHITE = "#ffffff"
BLACK = "#000000"
FALLBACK_RGB = (99, 102, 241)  # #6366F1

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def is_hex_color(value: str) -> bool:
    return bool(value) and bool(HEX_COLOR.match(value))


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert '#rgb' or '#rrggbb' to an RGB tuple, falling back on bad input."""
    value = (hex_color or "").strip().lstrip("#")
    if len(value) == 3:
        value = "".join(c * 2 for c in value)
    try:
        if len(value) != 6:
            raise ValueError("Invalid hex color format")
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))
    except ValueError:
        logger.warning(f"Invalid color format {hex_color!r}, using fallback")
        return FALLBACK_RGB


def relative_luminance(r: int, g: int, b: int) -> float:
    def channel(c):
        c = c / 255
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    return 0.2126 * channel(r) + 0.7152 * channel(g) + 0.0722 * channel(b)


def get_contrast_color(background: str, dark: str = BLACK, light: str = WHITE) -> str:
    """Pick dark text on light backgrounds and light text on dark ones."""
    luminance = relative_luminance(*hex_to_rgb(background))
    return dark if luminance > 0.5 else light
