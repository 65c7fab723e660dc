"""
Color Utilities Module
Hex/RGB conversion, color distance and contrast helpers.
"""

import math
import re
from typing import Dict, Optional

HEX_PATTERN = re.compile(r'^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$', re.IGNORECASE)
HEX_ALPHA_PATTERN = re.compile(r'^#([a-f\d]{6})([a-f\d]{2})$', re.IGNORECASE)
RGBA_PATTERN = re.compile(r'rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*([\d.]+%?)\s*)?\)', re.IGNORECASE)

# Distance returned when either side cannot be parsed as a hex color
MAX_COLOR_DISTANCE = 255 * math.sqrt(3)


def hex_to_rgb(hex_color: str) -> Optional[Dict[str, int]]:
    """
    Convert a 6-digit hex color (#RRGGBB) to an {r, g, b} dict.

    Short forms (#RGB), 8-digit forms and named colors return None.
    """
    if not isinstance(hex_color, str):
        return None
    match = HEX_PATTERN.match(hex_color)
    if not match:
        return None
    return {
        'r': int(match.group(1), 16),
        'g': int(match.group(2), 16),
        'b': int(match.group(3), 16),
    }


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Convert RGB channels (clamped to 0-255) to a lowercase #rrggbb string."""
    def to_hex(n):
        return format(int(round(max(0, min(255, n)))), '02x')
    return f"#{to_hex(r)}{to_hex(g)}{to_hex(b)}"


def color_distance(color1: str, color2: str) -> float:
    """Euclidean distance between two hex colors in RGB space."""
    rgb1 = hex_to_rgb(color1)
    rgb2 = hex_to_rgb(color2)
    if not rgb1 or not rgb2:
        return 0.0 if color1 == color2 else MAX_COLOR_DISTANCE
    return math.sqrt(
        (rgb1['r'] - rgb2['r']) ** 2 +
        (rgb1['g'] - rgb2['g']) ** 2 +
        (rgb1['b'] - rgb2['b']) ** 2
    )


def colors_equal(color1: str, color2: str, tolerance: float = 0) -> bool:
    """Compare two colors, allowing an RGB distance up to `tolerance`."""
    if color1 == color2:
        return True
    return color_distance(color1, color2) <= tolerance


def parse_alpha(color: str) -> Optional[float]:
    """
    Return the alpha channel (0-1) of a color string, or None if it carries none.

    Understands rgba(), #RRGGBBAA and the `transparent` keyword.
    """
    if not isinstance(color, str):
        return None
    value = color.strip()
    if value.lower() == 'transparent':
        return 0.0
    match = HEX_ALPHA_PATTERN.match(value)
    if match:
        return int(match.group(2), 16) / 255
    match = RGBA_PATTERN.match(value)
    if match and match.group(4) is not None:
        alpha = match.group(4)
        if alpha.endswith('%'):
            return float(alpha[:-1]) / 100
        return float(alpha)
    return None


def is_light_color(hex_color: str) -> bool:
    """YIQ brightness check; unparsable colors are treated as dark."""
    rgb = hex_to_rgb(hex_color)
    if not rgb:
        return False
    brightness = (rgb['r'] * 299 + rgb['g'] * 587 + rgb['b'] * 114) / 1000
    return brightness > 128


def is_dark_color(hex_color: str) -> bool:
    return not is_light_color(hex_color)


def _relative_luminance(rgb: Dict[str, int]) -> float:
    channels = []
    for key in ('r', 'g', 'b'):
        v = rgb[key] / 255
        channels.append(v / 12.92 if v <= 0.03928 else ((v + 0.055) / 1.055) ** 2.4)
    return channels[0] * 0.2126 + channels[1] * 0.7152 + channels[2] * 0.0722


def get_contrast_ratio(color1: str, color2: str) -> float:
    """WCAG contrast ratio between two hex colors (1.0 when either is unparsable)."""
    rgb1 = hex_to_rgb(color1)
    rgb2 = hex_to_rgb(color2)
    if not rgb1 or not rgb2:
        return 1.0
    l1 = _relative_luminance(rgb1)
    l2 = _relative_luminance(rgb2)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def passes_wcag_aa(foreground: str, background: str, is_large_text: bool = False) -> bool:
    """Check the WCAG AA threshold (4.5:1, or 3:1 for large text)."""
    threshold = 3.0 if is_large_text else 4.5
    return get_contrast_ratio(foreground, background) >= threshold
