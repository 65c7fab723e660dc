"""
Value Utilities Module
Case conversion, CSS unit coercion and tolerant value comparison.
"""

import re
import uuid
from enum import Enum
from typing import Any, NamedTuple, Optional, Tuple, Union

Number = Union[int, float]

UNIT_PATTERN = re.compile(r'^(-?\d*\.?\d+)(px|rem|em|%|vh|vw|s|ms)?$')
PX_PATTERN = re.compile(r'^(-?\d*\.?\d+)(px)?$')
SHORT_HEX_PATTERN = re.compile(r'^#?([a-f\d])([a-f\d])([a-f\d])$', re.IGNORECASE)
LEADING_INT_PATTERN = re.compile(r'^\s*([+-]?\d+)')

DEFAULT_ROOT_FONT_SIZE = 16

FONT_WEIGHT_KEYWORDS = {
    'normal': 400,
    'bold': 700,
}


class StyleValueKind(str, Enum):
    NUMBER = 'number'
    DIMENSION = 'dimension'
    COLOR = 'color'
    TEXT = 'text'


class StyleValue(NamedTuple):
    """A style value tagged with how it should be compared."""
    kind: StyleValueKind
    value: Any
    unit: str = ''


def camel_case(name: str) -> str:
    """kebab-case -> camelCase (background-color -> backgroundColor)."""
    return re.sub(r'-([a-z])', lambda m: m.group(1).upper(), name)


def kebab_case(name: str) -> str:
    """camelCase -> kebab-case (backgroundColor -> background-color)."""
    return re.sub(r'([a-z])([A-Z])', lambda m: f"{m.group(1)}-{m.group(2).lower()}", name)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_number(raw: str) -> Number:
    num = float(raw)
    return int(num) if num.is_integer() else num


def parse_unit(value: Any) -> Optional[Tuple[Number, str]]:
    """
    Split a CSS value into (number, unit).

    Returns None unless the whole value is a number with an optional
    px/rem/em/%/vh/vw/s/ms unit. A bare number has unit ''.
    """
    if not isinstance(value, str):
        return None
    match = UNIT_PATTERN.match(value.strip())
    if not match:
        return None
    return _to_number(match.group(1)), match.group(2) or ''


def convert_to_px(value: Number, unit: str, root_font_size: Number = DEFAULT_ROOT_FONT_SIZE) -> Number:
    """Convert a unit-bearing number to pixels; unknown units pass through."""
    if unit in ('rem', 'em'):
        return value * root_font_size
    if unit == '%':
        return (value / 100) * root_font_size
    return value


def coerce_css_value(value: Any) -> Any:
    """
    Normalize a CSS value at the parsing boundary.

    Unitless and px values become numbers; values carrying any other unit
    (and everything that is not a plain dimension) stay as trimmed strings.
    """
    if not isinstance(value, str):
        return value
    stripped = value.strip()
    match = PX_PATTERN.match(stripped)
    if match:
        return _to_number(match.group(1))
    return stripped


def normalize_value(value: Any, value_type: str) -> Any:
    """Normalize a value to a common representation for the given type."""
    if value is None:
        return None
    if value_type == 'number':
        if is_number(value):
            return value
        try:
            return float(value)
        except (TypeError, ValueError):
            return 0
    if value_type == 'string':
        return str(value)
    if value_type == 'color' and isinstance(value, str):
        match = SHORT_HEX_PATTERN.match(value)
        if match:
            return '#' + ''.join(c * 2 for c in match.groups())
    return value


def classify_style_value(value: Any) -> StyleValue:
    """Tag a raw style value as number (px), dimension, color or text."""
    if is_number(value):
        return StyleValue(StyleValueKind.NUMBER, value, 'px')
    if isinstance(value, str):
        parsed = parse_unit(value)
        if parsed:
            number, unit = parsed
            if unit in ('', 'px'):
                return StyleValue(StyleValueKind.NUMBER, number, 'px')
            return StyleValue(StyleValueKind.DIMENSION, number, unit)
        lowered = value.strip().lower()
        if lowered.startswith(('#', 'rgb', 'hsl')) or lowered == 'transparent':
            return StyleValue(StyleValueKind.COLOR, value.strip())
    return StyleValue(StyleValueKind.TEXT, value)


def _font_weight_number(value: Any) -> Optional[int]:
    if isinstance(value, str):
        keyword = FONT_WEIGHT_KEYWORDS.get(value.strip().lower())
        if keyword is not None:
            return keyword
        match = LEADING_INT_PATTERN.match(value)
        return int(match.group(1)) if match else None
    if is_number(value):
        return int(value)
    return None


def values_equal(val1: Any, val2: Any, tolerance: Number = 0, property_hint: Optional[str] = None) -> bool:
    """
    Compare two style values with a numeric tolerance.

    - None on both sides is equal; None on one side is not.
    - fontWeight keywords are mapped to numbers ("normal" -> 400).
    - Numbers match when |a - b| <= tolerance.
    - Strings match case-insensitively; two dimensions with the same unit
      are compared numerically.
    """
    if val1 is None:
        return val2 is None
    if val2 is None:
        return False

    if type(val1) is type(val2) and val1 == val2:
        return True

    if property_hint == 'fontWeight':
        num1 = _font_weight_number(val1)
        num2 = _font_weight_number(val2)
        if num1 is not None and num2 is not None:
            return num1 == num2

    if is_number(val1) and is_number(val2):
        return abs(val1 - val2) <= tolerance

    if isinstance(val1, str) and isinstance(val2, str):
        if val1.lower() == val2.lower():
            return True
        dim1 = classify_style_value(val1)
        dim2 = classify_style_value(val2)
        if dim1.kind == StyleValueKind.DIMENSION and dim2.kind == StyleValueKind.DIMENSION \
                and dim1.unit == dim2.unit:
            return abs(dim1.value - dim2.value) <= tolerance
        return False

    return False


def is_empty(value: Any) -> bool:
    """None, blank strings and empty containers are empty."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def generate_id(prefix: str = 'id') -> str:
    """Unique element identifier; never reused within a process."""
    return f"{prefix}_{uuid.uuid4().hex}"
