"""
Style Diff Module
Per-property comparison of matched elements with severity grading.
"""

import logging
from typing import Any, List, Optional

from structural_compare.comparator.results import IssueSeverity, PropertyDifference
from structural_compare.config.schema import ComparisonOptions, Severity
from structural_compare.core.models import CanonicalElement
from structural_compare.utils.color_utils import color_distance, colors_equal, hex_to_rgb
from structural_compare.utils.value_utils import (
    StyleValueKind, classify_style_value, is_number, values_equal,
)

logger = logging.getLogger(__name__)

COLOR_PROPERTIES = {'color', 'backgroundColor'}

CRITICAL_PROPERTIES = {
    'content',
    'fontSize',
    'fontWeight',
    'color',
    'backgroundColor',
    'padding',
    'gap',
}


def property_values_equal(prop: str, design_value: Any, impl_value: Any, options: ComparisonOptions) -> bool:
    """Tolerant equality for one property: colors by RGB distance, the rest by value."""
    if prop == 'content':
        return design_value == impl_value
    if prop in COLOR_PROPERTIES and isinstance(design_value, str) and isinstance(impl_value, str):
        return colors_equal(design_value, impl_value, options.color_tolerance)
    return values_equal(design_value, impl_value, options.tolerance, prop)


def get_severity(prop: str, options: ComparisonOptions) -> IssueSeverity:
    if options.severity == Severity.STRICT:
        return IssueSeverity.ERROR
    if options.severity == Severity.LENIENT:
        return IssueSeverity.INFO
    return IssueSeverity.ERROR if prop in CRITICAL_PROPERTIES else IssueSeverity.WARNING


def calculate_magnitude(design_value: Any, impl_value: Any) -> Optional[float]:
    """Absolute difference for numbers, RGB distance for hex colors, else None."""
    if is_number(design_value) and is_number(impl_value):
        return abs(design_value - impl_value)
    if isinstance(design_value, str) and isinstance(impl_value, str):
        if hex_to_rgb(design_value) and hex_to_rgb(impl_value):
            return color_distance(design_value, impl_value)
        left = classify_style_value(design_value)
        right = classify_style_value(impl_value)
        if left.kind == right.kind == StyleValueKind.DIMENSION and left.unit == right.unit:
            return abs(left.value - right.value)
        if left.kind == right.kind == StyleValueKind.NUMBER:
            return abs(left.value - right.value)
    return None


def compare_styles(design: CanonicalElement, impl: CanonicalElement,
                   options: Optional[ComparisonOptions] = None, path: Optional[str] = None) -> List[PropertyDifference]:
    """
    Differences between two matched elements.

    Text content is compared exactly and always reported as an error; style
    properties from either side are compared with the run's tolerances.
    """
    options = options or ComparisonOptions()
    path = path or design.path
    ignored = set(options.ignore_properties)
    diffs = []

    if 'content' not in ignored and design.text_content != impl.text_content:
        diffs.append(PropertyDifference(
            path=path,
            property='content',
            design_value=design.text_content,
            impl_value=impl.text_content,
            severity=IssueSeverity.ERROR,
        ))

    keys = list(design.styles)
    keys.extend(k for k in impl.styles if k not in design.styles)

    for prop in keys:
        if prop in ignored:
            continue
        design_value = design.styles.get(prop)
        impl_value = impl.styles.get(prop)
        if property_values_equal(prop, design_value, impl_value, options):
            continue
        diffs.append(PropertyDifference(
            path=path,
            property=prop,
            design_value=design_value,
            impl_value=impl_value,
            severity=get_severity(prop, options),
            magnitude=calculate_magnitude(design_value, impl_value),
        ))

    if diffs:
        logger.debug("%s: %d property differences", path, len(diffs))
    return diffs


def _format_value(value: Any) -> str:
    if value is None:
        return '(none)'
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


def format_style_diff(diff: PropertyDifference) -> str:
    """`path -> prop: "design" vs "impl" (diff: 2.00)`"""
    suffix = f" (diff: {diff.magnitude:.2f})" if diff.magnitude is not None else ''
    return f"{diff.path} -> {diff.property}: {_format_value(diff.design_value)} vs {_format_value(diff.impl_value)}{suffix}"
