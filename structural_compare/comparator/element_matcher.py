"""
Element Matcher Module
Confidence scoring for a design/implementation element pair.
"""

from typing import Any, Dict, Optional

from structural_compare.comparator.results import MatchedPair, MatchMethod
from structural_compare.comparator.style_diff import property_values_equal
from structural_compare.config.schema import ComparisonOptions
from structural_compare.core.models import CanonicalElement, ElementKind
from structural_compare.utils.value_utils import kebab_case

COMPARABLE_PROPERTIES = [
    'content',
    'fontSize',
    'fontWeight',
    'color',
    'backgroundColor',
    'padding',
    'gap',
    'borderRadius',
]


def _property_value(element: CanonicalElement, prop: str) -> Any:
    if prop == 'content':
        return element.text_content
    return element.styles.get(prop)


def compare_elements(design: CanonicalElement, impl: CanonicalElement,
                     options: Optional[ComparisonOptions] = None,
                     match_method: MatchMethod = MatchMethod.EXACT_PATH) -> MatchedPair:
    """
    Score how well two aligned elements agree.

    Properties absent on both sides are skipped; confidence is the share of
    the remaining properties that match (1.0 when none remain).
    """
    options = options or ComparisonOptions()
    ignored = set(options.ignore_properties)
    property_matches: Dict[str, bool] = {}

    for prop in COMPARABLE_PROPERTIES:
        if prop in ignored:
            continue
        design_value = _property_value(design, prop)
        impl_value = _property_value(impl, prop)
        if design_value is None and impl_value is None:
            continue
        property_matches[prop] = property_values_equal(prop, design_value, impl_value, options)

    compared = len(property_matches)
    matched = sum(1 for ok in property_matches.values() if ok)
    confidence = matched / compared if compared else 1.0

    return MatchedPair(
        path=design.path,
        design_element=design,
        impl_element=impl,
        confidence=confidence,
        property_matches=property_matches,
        match_method=match_method,
    )


def _style_string(styles: Dict[str, Any]) -> str:
    return ' '.join(f"{kebab_case(k)}: {v};" for k, v in styles.items() if v is not None)


def generate_element_template(element: CanonicalElement) -> str:
    """Markup snippet suggesting how a missing element could be written."""
    style = _style_string(element.styles)
    if element.kind == ElementKind.TEXT:
        return f'<span style="{style}">{element.text_content or "Text"}</span>'
    if element.kind == ElementKind.BUTTON:
        return f'<button style="{style}">{element.text_content or "Button"}</button>'
    if element.kind == ElementKind.CONTAINER:
        return f'<div style="{style}">...</div>'
    return f"<!-- {element.kind.value} element -->"
