"""
Structure Comparator Module
Aligns two canonical forests and classifies every element as matched,
missing or extra, collecting property differences along the way.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Union

from structural_compare.comparator.element_matcher import compare_elements
from structural_compare.comparator.results import (
    ComparisonOutcome, ExtraElement, IssueSeverity, MatchedPair, MatchMethod,
    MissingElement, OverallStatus, Verdict,
)
from structural_compare.comparator.style_diff import compare_styles
from structural_compare.config.name_mapping import NameMapping
from structural_compare.config.schema import ComparisonOptions, Severity
from structural_compare.core.models import CanonicalElement, ElementKind, iter_elements
from structural_compare.utils.path_utils import are_paths_equivalent_by_name, sort_paths

logger = logging.getLogger(__name__)

CONTENT_MATCH_CONFIDENCE = 0.7
MIN_MATCH_CONFIDENCE = 0.5

MISSING_REASON = 'Present in design but not in implementation'
EXTRA_REASON = 'Present in implementation but not in design'

KIND_LABELS = {
    ElementKind.TEXT: 'text element',
    ElementKind.BUTTON: 'button',
    ElementKind.CONTAINER: 'container',
}


def _content_key(element: CanonicalElement) -> Optional[str]:
    if element.text_content and element.text_content.strip():
        return element.text_content.strip().lower()
    return None


def index_elements(elements: Iterable[CanonicalElement], side: str) -> Dict[str, CanonicalElement]:
    """Pre-order path index; a later element with the same path replaces the earlier one."""
    index: Dict[str, CanonicalElement] = {}
    for element in iter_elements(elements):
        previous = index.get(element.path)
        if previous is not None:
            logger.debug("Duplicate %s path %s: element %s replaces %s",
                         side, element.path, element.id, previous.id)
        index[element.path] = element
    return index


def index_by_content(elements: Iterable[CanonicalElement]) -> Dict[str, List[CanonicalElement]]:
    """Trimmed, lower-cased text -> elements in pre-order encounter order."""
    index: Dict[str, List[CanonicalElement]] = {}
    for element in iter_elements(elements):
        key = _content_key(element)
        if key is not None:
            index.setdefault(key, []).append(element)
    return index


def find_match_by_content(target: CanonicalElement, content_index: Mapping[str, List[CanonicalElement]],
                          claimed: Set[str]) -> Optional[CanonicalElement]:
    """First unclaimed candidate with the same text, preferring one of the same kind."""
    key = _content_key(target)
    if key is None:
        return None
    candidates = [c for c in content_index.get(key, []) if c.id not in claimed]
    for candidate in candidates:
        if candidate.kind == target.kind:
            return candidate
    return candidates[0] if candidates else None


def generate_suggestion(element: CanonicalElement) -> str:
    parts = []
    if element.text_content:
        parts.append(f'"{element.text_content}"')
    parts.append(KIND_LABELS.get(element.kind, element.kind.value))
    return f"Add: {' '.join(parts)}"


def calculate_verdict(outcome: ComparisonOutcome) -> Verdict:
    matched = sum(1 for m in outcome.matched_pairs if m.confidence >= MIN_MATCH_CONFIDENCE)
    missing_errors = sum(1 for m in outcome.missing_in_implementation if m.severity == IssueSeverity.ERROR)
    extra_errors = sum(1 for e in outcome.extra_in_implementation if e.severity == IssueSeverity.ERROR)
    diff_errors = sum(1 for d in outcome.property_differences if d.severity == IssueSeverity.ERROR)
    total = (len(outcome.matched_pairs) + len(outcome.missing_in_implementation)
             + len(outcome.extra_in_implementation))

    if missing_errors or diff_errors or extra_errors:
        status = OverallStatus.FAIL
    elif outcome.extra_in_implementation:
        status = OverallStatus.WARNING
    else:
        status = OverallStatus.PASS

    return Verdict(
        total_elements=total,
        matched_count=matched,
        missing_count=missing_errors,
        extra_count=extra_errors,
        difference_count=diff_errors,
        match_rate_percent=(matched / total * 100) if total else 100.0,
        status=status,
    )


class StructureComparator:
    """
    Compares a design forest with an implementation forest.

    Instances hold only configuration; every `compare` call works on its own
    indexes, so one comparator can serve concurrent runs.
    """

    def __init__(self, options: Union[ComparisonOptions, Mapping[str, Any], None] = None,
                 name_mapping: Optional[NameMapping] = None):
        if options is None:
            options = ComparisonOptions()
        elif not isinstance(options, ComparisonOptions):
            options = ComparisonOptions.model_validate(options)
        self.options = options
        self.name_mapping = name_mapping or NameMapping()

    def align_paths(self, design_index: Mapping[str, CanonicalElement],
                    impl_index: Mapping[str, CanonicalElement]) -> Dict[str, str]:
        """
        Map each design path to an implementation path: the identical path
        when present, otherwise the first alias-equivalent one in sorted
        order. Several design paths may map to the same implementation path.
        """
        alignment = {}
        impl_paths = sort_paths(impl_index.keys())
        for design_path in design_index:
            if design_path in impl_index:
                alignment[design_path] = design_path
                continue
            for impl_path in impl_paths:
                if are_paths_equivalent_by_name(design_path, impl_path, self.name_mapping.path_alias):
                    alignment[design_path] = impl_path
                    break
        return alignment

    def compare(self, design_elements: List[CanonicalElement],
                impl_elements: List[CanonicalElement]) -> ComparisonOutcome:
        outcome = ComparisonOutcome(options=self.options)

        design_index = index_elements(design_elements, 'design')
        impl_index = index_elements(impl_elements, 'implementation')

        design_by_content = index_by_content(design_elements)
        impl_by_content = index_by_content(impl_elements)

        alignment = self.align_paths(design_index, impl_index)
        claimed_design: Set[str] = {design_index[p].id for p in alignment}
        claimed_impl: Set[str] = {impl_index[p].id for p in alignment.values()}

        for path, design in design_index.items():
            impl_path = alignment.get(path)
            if impl_path is not None:
                impl = impl_index[impl_path]
                method = MatchMethod.EXACT_PATH if impl_path == path else MatchMethod.ALIAS_PATH
                outcome.matched_pairs.append(compare_elements(design, impl, self.options, method))
                outcome.property_differences.extend(compare_styles(design, impl, self.options, path))
                continue

            candidate = find_match_by_content(design, impl_by_content, claimed_impl)
            if candidate is not None:
                outcome.matched_pairs.append(self._content_match(path, design, candidate))
                claimed_design.add(design.id)
                claimed_impl.add(candidate.id)
                continue

            claimed_design.add(design.id)
            outcome.missing_in_implementation.append(MissingElement(
                path=path,
                element=design,
                severity=IssueSeverity.ERROR,
                reason=MISSING_REASON,
                suggestion=generate_suggestion(design),
            ))

        extra_severity = IssueSeverity.ERROR if self.options.severity == Severity.STRICT else IssueSeverity.WARNING
        for path, impl in impl_index.items():
            if impl.id in claimed_impl:
                continue

            candidate = find_match_by_content(impl, design_by_content, claimed_design)
            if candidate is not None:
                outcome.matched_pairs.append(self._content_match(path, candidate, impl))
                claimed_design.add(candidate.id)
                claimed_impl.add(impl.id)
                continue

            claimed_impl.add(impl.id)
            outcome.extra_in_implementation.append(ExtraElement(
                path=path,
                element=impl,
                severity=extra_severity,
                reason=EXTRA_REASON,
            ))

        outcome.verdict = calculate_verdict(outcome)
        logger.info(
            "Compared %d design / %d implementation elements: %d matched, %d missing, %d extra, status %s",
            len(design_index), len(impl_index), outcome.verdict.matched_count,
            len(outcome.missing_in_implementation), len(outcome.extra_in_implementation),
            outcome.verdict.status.value,
        )
        return outcome

    def _content_match(self, path: str, design: CanonicalElement, impl: CanonicalElement) -> MatchedPair:
        return MatchedPair(
            path=path,
            design_element=design,
            impl_element=impl,
            confidence=CONTENT_MATCH_CONFIDENCE,
            property_matches={'content': True},
            match_method=MatchMethod.CONTENT_FALLBACK,
        )


def compare_structures(design_elements: List[CanonicalElement], impl_elements: List[CanonicalElement],
                       options: Union[ComparisonOptions, Mapping[str, Any], None] = None,
                       name_mapping: Optional[NameMapping] = None) -> ComparisonOutcome:
    return StructureComparator(options, name_mapping).compare(design_elements, impl_elements)
