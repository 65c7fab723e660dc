"""
Comparison Result Types
Structured output of one design-vs-implementation comparison run.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from structural_compare.config.schema import ComparisonOptions
from structural_compare.core.models import CanonicalElement


class MatchMethod(str, Enum):
    EXACT_PATH = 'exact-path'
    ALIAS_PATH = 'alias-path'
    CONTENT_FALLBACK = 'content-fallback'


class IssueSeverity(str, Enum):
    ERROR = 'error'
    WARNING = 'warning'
    INFO = 'info'


class OverallStatus(str, Enum):
    PASS = 'pass'
    WARNING = 'warning'
    FAIL = 'fail'


@dataclass
class MatchedPair:
    path: str
    design_element: CanonicalElement
    impl_element: CanonicalElement
    confidence: float
    property_matches: Dict[str, bool] = field(default_factory=dict)
    match_method: MatchMethod = MatchMethod.EXACT_PATH

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': self.path,
            'design_path': self.design_element.path,
            'impl_path': self.impl_element.path,
            'confidence': self.confidence,
            'property_matches': dict(self.property_matches),
            'match_method': self.match_method.value,
        }


@dataclass
class MissingElement:
    path: str
    element: CanonicalElement
    severity: IssueSeverity
    reason: str
    suggestion: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': self.path,
            'kind': self.element.kind.value,
            'text_content': self.element.text_content,
            'severity': self.severity.value,
            'reason': self.reason,
            'suggestion': self.suggestion,
        }


@dataclass
class ExtraElement:
    path: str
    element: CanonicalElement
    severity: IssueSeverity
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': self.path,
            'kind': self.element.kind.value,
            'text_content': self.element.text_content,
            'severity': self.severity.value,
            'reason': self.reason,
        }


@dataclass
class PropertyDifference:
    path: str
    property: str
    design_value: Any
    impl_value: Any
    severity: IssueSeverity
    magnitude: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': self.path,
            'property': self.property,
            'design_value': self.design_value,
            'impl_value': self.impl_value,
            'magnitude': self.magnitude,
            'severity': self.severity.value,
        }


@dataclass
class Verdict:
    total_elements: int = 0
    matched_count: int = 0
    missing_count: int = 0
    extra_count: int = 0
    difference_count: int = 0
    match_rate_percent: float = 100.0
    status: OverallStatus = OverallStatus.PASS

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_elements': self.total_elements,
            'matched_count': self.matched_count,
            'missing_count': self.missing_count,
            'extra_count': self.extra_count,
            'difference_count': self.difference_count,
            'match_rate_percent': self.match_rate_percent,
            'status': self.status.value,
        }


@dataclass
class ComparisonOutcome:
    matched_pairs: List[MatchedPair] = field(default_factory=list)
    missing_in_implementation: List[MissingElement] = field(default_factory=list)
    extra_in_implementation: List[ExtraElement] = field(default_factory=list)
    property_differences: List[PropertyDifference] = field(default_factory=list)
    verdict: Verdict = field(default_factory=Verdict)
    options: ComparisonOptions = field(default_factory=ComparisonOptions)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    screen: Dict[str, str] = field(default_factory=dict)
    sources: Dict[str, str] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.verdict.status != OverallStatus.FAIL

    def to_dict(self) -> Dict[str, Any]:
        return {
            'meta': {
                'timestamp': self.timestamp,
                'screen': dict(self.screen),
                'sources': dict(self.sources),
                'options': self.options.model_dump(mode='json', by_alias=True),
            },
            'matched_pairs': [m.to_dict() for m in self.matched_pairs],
            'missing_in_implementation': [m.to_dict() for m in self.missing_in_implementation],
            'extra_in_implementation': [e.to_dict() for e in self.extra_in_implementation],
            'property_differences': [d.to_dict() for d in self.property_differences],
            'verdict': self.verdict.to_dict(),
        }
