"""
Canonical Element Model
The tree representation both the design and the implementation are reduced to.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple

from structural_compare.utils.path_utils import get_name_from_path


class ElementKind(str, Enum):
    TEXT = 'text'
    CONTAINER = 'container'
    BUTTON = 'button'
    IMAGE = 'image'
    ICON = 'icon'
    INPUT = 'input'


class Origin(str, Enum):
    DESIGN = 'design'
    IMPLEMENTATION = 'implementation'


@dataclass(frozen=True)
class LayoutAttributes:
    arrangement: Optional[str] = None  # flex | grid | stack | absolute
    direction: Optional[str] = None
    main_axis_alignment: Optional[str] = None
    cross_axis_alignment: Optional[str] = None

    def is_empty(self) -> bool:
        return not any((self.arrangement, self.direction,
                        self.main_axis_alignment, self.cross_axis_alignment))

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            'arrangement': self.arrangement,
            'direction': self.direction,
            'main_axis_alignment': self.main_axis_alignment,
            'cross_axis_alignment': self.cross_axis_alignment,
        }


@dataclass(frozen=True)
class Provenance:
    origin: Origin
    is_opaque_component: bool = False
    opaque_component_counterpart_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'origin': self.origin.value,
            'is_opaque_component': self.is_opaque_component,
            'opaque_component_counterpart_name': self.opaque_component_counterpart_name,
        }


@dataclass(frozen=True)
class CanonicalElement:
    """
    One node of a canonical tree.

    Instances are built fresh by the normalizers and never mutated. Opaque
    components carry no children: their internals are owned elsewhere and
    are only compared by identity.
    """
    id: str
    kind: ElementKind
    path: str
    provenance: Provenance
    text_content: Optional[str] = None
    styles: Mapping[str, Any] = field(default_factory=dict)
    layout: Optional[LayoutAttributes] = None
    children: Optional[Tuple['CanonicalElement', ...]] = None

    def __post_init__(self):
        # Read-only view over a private copy
        object.__setattr__(self, 'styles', MappingProxyType(dict(self.styles)))
        if self.provenance.is_opaque_component and self.children is not None:
            raise ValueError(f"Opaque component '{self.path}' cannot have children")

    @property
    def name(self) -> str:
        return get_name_from_path(self.path)

    def to_dict(self, include_children: bool = True) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'kind': self.kind.value,
            'path': self.path,
            'text_content': self.text_content,
            'styles': dict(self.styles),
            'layout': self.layout.to_dict() if self.layout else None,
            'provenance': self.provenance.to_dict(),
        }
        if include_children:
            data['children'] = [c.to_dict() for c in self.children] if self.children is not None else None
        return data


def iter_elements(elements: Iterable[CanonicalElement]) -> Iterator[CanonicalElement]:
    """Pre-order walk over a forest."""
    for element in elements:
        yield element
        if element.children:
            yield from iter_elements(element.children)


def count_elements(elements: Iterable[CanonicalElement]) -> int:
    return sum(1 for _ in iter_elements(elements))
