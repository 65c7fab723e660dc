"""
Name Mapping Module
Alias tables bridging design-tool names and implementation names, the
independent (opaque) component registry and the invisible-stroke overrides.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

NUMERIC_SUFFIX = re.compile(r'\d+$')


def strip_numeric_suffix(name: str) -> str:
    """`divider1` -> `divider`"""
    return NUMERIC_SUFFIX.sub('', name)


def match_by_prefix(name: str, prefix: str) -> bool:
    """True for `divider1` against prefix `divider`, False for `divider` itself."""
    return name.startswith(prefix) and len(name) > len(prefix)


@dataclass(frozen=True)
class StrokeOverride:
    """A design node whose stroke is known to render invisibly on its background."""
    node_names: Tuple[str, ...]
    background_contains: str
    stroke_color: str

    def matches(self, node_name: Optional[str], background: Optional[str], stroke: Optional[str]) -> bool:
        if node_name not in self.node_names:
            return False
        return bool(background) and self.background_contains in background and stroke == self.stroke_color


DEFAULT_STROKE_OVERRIDES = (
    StrokeOverride(
        node_names=('settingsButton', 'settingsIndicator'),
        background_contains='rgba(0, 188, 212',
        stroke_color='#00BCD4',
    ),
)


@dataclass
class NameMapping:
    """
    Static lookup tables handed to the normalizers and the comparator.

    design_to_code: design name -> implementation name (forward alias).
    code_class_to_design: implementation class name -> design name, used
        when building implementation paths.
    independent_components: design name -> implementation component name
        for components whose internals are not compared.
    """
    design_to_code: Dict[str, str] = field(default_factory=dict)
    code_class_to_design: Dict[str, str] = field(default_factory=dict)
    independent_components: Dict[str, str] = field(default_factory=dict)
    stroke_overrides: Tuple[StrokeOverride, ...] = DEFAULT_STROKE_OVERRIDES

    def __post_init__(self):
        self._code_to_design = {code: design for design, code in self.design_to_code.items()}
        self._independent_code_names = set(self.independent_components.values())

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'NameMapping':
        """Build from a config mapping; camelCase and snake_case keys are both accepted."""
        if not data:
            return cls()

        def pick(camel, snake, default):
            if camel in data:
                return data[camel]
            return data.get(snake, default)

        overrides = pick('strokeOverrides', 'stroke_overrides', None)
        if overrides is None:
            stroke_overrides = DEFAULT_STROKE_OVERRIDES
        else:
            stroke_overrides = tuple(
                StrokeOverride(
                    node_names=tuple(o.get('nodeNames', o.get('node_names', ()))),
                    background_contains=o.get('backgroundContains', o.get('background_contains', '')),
                    stroke_color=o.get('strokeColor', o.get('stroke_color', '')),
                )
                for o in overrides
            )
        return cls(
            design_to_code=dict(pick('designToCode', 'design_to_code', {})),
            code_class_to_design=dict(pick('codeClassToDesign', 'code_class_to_design', {})),
            independent_components=dict(pick('independentComponents', 'independent_components', {})),
            stroke_overrides=stroke_overrides,
        )

    def map_design_name_to_code(self, name: str) -> str:
        return self.design_to_code.get(name, name)

    def map_code_name_to_design(self, name: str) -> str:
        return self._code_to_design.get(name, name)

    def map_code_class_to_design(self, class_name: str) -> str:
        return self.code_class_to_design.get(class_name, class_name)

    def are_names_equivalent(self, design_name: str, code_name: str) -> bool:
        if design_name == code_name:
            return True
        if self.map_design_name_to_code(design_name) == code_name:
            return True
        return self.map_code_name_to_design(code_name) == design_name

    def path_alias(self, design_name: str) -> str:
        """
        Alias applied to the final design-side segment during path alignment.

        An explicit alias wins; otherwise the numeric suffix is stripped and
        the stripped name is aliased in turn (`divider2` -> `divider`).
        """
        if design_name in self.design_to_code:
            return self.design_to_code[design_name]
        stripped = strip_numeric_suffix(design_name)
        return self.design_to_code.get(stripped, stripped)

    def is_independent_component(self, design_name: Optional[str]) -> bool:
        return bool(design_name) and design_name in self.independent_components

    def independent_counterpart(self, design_name: str) -> Optional[str]:
        return self.independent_components.get(design_name)

    def is_independent_code_name(self, name: Optional[str]) -> bool:
        """True when an implementation tag or resolved name belongs to the registry."""
        if not name:
            return False
        return name in self._independent_code_names or name in self.independent_components

    def is_stroke_override(self, node_name: Optional[str], background: Optional[str], stroke: Optional[str]) -> bool:
        return any(o.matches(node_name, background, stroke) for o in self.stroke_overrides)

    def independent_code_names(self) -> List[str]:
        return sorted(self._independent_code_names)
