"""
Props Extractor Module
Reads the `{Name}Props` interface (or type alias) of an independent component.
"""

import logging
import re
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from structural_compare.core.code_normalizer import node_text, parse_tsx, unquote

logger = logging.getLogger(__name__)


@dataclass
class ComponentProp:
    name: str
    type: str
    required: bool
    description: Optional[str] = None

    def to_dict(self) -> Dict:
        return asdict(self)


def _clean_comment(text: str) -> str:
    if text.startswith('//'):
        return text[2:].strip()
    body = text[2:-2] if text.startswith('/*') and text.endswith('*/') else text
    lines = [re.sub(r'^\s*\*+\s?', '', line).strip() for line in body.strip('*').splitlines()]
    return '\n'.join(line for line in lines if line)


def _leading_comment(node) -> Optional[str]:
    comments = []
    sibling = node.prev_sibling
    while sibling is not None and sibling.type == 'comment':
        comments.append(_clean_comment(node_text(sibling)))
        sibling = sibling.prev_sibling
    comments = [c for c in reversed(comments) if c]
    return '\n'.join(comments) if comments else None


def _props_body(node, props_name: str):
    """Object-type body of `interface {props_name}` or `type {props_name} = {...}`."""
    name = node.child_by_field_name('name')
    if name is None or node_text(name) != props_name:
        return None
    if node.type == 'interface_declaration':
        return node.child_by_field_name('body')
    value = node.child_by_field_name('value')
    if value is not None and value.type == 'object_type':
        return value
    return None


def _find_props_declarations(source: str, props_name: str) -> List[Tuple[object, object]]:
    tree = parse_tsx(source)
    found = []
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type in ('interface_declaration', 'type_alias_declaration'):
            body = _props_body(node, props_name)
            if body is not None:
                found.append((node, body))
                continue
        stack.extend(reversed(node.children))
    return found


def extract_component_props(source: str, component_name: str) -> List[ComponentProp]:
    """
    Props declared by `interface {component_name}Props` or
    `type {component_name}Props = {...}`, in declaration order.
    """
    props = []
    for _, body in _find_props_declarations(source, f"{component_name}Props"):
        for member in body.named_children:
            if member.type != 'property_signature':
                continue
            name_node = member.child_by_field_name('name')
            if name_node is None:
                continue
            type_node = member.child_by_field_name('type')
            type_text = node_text(type_node).lstrip(':').strip() if type_node is not None else 'any'
            props.append(ComponentProp(
                name=unquote(node_text(name_node)),
                type=type_text,
                required=not any(child.type == '?' for child in member.children),
                description=_leading_comment(member),
            ))
    logger.debug("%s: %d props", component_name, len(props))
    return props


def extract_component_props_from_file(tsx_path: Union[str, Path], component_name: str) -> List[ComponentProp]:
    source = Path(tsx_path).read_text(encoding='utf-8')
    return extract_component_props(source, component_name)


def validate_props_usage(source: str, component_name: str, props: List[ComponentProp]) -> Dict:
    """Report props that are never referenced outside their own declaration."""
    remaining = source.encode('utf-8')
    declarations = _find_props_declarations(source, f"{component_name}Props")
    for decl, _ in sorted(declarations, key=lambda d: d[0].start_byte, reverse=True):
        remaining = remaining[:decl.start_byte] + remaining[decl.end_byte:]
    text = remaining.decode('utf-8')

    unused = [p.name for p in props if not re.search(rf"\b{re.escape(p.name)}\b", text)]
    return {'valid': not unused, 'unused': unused}
