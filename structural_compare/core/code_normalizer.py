"""
Code Normalizer Module
Parses TSX markup with tree-sitter, resolves CSS-module class references and
reduces the rendered element tree to canonical elements.
"""

import html
import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Optional

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from structural_compare.config.name_mapping import NameMapping
from structural_compare.core.css_parser import StylesheetParser
from structural_compare.core.models import (
    CanonicalElement, ElementKind, LayoutAttributes, Origin, Provenance, count_elements,
)
from structural_compare.utils.path_utils import build_path
from structural_compare.utils.value_utils import camel_case, coerce_css_value, generate_id

logger = logging.getLogger(__name__)

TAG_KIND_MAP = {
    'span': ElementKind.TEXT,
    'p': ElementKind.TEXT,
    'h1': ElementKind.TEXT,
    'h2': ElementKind.TEXT,
    'h3': ElementKind.TEXT,
    'h4': ElementKind.TEXT,
    'h5': ElementKind.TEXT,
    'h6': ElementKind.TEXT,
    'a': ElementKind.TEXT,
    'strong': ElementKind.TEXT,
    'em': ElementKind.TEXT,
    'small': ElementKind.TEXT,
    'label': ElementKind.TEXT,
    'div': ElementKind.CONTAINER,
    'section': ElementKind.CONTAINER,
    'article': ElementKind.CONTAINER,
    'main': ElementKind.CONTAINER,
    'header': ElementKind.CONTAINER,
    'footer': ElementKind.CONTAINER,
    'nav': ElementKind.CONTAINER,
    'aside': ElementKind.CONTAINER,
    'button': ElementKind.BUTTON,
    'input': ElementKind.INPUT,
    'textarea': ElementKind.INPUT,
    'select': ElementKind.INPUT,
    'img': ElementKind.IMAGE,
    'svg': ElementKind.ICON,
    'i': ElementKind.ICON,
}

FUNCTION_TYPES = {
    'arrow_function', 'function_expression', 'function', 'function_declaration',
    'generator_function', 'generator_function_declaration', 'method_definition',
}
JSX_ELEMENT_TYPES = {'jsx_element', 'jsx_self_closing_element'}
JSX_CONTAINER_TYPES = JSX_ELEMENT_TYPES | {'jsx_expression', 'jsx_attribute', 'jsx_opening_element'}
TEXT_NODE_TYPES = {'jsx_text', 'html_character_reference'}

# Wrappers whose callback is itself a component body
COMPONENT_WRAPPERS = {'memo', 'forwardRef'}

JUSTIFY_ALIASES = {'flex-start': 'start', 'flex-end': 'end'}


@lru_cache(maxsize=1)
def get_tsx_language() -> Language:
    """Load the TSX grammar once per process."""
    return Language(tree_sitter_typescript.language_tsx())


def parse_tsx(source: str):
    parser = Parser(get_tsx_language())
    return parser.parse(source.encode('utf-8'))


def node_text(node: Node) -> str:
    return node.text.decode('utf-8') if node is not None else ''


def unquote(text: str) -> str:
    if len(text) >= 2 and text[0] in '\'"`' and text[-1] == text[0]:
        return text[1:-1]
    return text


def _named(node: Node) -> List[Node]:
    return [c for c in node.named_children if c.type != 'comment']


def _unwrap_parens(node: Optional[Node]) -> Optional[Node]:
    while node is not None and node.type == 'parenthesized_expression':
        inner = _named(node)
        node = inner[0] if inner else None
    return node


def _walk(node: Node) -> Iterator[Node]:
    """Pre-order walk in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _number_literal(text: str) -> Optional[Any]:
    cleaned = text.replace('_', '')
    try:
        return int(cleaned, 0)
    except ValueError:
        pass
    try:
        return float(cleaned)
    except ValueError:
        return None


def find_syntax_error(root: Node) -> Optional[str]:
    """Describe the first syntax error under `root`, or None when it parsed cleanly."""
    if not root.has_error:
        return None
    for node in _walk(root):
        if node.type == 'ERROR' or node.is_missing:
            row, col = node.start_point[0], node.start_point[1]
            what = f"missing '{node.type}'" if node.is_missing else 'unexpected input'
            return f"Syntax error ({what}) at line {row + 1}, column {col + 1}"
    return 'Syntax error'


@dataclass
class CodeNormalizationResult:
    """
    Outcome of normalizing one markup file.

    An unparsable file yields no elements and a `parse_error`; callers must
    treat that as a skipped comparison rather than an empty implementation.
    """
    elements: List[CanonicalElement] = field(default_factory=list)
    parse_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.parse_error is None


def _callee_name(call: Node) -> str:
    fn = call.child_by_field_name('function')
    if fn is None:
        return ''
    if fn.type == 'identifier':
        return node_text(fn)
    if fn.type == 'member_expression':
        return node_text(fn.child_by_field_name('property'))
    return ''


def _is_inline_callback(function_node: Node) -> bool:
    """Hook callbacks (useMemo, React.useCallback) and array-method callbacks."""
    parent = function_node.parent
    if parent is None or parent.type != 'arguments':
        return False
    call = parent.parent
    if call is None or call.type != 'call_expression':
        return False
    name = _callee_name(call)
    if name.startswith('use'):
        return True
    fn = call.child_by_field_name('function')
    return fn is not None and fn.type == 'member_expression' and name not in COMPONENT_WRAPPERS


def _is_component_arrow(arrow: Node) -> bool:
    """
    An arrow whose markup body is a component's own output: a top-level
    `const X = () => ...`, a default export, or the callback of memo/forwardRef.
    Helper arrows declared inside a component body do not qualify.
    """
    parent = arrow.parent
    if parent is None:
        return False
    if parent.type == 'export_statement':
        return True
    if parent.type == 'variable_declarator':
        declaration = parent.parent
        scope = declaration.parent if declaration is not None else None
        return scope is not None and scope.type in ('program', 'export_statement')
    if parent.type == 'arguments':
        call = parent.parent
        return call is not None and call.type == 'call_expression' and _callee_name(call) in COMPONENT_WRAPPERS
    return False


def is_nested_render(node: Node) -> bool:
    """
    True when markup returned at `node` is not a component's own output:
    it lives in a callback passed to a hook or array method, or inside
    other markup.
    """
    current = node
    while current is not None:
        if current.type in FUNCTION_TYPES and _is_inline_callback(current):
            return True
        if current is not node and current.type in JSX_CONTAINER_TYPES:
            return True
        current = current.parent
    return False


def _is_fragment(node: Node) -> bool:
    if node.type != 'jsx_element':
        return False
    open_tag = node.child_by_field_name('open_tag')
    return open_tag is not None and open_tag.child_by_field_name('name') is None


def _flatten_fragments(node: Node) -> List[Node]:
    if not _is_fragment(node):
        return [node]
    result = []
    for child in _jsx_children(node):
        if child.type in JSX_ELEMENT_TYPES:
            result.extend(_flatten_fragments(child))
    return result


def _jsx_children(node: Node) -> List[Node]:
    """Children between the opening and closing tag of a jsx_element."""
    if node.type != 'jsx_element':
        return []
    return [c for c in node.named_children
            if c.type not in ('jsx_opening_element', 'jsx_closing_element', 'comment')]


def find_render_roots(root: Node) -> List[Node]:
    """Markup that is the direct operand of a return, or the body of a component arrow."""
    roots = []
    for node in _walk(root):
        operand = None
        if node.type == 'return_statement':
            named = _named(node)
            operand = _unwrap_parens(named[0]) if named else None
        elif node.type == 'arrow_function' and _is_component_arrow(node):
            operand = _unwrap_parens(node.child_by_field_name('body'))
        if operand is None or operand.type not in JSX_ELEMENT_TYPES:
            continue
        if is_nested_render(node):
            logger.debug("Skipping markup returned from a callback at line %d", node.start_point[0] + 1)
            continue
        roots.extend(_flatten_fragments(operand))
    return roots


class CodeNormalizer:
    """Reduces TSX markup plus its CSS module to canonical elements."""

    def __init__(self, name_mapping: Optional[NameMapping] = None):
        self.name_mapping = name_mapping or NameMapping()

    # Tags and attributes

    def _tag_node(self, node: Node) -> Optional[Node]:
        if node.type == 'jsx_self_closing_element':
            return node
        return node.child_by_field_name('open_tag')

    def get_tag_name(self, node: Node) -> str:
        tag = self._tag_node(node)
        name_node = tag.child_by_field_name('name') if tag is not None else None
        if name_node is None:
            return ''
        # styled.div / Foo.Bar: keep the leading identifier
        return node_text(name_node).split('.')[0]

    def get_attributes(self, node: Node) -> Dict[str, Optional[Node]]:
        attributes = {}
        tag = self._tag_node(node)
        if tag is None:
            return attributes
        for attr in tag.named_children:
            if attr.type != 'jsx_attribute':
                continue
            parts = _named(attr)
            if not parts:
                continue
            attributes[node_text(parts[0])] = parts[-1] if len(parts) > 1 else None
        return attributes

    # Class names

    def extract_class_names(self, attributes: Dict[str, Optional[Node]]) -> List[str]:
        value = attributes.get('className')
        class_names: List[str] = []
        if value is None:
            return class_names
        if value.type == 'string':
            class_names.extend(unquote(node_text(value)).split())
        elif value.type == 'jsx_expression':
            for expr in _named(value):
                self._collect_class_names(expr, class_names)
        return class_names

    def _collect_class_names(self, expr: Optional[Node], out: List[str]):
        if expr is None:
            return
        kind = expr.type
        if kind == 'member_expression':
            prop = expr.child_by_field_name('property')
            if prop is not None:
                out.append(node_text(prop))
        elif kind == 'subscript_expression':
            index = expr.child_by_field_name('index')
            if index is not None and index.type == 'string':
                out.append(unquote(node_text(index)))
        elif kind == 'string':
            out.extend(unquote(node_text(expr)).split())
        elif kind == 'template_string':
            for sub in expr.named_children:
                if sub.type == 'template_substitution':
                    for inner in _named(sub):
                        self._collect_class_names(inner, out)
        elif kind == 'binary_expression':
            self._collect_class_names(expr.child_by_field_name('left'), out)
            self._collect_class_names(expr.child_by_field_name('right'), out)
        elif kind == 'ternary_expression':
            self._collect_class_names(expr.child_by_field_name('consequence'), out)
            self._collect_class_names(expr.child_by_field_name('alternative'), out)
        elif kind == 'parenthesized_expression':
            for inner in _named(expr):
                self._collect_class_names(inner, out)
        elif kind == 'call_expression':
            # clsx(styles.a, cond && styles.b)
            args = expr.child_by_field_name('arguments')
            for arg in _named(args) if args is not None else []:
                self._collect_class_names(arg, out)
        elif kind == 'object':
            for pair in expr.named_children:
                if pair.type == 'pair':
                    key = pair.child_by_field_name('key')
                    if key is not None and key.type == 'computed_property_name':
                        for inner in _named(key):
                            self._collect_class_names(inner, out)

    # Styles

    def _inline_value(self, value: Node) -> Optional[Any]:
        kind = value.type
        if kind == 'string':
            return coerce_css_value(unquote(node_text(value)))
        if kind == 'number':
            return _number_literal(node_text(value))
        if kind == 'template_string':
            if any(c.type == 'template_substitution' for c in value.named_children):
                return None
            return coerce_css_value(unquote(node_text(value)))
        if kind == 'unary_expression':
            text = node_text(value).replace(' ', '')
            if text.startswith('-'):
                number = _number_literal(text[1:])
                return -number if number is not None else None
        return None

    def extract_inline_styles(self, attributes: Dict[str, Optional[Node]]) -> Dict[str, Any]:
        styles = {}
        value = attributes.get('style')
        if value is None or value.type != 'jsx_expression':
            return styles
        exprs = _named(value)
        obj = _unwrap_parens(exprs[0]) if exprs else None
        if obj is None or obj.type != 'object':
            return styles
        for pair in obj.named_children:
            if pair.type != 'pair':
                continue
            key_node = pair.child_by_field_name('key')
            value_node = pair.child_by_field_name('value')
            if key_node is None or value_node is None:
                continue
            if key_node.type == 'property_identifier':
                key = node_text(key_node)
            elif key_node.type == 'string':
                key = camel_case(unquote(node_text(key_node)))
            else:
                continue
            parsed = self._inline_value(value_node)
            if parsed is not None:
                styles[key] = parsed
        return styles

    def resolve_styles(self, class_names: List[str], attributes: Dict[str, Optional[Node]],
                       css_styles: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
        styles = {}
        for class_name in class_names:
            class_styles = css_styles.get(class_name)
            if class_styles is None:
                logger.debug("Class '%s' not found in stylesheet", class_name)
                continue
            styles.update(class_styles)
        styles.update(self.extract_inline_styles(attributes))
        return styles

    def extract_layout(self, styles: Dict[str, Any], attributes: Dict[str, Optional[Node]]) -> Optional[LayoutAttributes]:
        values = {}
        for key in ('display', 'flexDirection', 'justifyContent', 'alignItems', 'position'):
            if isinstance(styles.get(key), str):
                values[key] = styles[key]
        for key in ('flexDirection', 'justifyContent', 'alignItems'):
            attr = attributes.get(key)
            if attr is not None and attr.type == 'string':
                values[key] = unquote(node_text(attr))

        arrangement = None
        display = values.get('display')
        if display in ('flex', 'inline-flex'):
            arrangement = 'flex'
        elif display in ('grid', 'inline-grid'):
            arrangement = 'grid'
        elif values.get('position') == 'absolute':
            arrangement = 'absolute'

        direction = values.get('flexDirection')
        if direction is not None:
            arrangement = arrangement or 'flex'
            direction = 'row' if direction.startswith('row') else 'column'

        justify = values.get('justifyContent')
        align = values.get('alignItems')
        layout = LayoutAttributes(
            arrangement=arrangement,
            direction=direction,
            main_axis_alignment=JUSTIFY_ALIASES.get(justify, justify),
            cross_axis_alignment=JUSTIFY_ALIASES.get(align, align),
        )
        return None if layout.is_empty() else layout

    # Text

    def extract_text_content(self, node: Node) -> Optional[str]:
        """
        Literal text and simple string/template interpolations among the
        direct children; other expressions are ignored.
        """
        texts = []
        source = node.text
        run = []

        def flush():
            # Slice the whole run so whitespace between text tokens survives
            if run:
                raw = source[run[0].start_byte - node.start_byte:run[-1].end_byte - node.start_byte]
                text = re.sub(r'\s*\n\s*', ' ', html.unescape(raw.decode('utf-8'))).strip()
                if text:
                    texts.append(text)
            run.clear()

        for child in _jsx_children(node):
            if child.type in TEXT_NODE_TYPES:
                run.append(child)
                continue
            flush()
            if child.type != 'jsx_expression':
                continue
            exprs = _named(child)
            if not exprs:
                continue
            expr = exprs[0]
            if expr.type == 'string':
                text = unquote(node_text(expr)).strip()
            elif expr.type == 'template_string':
                text = ''.join(node_text(c) for c in expr.named_children if c.type == 'string_fragment').strip()
            else:
                continue
            if text:
                texts.append(text)
        flush()
        return ' '.join(texts) if texts else None

    # Paths and opaque components

    def build_element_path(self, tag_name: str, class_names: List[str], parent_path: str, index: int) -> str:
        name = class_names[0] if class_names else tag_name
        name = self.name_mapping.map_code_class_to_design(name)
        if not parent_path:
            return name[:1].upper() + name[1:]
        return build_path(parent_path, name, index)

    def _opaque_counterpart(self, tag_name: str, class_names: List[str]) -> Optional[str]:
        candidates = [tag_name]
        if class_names:
            candidates.append(self.name_mapping.map_code_class_to_design(class_names[0]))
        for name in candidates:
            if not self.name_mapping.is_independent_code_name(name):
                continue
            if name in self.name_mapping.independent_components:
                return name
            for design_name, code_name in self.name_mapping.independent_components.items():
                if code_name == name:
                    return design_name
        return None

    # Elements

    def convert_element(self, node: Node, css_styles: Dict[str, Dict[str, Any]],
                        parent_path: str = '', index: int = 0) -> Optional[CanonicalElement]:
        tag_name = self.get_tag_name(node)
        if not tag_name:
            return None

        attributes = self.get_attributes(node)
        class_names = self.extract_class_names(attributes)
        styles = self.resolve_styles(class_names, attributes, css_styles)
        path = self.build_element_path(tag_name, class_names, parent_path, index)
        counterpart = self._opaque_counterpart(tag_name, class_names)
        opaque = counterpart is not None

        children = None
        if not opaque:
            converted = []
            for child in _jsx_children(node):
                if child.type not in JSX_ELEMENT_TYPES:
                    continue
                for element_node in _flatten_fragments(child):
                    element = self.convert_element(element_node, css_styles, path, len(converted))
                    if element is not None:
                        converted.append(element)
            children = tuple(converted) if converted else None

        return CanonicalElement(
            id=generate_id(tag_name),
            kind=TAG_KIND_MAP.get(tag_name, ElementKind.CONTAINER),
            path=path,
            provenance=Provenance(
                origin=Origin.IMPLEMENTATION,
                is_opaque_component=opaque,
                opaque_component_counterpart_name=counterpart,
            ),
            text_content=self.extract_text_content(node),
            styles=styles,
            layout=self.extract_layout(styles, attributes),
            children=children,
        )

    def normalize(self, markup: str, stylesheet: str = '') -> CodeNormalizationResult:
        """Normalize one markup/stylesheet pair; parse failures yield an empty result."""
        css_styles = StylesheetParser().parse(stylesheet or '')
        tree = parse_tsx(markup or '')

        error = find_syntax_error(tree.root_node)
        if error:
            logger.warning("Markup could not be parsed: %s", error)
            return CodeNormalizationResult(elements=[], parse_error=error)

        elements = []
        for root in find_render_roots(tree.root_node):
            element = self.convert_element(root, css_styles, '', len(elements))
            if element is not None:
                elements.append(element)

        logger.debug("Normalized markup: %d roots, %d elements", len(elements), count_elements(elements))
        return CodeNormalizationResult(elements=elements)


def normalize_code(markup: str, stylesheet: str = '', name_mapping: Optional[NameMapping] = None) -> CodeNormalizationResult:
    return CodeNormalizer(name_mapping).normalize(markup, stylesheet)


def normalize_code_file(markup: str, stylesheet: str = '', name_mapping: Optional[NameMapping] = None) -> List[CanonicalElement]:
    """Plain-list variant: an unparsable file is logged and yields []."""
    result = normalize_code(markup, stylesheet, name_mapping)
    if not result.ok:
        logger.error("Skipping unparsable markup: %s", result.parse_error)
    return result.elements


def extract_component_name(markup: str) -> Optional[str]:
    """Name of the last function or arrow component declared in the file."""
    tree = parse_tsx(markup or '')
    name = None
    for node in _walk(tree.root_node):
        if node.type in ('function_declaration', 'generator_function_declaration'):
            ident = node.child_by_field_name('name')
            if ident is not None:
                name = node_text(ident)
        elif node.type == 'variable_declarator':
            ident = node.child_by_field_name('name')
            value = node.child_by_field_name('value')
            if ident is not None and ident.type == 'identifier' and value is not None \
                    and value.type in ('arrow_function', 'function_expression', 'function'):
                name = node_text(ident)
    return name


def extract_exported_component(markup: str, stylesheet: str = '',
                               name_mapping: Optional[NameMapping] = None) -> Dict[str, Any]:
    result = normalize_code(markup, stylesheet, name_mapping)
    return {
        'name': extract_component_name(markup) if result.ok else None,
        'elements': result.elements,
        'parse_error': result.parse_error,
    }
