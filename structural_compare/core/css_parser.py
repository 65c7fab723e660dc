"""
CSS Parser Module
Reduces CSS-module stylesheets to class name -> camelCase style maps.
"""

import logging
import re
from typing import Any, Dict, List, Optional

import tinycss2

from structural_compare.utils.value_utils import camel_case, coerce_css_value

logger = logging.getLogger(__name__)

CLASS_IN_COMPOUND = re.compile(r'\.([a-zA-Z_][\w-]*)$')
COMBINATORS = re.compile(r'\s*[\s>+~]\s*')
COMMENT_PATTERN = re.compile(r'/\*[^*]*\*+(?:[^/*][^*]*\*+)*/')
VAR_PATTERN = re.compile(r'var\((--[\w-]+)(?:,\s*([^\)]+))?\)')

BOX_SHORTHANDS = {'margin', 'padding'}


def _target_classes(selector: str) -> List[str]:
    """
    Classes a selector assigns styles to.

    For each comma-separated part only the last compound counts, and only
    when it ends in a plain class (`.card`, `div.card`, `.list .item`);
    pseudo-classes and attribute selectors are skipped.
    """
    classes = []
    for part in selector.split(','):
        compounds = [c for c in COMBINATORS.split(part.strip()) if c]
        if not compounds:
            continue
        match = CLASS_IN_COMPOUND.search(compounds[-1])
        if match:
            classes.append(match.group(1))
    return classes


class StylesheetParser:
    """Parses top-level class rules; @media and other at-rules are not applied."""

    def __init__(self, resolve_variables: bool = True):
        self.resolve_variables = resolve_variables

    def _declarations(self, rule) -> List[tuple]:
        result = []
        for decl in tinycss2.parse_declaration_list(rule.content, skip_comments=True, skip_whitespace=True):
            if decl.type == 'declaration':
                result.append((decl.lower_name, tinycss2.serialize(decl.value).strip()))
        return result

    def parse(self, css: str) -> Dict[str, Dict[str, Any]]:
        rules = tinycss2.parse_stylesheet(css or '', skip_comments=True, skip_whitespace=True)

        root_vars = {}
        blocks = []
        for rule in rules:
            if rule.type == 'error':
                logger.debug("Skipping unparsable CSS at line %s: %s", rule.source_line, rule.message)
                continue
            if rule.type != 'qualified-rule':
                continue
            selector = tinycss2.serialize(rule.prelude).strip()
            declarations = self._declarations(rule)
            if selector == ':root':
                root_vars.update({name: value for name, value in declarations if name.startswith('--')})
            blocks.append((selector, declarations))

        styles: Dict[str, Dict[str, Any]] = {}
        for selector, declarations in blocks:
            classes = _target_classes(selector)
            if not classes:
                continue
            props = {}
            for name, value in declarations:
                if name.startswith('--'):
                    continue
                if self.resolve_variables and 'var(' in value:
                    value = resolve_vars(value, root_vars)
                props[camel_case(name)] = coerce_css_value(value)
            for class_name in classes:
                styles.setdefault(class_name, {}).update(props)

        logger.debug("Parsed %d CSS classes", len(styles))
        return styles


def parse_css_modules(css: str) -> Dict[str, Dict[str, Any]]:
    return StylesheetParser().parse(css)


def resolve_vars(value: str, root_vars: Dict[str, str], seen=None) -> str:
    """Substitute var(--name, fallback) from :root custom properties."""
    if seen is None:
        seen = set()

    def repl(match):
        name, fallback = match.group(1), match.group(2)
        if name in seen:
            return match.group(0)
        resolved = root_vars.get(name)
        if resolved is not None:
            return resolve_vars(resolved, root_vars, seen | {name})
        if fallback is not None:
            return fallback.strip()
        return match.group(0)

    return VAR_PATTERN.sub(repl, value)


def expand_shorthand(prop: str, value: str) -> Optional[Dict[str, str]]:
    """Expand a margin/padding shorthand into top/right/bottom/left."""
    if prop not in BOX_SHORTHANDS:
        return None
    parts = value.split()
    if not parts:
        return None
    top = parts[0]
    right = parts[1] if len(parts) > 1 else top
    bottom = parts[2] if len(parts) > 2 else top
    left = parts[3] if len(parts) > 3 else right
    return {'top': top, 'right': right, 'bottom': bottom, 'left': left}


def strip_comments(css: str) -> str:
    return COMMENT_PATTERN.sub('', css)


def strip_media_queries(css: str) -> str:
    """Remove every @media block, keeping the rest of the stylesheet as written."""
    rules = tinycss2.parse_stylesheet(css, skip_comments=False, skip_whitespace=False)
    kept = [r for r in rules if not (r.type == 'at-rule' and r.lower_at_keyword == 'media')]
    return tinycss2.serialize(kept)


def clean_css(css: str) -> str:
    return strip_media_queries(strip_comments(css))


def parse_color(value: str) -> Optional[str]:
    """Return the value when it is a hex/rgb color literal, else None."""
    if isinstance(value, str) and (value.startswith('#') or value.startswith('rgb')):
        return value
    return None


def extract_class_names(css: str) -> List[str]:
    return list(parse_css_modules(css).keys())
