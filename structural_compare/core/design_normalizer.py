"""
Design Normalizer Module
Reduces a design-tool node tree (frame JSON) to canonical elements.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from structural_compare.config.name_mapping import NameMapping, strip_numeric_suffix
from structural_compare.core.models import (
    CanonicalElement, ElementKind, LayoutAttributes, Origin, Provenance, count_elements,
)
from structural_compare.exceptions import DesignDataError
from structural_compare.utils.color_utils import color_distance, hex_to_rgb, parse_alpha
from structural_compare.utils.path_utils import build_path
from structural_compare.utils.value_utils import generate_id

logger = logging.getLogger(__name__)

DESIGN_KIND_MAP = {
    'text': ElementKind.TEXT,
    'frame': ElementKind.CONTAINER,
    'rectangle': ElementKind.CONTAINER,
    'ellipse': ElementKind.CONTAINER,
    'group': ElementKind.CONTAINER,
    'line': ElementKind.CONTAINER,
    'path': ElementKind.CONTAINER,
    'connection': ElementKind.CONTAINER,
    'note': ElementKind.CONTAINER,
    'ref': ElementKind.CONTAINER,
    'icon_font': ElementKind.ICON,
    'image': ElementKind.IMAGE,
}

# Node types whose fill paints their box rather than their glyphs
BACKGROUND_FILL_TYPES = {'frame', 'rectangle', 'ellipse'}

LAYOUT_MODES = {
    'horizontal': ('flex', 'row'),
    'vertical': ('flex', 'column'),
    'none': ('absolute', None),
}

JUSTIFY_VALUES = {'start', 'center', 'end', 'space-between', 'space-around'}
ALIGN_VALUES = {'start', 'center', 'end', 'stretch'}

INVISIBLE_ALPHA = 0.05
INVISIBLE_DISTANCE = 10


def map_design_kind(node_type: str) -> ElementKind:
    return DESIGN_KIND_MAP.get(node_type, ElementKind.CONTAINER)


def normalize_design_name(name: str, node_type: str) -> str:
    """
    Path segment name for a design node.

    The trailing digit run is stripped (`divider1` -> `divider`). Text nodes
    additionally drop non-alphanumerics and lower-case the first letter so
    they line up with class-name derived implementation paths.
    """
    normalized = strip_numeric_suffix(name) or name
    if node_type == 'text':
        normalized = re.sub(r'[^a-zA-Z0-9]', '', normalized)
        normalized = normalized[:1].lower() + normalized[1:]
    return normalized or name


def _stroke_color(stroke: Any) -> Optional[str]:
    if not isinstance(stroke, Mapping):
        return None
    color = stroke.get('fill', stroke.get('color'))
    return color if isinstance(color, str) else None


class DesignNormalizer:
    """Converts design frames into canonical element trees."""

    def __init__(self, name_mapping: Optional[NameMapping] = None):
        self.name_mapping = name_mapping or NameMapping()

    def is_invisible_stroke(self, node: Mapping[str, Any], background: Optional[str]) -> bool:
        """
        A stroke is invisible when it is nearly transparent, equals the
        background, sits within a small RGB distance of it, or matches a
        configured override for the node.
        """
        stroke = _stroke_color(node.get('stroke'))
        if stroke is None:
            return False

        alpha = parse_alpha(stroke)
        if alpha is not None and alpha < INVISIBLE_ALPHA:
            return True

        if background and stroke == background:
            return True

        if background and hex_to_rgb(stroke) and hex_to_rgb(background):
            if color_distance(stroke, background) < INVISIBLE_DISTANCE:
                return True

        return self.name_mapping.is_stroke_override(node.get('name'), background, stroke)

    def extract_styles(self, node: Mapping[str, Any]) -> Dict[str, Any]:
        styles = {}
        node_type = node.get('type')

        for key in ('fontSize', 'fontWeight'):
            if node.get(key) is not None:
                styles[key] = node[key]

        background = None
        fill = node.get('fill')
        if isinstance(fill, str):
            if node_type == 'text':
                styles['color'] = fill
            elif node_type in BACKGROUND_FILL_TYPES:
                styles['backgroundColor'] = fill
                background = fill
        elif fill is not None:
            logger.debug("Ignoring non-color fill on %s", node.get('name') or node_type)

        stroke = node.get('stroke')
        stroke_color = _stroke_color(stroke)
        if stroke_color is not None:
            if self.is_invisible_stroke(node, background):
                logger.debug("Suppressed invisible stroke %s on %s", stroke_color, node.get('name'))
            else:
                styles['borderColor'] = stroke_color
                if stroke.get('thickness') is not None:
                    styles['borderWidth'] = stroke['thickness']

        for key in ('padding', 'gap'):
            if node.get(key) is not None:
                styles[key] = node[key]

        if node.get('borderRadius') is not None:
            styles['borderRadius'] = node['borderRadius']
        if node.get('cornerRadius') is not None:
            styles['borderRadius'] = node['cornerRadius']

        for key in ('width', 'height'):
            if node.get(key) is not None:
                styles[key] = node[key]

        return styles

    def extract_layout(self, node: Mapping[str, Any]) -> Optional[LayoutAttributes]:
        mode = node.get('layout')
        if not mode:
            return None
        arrangement, direction = LAYOUT_MODES.get(mode, ('flex', None))
        justify = node.get('justifyContent')
        align = node.get('alignItems')
        return LayoutAttributes(
            arrangement=arrangement,
            direction=direction,
            main_axis_alignment=(justify if justify in JUSTIFY_VALUES else 'start') if justify else None,
            cross_axis_alignment=(align if align in ALIGN_VALUES else 'start') if align else None,
        )

    def normalize_node(self, node: Mapping[str, Any], parent_path: str = '', index: int = 0) -> CanonicalElement:
        if not isinstance(node, Mapping) or not node.get('type'):
            raise DesignDataError(f"Design node under '{parent_path or '<root>'}' has no type")

        node_type = node['type']
        raw_name = node.get('name')
        segment = normalize_design_name(raw_name, node_type) if raw_name else node_type
        path = build_path(parent_path, segment, index)
        kind = map_design_kind(node_type)

        opaque = self.name_mapping.is_independent_component(raw_name)
        children = None
        if not opaque and node.get('children'):
            children = tuple(
                self.normalize_node(child, path, idx)
                for idx, child in enumerate(node['children'])
            )

        content = node.get('content')
        content = str(content).strip() if content is not None else None

        return CanonicalElement(
            id=generate_id(kind.value),
            kind=kind,
            path=path,
            provenance=Provenance(
                origin=Origin.DESIGN,
                is_opaque_component=opaque,
                opaque_component_counterpart_name=self.name_mapping.independent_counterpart(raw_name) if opaque else None,
            ),
            text_content=content or None,
            styles=self.extract_styles(node),
            layout=self.extract_layout(node),
            children=children,
        )

    def normalize_frame(self, frame: Mapping[str, Any]) -> List[CanonicalElement]:
        """
        Normalize a top-level frame.

        The frame itself becomes the single root, addressed by its bare name
        and laid out as a vertical flex container.
        """
        if not isinstance(frame, Mapping) or not frame.get('name'):
            raise DesignDataError("Design frame must be an object with a name")

        styles = {}
        if isinstance(frame.get('fill'), str):
            styles['backgroundColor'] = frame['fill']
        if frame.get('cornerRadius') is not None:
            styles['borderRadius'] = frame['cornerRadius']
        for key in ('gap', 'padding'):
            if frame.get(key) is not None:
                styles[key] = frame[key]

        path = frame['name']
        children = None
        if frame.get('children'):
            children = tuple(
                self.normalize_node(child, path, idx)
                for idx, child in enumerate(frame['children'])
            )

        root = CanonicalElement(
            id=generate_id('frame'),
            kind=ElementKind.CONTAINER,
            path=path,
            provenance=Provenance(origin=Origin.DESIGN),
            styles=styles,
            layout=LayoutAttributes(arrangement='flex', direction='column'),
            children=children,
        )
        logger.debug("Normalized design frame %s: %d elements", path, count_elements([root]))
        return [root]


def normalize_design_frame(frame: Mapping[str, Any], name_mapping: Optional[NameMapping] = None) -> List[CanonicalElement]:
    return DesignNormalizer(name_mapping).normalize_frame(frame)


def find_frame(document: Any, frame_id: str) -> Optional[Dict[str, Any]]:
    """Depth-first search for the node whose id is `frame_id`."""
    if isinstance(document, list):
        for item in document:
            found = find_frame(item, frame_id)
            if found is not None:
                return found
        return None
    if not isinstance(document, dict):
        return None
    if document.get('id') == frame_id:
        return document
    for key in ('children', 'frames', 'nodes'):
        found = find_frame(document.get(key), frame_id)
        if found is not None:
            return found
    return None


def load_design_document(path: Union[str, Path]) -> Any:
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise DesignDataError(f"Design file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise DesignDataError(f"Design file is not valid JSON: {path}: {e}") from e


def load_design_frame(path: Union[str, Path], frame_id: str) -> Dict[str, Any]:
    """Load a design document and return the frame with the given id."""
    document = load_design_document(path)
    frame = find_frame(document, frame_id)
    if frame is None:
        raise DesignDataError(f"Frame '{frame_id}' not found in {path}")
    return frame
