"""
Path Utilities Module
Builds and inspects the `parent > name[index]` paths used to align elements.
"""

import re
from typing import Callable, Dict, Iterable, List, Optional

PATH_SEPARATOR = ' > '


def build_path(parent_path: str, name: str, index: int = 0) -> str:
    """
    Build the path of a node.

    Root nodes (empty parent) use the bare name; every other node is
    `parent > name[index]`.
    """
    if not parent_path:
        return name
    return f"{parent_path}{PATH_SEPARATOR}{name}[{index}]"


def get_parent_path(path: str) -> str:
    idx = path.rfind(PATH_SEPARATOR)
    if idx == -1:
        return ''
    return path[:idx]


def extract_name(segment: str) -> str:
    """Drop the sibling index: `settingsButton[1]` -> `settingsButton`."""
    bracket = segment.find('[')
    if bracket == -1:
        return segment
    return segment[:bracket]


def get_name_from_path(path: str) -> str:
    return extract_name(path.split(PATH_SEPARATOR)[-1])


def extract_all_names(path: str) -> List[str]:
    """`header > settingsButton[1]` -> ['header', 'settingsButton']"""
    return [extract_name(part) for part in path.split(PATH_SEPARATOR)]


def get_path_depth(path: str) -> int:
    return len(path.split(PATH_SEPARATOR))


def sort_paths(paths: Iterable[str]) -> List[str]:
    """Sort by depth first, then lexicographically."""
    return sorted(paths, key=lambda p: (get_path_depth(p), p))


def match_path_pattern(path: str, pattern: str) -> bool:
    """Match a path against a pattern where `*` stands for one segment name."""
    regex = ''.join(
        r'[^\s>]+' if part == '*' else re.escape(part)
        for part in re.split(r'(\*)', pattern)
    )
    return re.fullmatch(regex, path) is not None


def index_by_path(elements) -> Dict[str, object]:
    """Pre-order index of every element (not only leaves) keyed by path."""
    index = {}

    def add(element):
        index[element.path] = element
        for child in element.children or ():
            add(child)

    for element in elements:
        add(element)
    return index


def are_paths_equivalent_by_name(design_path: str, impl_path: str,
                                 alias_fn: Optional[Callable[[str], str]] = None) -> bool:
    """
    Loose path equivalence used when the exact path differs.

    Only the root segment name and the final segment name are compared;
    intermediate segments are ignored so wrapper elements inserted between
    root and leaf do not break alignment. The design-side final name goes
    through `alias_fn` before the comparison.
    """
    if design_path == impl_path:
        return True

    design_parts = design_path.split(PATH_SEPARATOR)
    impl_parts = impl_path.split(PATH_SEPARATOR)

    if extract_name(design_parts[0]) != extract_name(impl_parts[0]):
        return False

    design_last = extract_name(design_parts[-1])
    if alias_fn is not None:
        design_last = alias_fn(design_last)
    return design_last == extract_name(impl_parts[-1])
