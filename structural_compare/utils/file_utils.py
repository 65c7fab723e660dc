"""
File Utilities Module
File discovery and design-to-implementation file mapping by naming convention.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DESIGN_SUFFIXES = ('.design.json', '.pen')
TSX_SUFFIXES = ('.tsx',)
CSS_SUFFIXES = ('.module.css', '.css')

SKIPPED_DIRS = {'node_modules', 'dist', 'build', '__pycache__'}

CONVENTIONS = ('standard', 'page', 'independent')


@dataclass(frozen=True)
class FileInfo:
    path: Path
    type: str  # design | tsx | css | unknown
    name: str
    relative_path: str


@dataclass(frozen=True)
class MappedFiles:
    design: FileInfo
    tsx: FileInfo
    css: Optional[FileInfo]
    convention: str


def normalize_path(path: PathLike) -> Path:
    """Convert string path to normalized Path object."""
    return Path(path).resolve()


def is_hidden(path: Path) -> bool:
    return path.name.startswith('.')


def detect_file_type(path: PathLike) -> str:
    name = Path(path).name.lower()
    if name.endswith(DESIGN_SUFFIXES):
        return 'design'
    if name.endswith(TSX_SUFFIXES):
        return 'tsx'
    if name.endswith(CSS_SUFFIXES):
        return 'css'
    return 'unknown'


def _base_name(file_name: str, file_type: str) -> str:
    """`Home.design.json` -> `Home`, `Home.module.css` -> `Home`, `Home.tsx` -> `Home`."""
    lowered = file_name.lower()
    suffixes = {'design': DESIGN_SUFFIXES, 'tsx': TSX_SUFFIXES, 'css': CSS_SUFFIXES}.get(file_type, ())
    for suffix in suffixes:
        if lowered.endswith(suffix):
            return file_name[:-len(suffix)]
    return Path(file_name).stem


def collect_files(base_path: PathLike) -> Dict[str, List[FileInfo]]:
    """
    Collect and categorize design, TSX and CSS files under a directory.

    Hidden entries and dependency/build directories are skipped.
    """
    base_path = normalize_path(base_path)
    result: Dict[str, List[FileInfo]] = {'design': [], 'tsx': [], 'css': []}

    for root, dirs, files in os.walk(base_path):
        dirs[:] = sorted(d for d in dirs if not is_hidden(Path(root) / d) and d not in SKIPPED_DIRS)

        for file in sorted(files):
            file_path = Path(root) / file
            if is_hidden(file_path):
                continue
            file_type = detect_file_type(file_path)
            if file_type == 'unknown':
                continue
            result[file_type].append(FileInfo(
                path=file_path,
                type=file_type,
                name=_base_name(file, file_type),
                relative_path=file_path.relative_to(base_path).as_posix(),
            ))

    logger.debug("Collected %s", {k: len(v) for k, v in result.items()})
    return result


def _find_css(tsx: FileInfo, css_files: Sequence[FileInfo]) -> Optional[FileInfo]:
    for css in css_files:
        if css.path.parent == tsx.path.parent and css.name == tsx.name:
            return css
    return None


def _match_standard(design: FileInfo, tsx_files: Sequence[FileInfo], design_root: str, src_dir: str) -> Optional[FileInfo]:
    """{design_root}/a/Name.pen -> {src_dir}/a/.../Name.tsx"""
    design_dir = str(Path(design.relative_path).parent.as_posix())
    if design_dir == design_root or design_dir.startswith(design_root + '/'):
        target_dir = src_dir + design_dir[len(design_root):]
    else:
        target_dir = src_dir
    for tsx in tsx_files:
        if tsx.name == design.name and tsx.relative_path.startswith(target_dir + '/'):
            return tsx
    return None


def _match_page(design: FileInfo, tsx_files: Sequence[FileInfo]) -> Optional[FileInfo]:
    """Name.pen -> components/views/NameView.tsx"""
    for tsx in tsx_files:
        if tsx.name == f"{design.name}View" and 'components/views/' in tsx.relative_path:
            return tsx
    return None


def _match_independent(design: FileInfo, tsx_files: Sequence[FileInfo], src_dir: str) -> Optional[FileInfo]:
    """Name.pen -> {src_dir}/components/Name/Name.tsx"""
    expected = f"{src_dir}/components/{design.name}/{design.name}.tsx"
    for tsx in tsx_files:
        if tsx.relative_path.endswith(expected):
            return tsx
    return None


def find_matching_files(design: FileInfo, files: Dict[str, List[FileInfo]],
                        conventions: Sequence[str] = CONVENTIONS,
                        design_root: str = 'docs/design', src_dir: str = 'src') -> Optional[MappedFiles]:
    """Try each convention in order; the first one that finds a TSX file wins."""
    tsx_files = files.get('tsx', [])
    for convention in conventions:
        if convention == 'standard':
            tsx = _match_standard(design, tsx_files, design_root, src_dir)
        elif convention == 'page':
            tsx = _match_page(design, tsx_files)
        elif convention == 'independent':
            tsx = _match_independent(design, tsx_files, src_dir)
        else:
            raise ValueError(f"Unknown mapping convention: {convention}")
        if tsx is not None:
            return MappedFiles(design=design, tsx=tsx, css=_find_css(tsx, files.get('css', [])),
                               convention=convention)
    return None


def map_all_files(base_path: PathLike, conventions: Sequence[str] = CONVENTIONS,
                  design_root: str = 'docs/design', src_dir: str = 'src') -> Tuple[List[MappedFiles], List[FileInfo]]:
    """Map every design file under `base_path`; returns (mapped, unmapped design files)."""
    files = collect_files(base_path)
    mapped, unmapped = [], []
    for design in files['design']:
        match = find_matching_files(design, files, conventions, design_root, src_dir)
        if match is None:
            unmapped.append(design)
        else:
            mapped.append(match)
    logger.info("Mapped %d design files, %d unmapped", len(mapped), len(unmapped))
    return mapped, unmapped


def ensure_directory(directory: Path) -> None:
    """Ensure directory exists, create if necessary."""
    directory.mkdir(parents=True, exist_ok=True)


def read_file_content(file_path: PathLike) -> str:
    """
    Read a source file as UTF-8.

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        return f.read()
