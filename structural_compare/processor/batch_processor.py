"""
Batch Processor Module
Processes independent components (props extraction and usage check) on a
bounded worker pool.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from structural_compare.config.name_mapping import NameMapping
from structural_compare.processor.props_extractor import (
    ComponentProp, extract_component_props, validate_props_usage,
)
from structural_compare.utils.file_utils import FileInfo

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 4


@dataclass
class IndependentComponent:
    design_name: str
    code_name: str
    tsx_path: Path
    css_path: Optional[Path] = None


@dataclass
class ProcessResult:
    component_path: str
    success: bool
    props: List[ComponentProp] = field(default_factory=list)
    unused_props: List[str] = field(default_factory=list)
    error: Optional[str] = None
    duration: float = 0.0

    def to_dict(self) -> Dict:
        return {
            'component_path': self.component_path,
            'success': self.success,
            'props': [p.to_dict() for p in self.props],
            'unused_props': list(self.unused_props),
            'error': self.error,
            'duration': self.duration,
        }


@dataclass
class BatchProcessResult:
    total: int
    successful: int
    failed: int
    results: List[ProcessResult]
    total_duration: float

    def to_dict(self) -> Dict:
        return {
            'total': self.total,
            'successful': self.successful,
            'failed': self.failed,
            'results': [r.to_dict() for r in self.results],
            'total_duration': self.total_duration,
        }


def process_component(component: IndependentComponent, extract_props: bool = True) -> ProcessResult:
    start = time.perf_counter()
    try:
        source = Path(component.tsx_path).read_text(encoding='utf-8')
        props = extract_component_props(source, component.code_name) if extract_props else []
        unused = []
        if props:
            unused = validate_props_usage(source, component.code_name, props)['unused']
            if unused:
                logger.warning("%s: unused props: %s", component.code_name, ', '.join(unused))
        return ProcessResult(
            component_path=str(component.tsx_path),
            success=True,
            props=props,
            unused_props=unused,
            duration=time.perf_counter() - start,
        )
    except Exception as e:
        logger.error("Failed to process %s", component.tsx_path, exc_info=True)
        return ProcessResult(
            component_path=str(component.tsx_path),
            success=False,
            error=str(e),
            duration=time.perf_counter() - start,
        )


def process_batch(components: Sequence[IndependentComponent], concurrency: int = DEFAULT_CONCURRENCY,
                  extract_props: bool = True) -> BatchProcessResult:
    """
    Run `process_component` over all components with at most `concurrency`
    workers. Results are listed in completion order.
    """
    start = time.perf_counter()
    results: List[ProcessResult] = []

    if components:
        workers = max(1, min(concurrency, len(components)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(process_component, c, extract_props) for c in components]
            for future in as_completed(futures):
                results.append(future.result())

    successful = sum(1 for r in results if r.success)
    batch = BatchProcessResult(
        total=len(components),
        successful=successful,
        failed=len(results) - successful,
        results=results,
        total_duration=time.perf_counter() - start,
    )
    logger.info("Processed %d components: %d ok, %d failed", batch.total, batch.successful, batch.failed)
    return batch


def find_independent_components(name_mapping: NameMapping, tsx_files: Sequence[FileInfo],
                                css_files: Sequence[FileInfo] = ()) -> List[IndependentComponent]:
    """Locate the source file of every registered independent component by file name."""
    components = []
    for code_name in name_mapping.independent_code_names():
        tsx = next((f for f in tsx_files if f.name == code_name), None)
        if tsx is None:
            logger.warning("No source file found for independent component %s", code_name)
            continue
        css = next((f for f in css_files if f.name == code_name and f.path.parent == tsx.path.parent), None)
        design_name = next(d for d, c in name_mapping.independent_components.items() if c == code_name)
        components.append(IndependentComponent(
            design_name=design_name,
            code_name=code_name,
            tsx_path=tsx.path,
            css_path=css.path if css else None,
        ))
    return components
