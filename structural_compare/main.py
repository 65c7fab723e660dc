#!/usr/bin/env python3
"""
Structural Compare
Command line entry point: compare configured screens, scaffold and validate
the config file, and inspect the design-to-code file mapping.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from structural_compare import __version__
from structural_compare.comparator.report_builder import REPORT_FORMATS, ReportBuilder
from structural_compare.comparator.results import ComparisonOutcome
from structural_compare.comparator.structure_comparator import StructureComparator
from structural_compare.config.loader import CONFIG_FILE_NAMES, get_example_config, load_config
from structural_compare.config.schema import ScreenConfig, StructuralCompareConfig
from structural_compare.core.code_normalizer import normalize_code
from structural_compare.core.design_normalizer import (
    find_frame, load_design_document, normalize_design_frame,
)
from structural_compare.exceptions import DesignDataError, StructuralCompareError
from structural_compare.processor.batch_processor import (
    DEFAULT_CONCURRENCY, find_independent_components, process_batch,
)
from structural_compare.utils.file_utils import collect_files, map_all_files, read_file_content

logger = logging.getLogger(__name__)


def select_screens(config: StructuralCompareConfig, screen: Optional[str]) -> List[ScreenConfig]:
    """All configured screens, or the one whose id or name is `screen`."""
    if not screen:
        return list(config.screens)
    selected = [s for s in config.screens if screen in (s.id, s.name)]
    if not selected:
        known = ', '.join(s.id for s in config.screens)
        raise StructuralCompareError(f"Unknown screen '{screen}'. Configured screens: {known}")
    return selected


def compare_screen(screen: ScreenConfig, design_document, config: StructuralCompareConfig) -> ComparisonOutcome:
    name_mapping = config.name_mapping.to_name_mapping()

    frame = find_frame(design_document, screen.frame_id)
    if frame is None:
        raise DesignDataError(f"Frame '{screen.frame_id}' not found in {config.design_file}")
    design_elements = normalize_design_frame(frame, name_mapping)

    try:
        markup = read_file_content(screen.tsx_file)
        stylesheet = read_file_content(screen.css_file)
    except OSError as e:
        raise StructuralCompareError(f"Cannot read sources for screen '{screen.id}': {e}") from e

    code = normalize_code(markup, stylesheet, name_mapping)
    if not code.ok:
        raise StructuralCompareError(
            f"Skipped screen '{screen.id}': {screen.tsx_file} could not be parsed ({code.parse_error})"
        )

    outcome = StructureComparator(config.options, name_mapping).compare(design_elements, code.elements)
    outcome.screen = {'id': screen.id, 'name': screen.name, 'frame_id': screen.frame_id}
    outcome.sources = {
        'design': config.design_file,
        'markup': screen.tsx_file,
        'stylesheet': screen.css_file,
    }
    return outcome


def _handle_compare(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    screens = select_screens(config, args.screen)
    design_document = load_design_document(config.design_file)

    outcomes = []
    errored = []
    for screen in screens:
        logger.info("Comparing screen %s (%s)", screen.id, screen.name)
        try:
            outcomes.append(compare_screen(screen, design_document, config))
        except StructuralCompareError as e:
            logger.debug("Screen %s aborted", screen.id, exc_info=True)
            print(f"Error: {e}", file=sys.stderr)
            errored.append(screen.id)

    builder = ReportBuilder()
    if args.format == 'console':
        for outcome in outcomes:
            print(builder.render_console(outcome))
    elif outcomes:
        path = builder.write_report(outcomes, args.format, args.output or config.output_dir)
        if args.format == 'ci-summary':
            print(json.dumps(builder.aggregate_ci_summary(outcomes), indent=2))
        print(f"Report written to {path}")

    failed = errored + [o.screen['id'] for o in outcomes if not o.passed]
    if failed:
        print(f"Structural comparison failed for: {', '.join(failed)}")
        return 1
    return 0


def _handle_init(args: argparse.Namespace) -> int:
    path = Path.cwd() / CONFIG_FILE_NAMES[0]
    if path.exists() and not args.force:
        print(f"{path.name} already exists. Use --force to overwrite.")
        return 1
    path.write_text(json.dumps(get_example_config(), indent=2) + "\n", encoding='utf-8')
    print(f"Created {path}")
    return 0


def _handle_validate(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    print(f"Configuration is valid: {len(config.screens)} screen(s), design file {config.design_file}")
    missing = [p for s in config.screens for p in (s.tsx_file, s.css_file) if not Path(p).is_file()]
    if not Path(config.design_file).is_file():
        missing.insert(0, config.design_file)
    for path in missing:
        print(f"  warning: file not found: {path}")
    return 0


def _handle_discover(args: argparse.Namespace) -> int:
    mapped, unmapped = map_all_files(args.root, design_root=args.design_root, src_dir=args.src_dir)
    for match in mapped:
        css = f" + {match.css.relative_path}" if match.css else ''
        print(f"{match.design.relative_path} -> {match.tsx.relative_path}{css} [{match.convention}]")
    for design in unmapped:
        print(f"{design.relative_path} -> (no implementation found)")
    return 0


def _handle_components(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    files = collect_files(args.root)
    components = find_independent_components(
        config.name_mapping.to_name_mapping(), files['tsx'], files['css'],
    )
    batch = process_batch(components, concurrency=args.jobs)

    if args.json:
        print(json.dumps(batch.to_dict(), indent=2))
    else:
        for result in batch.results:
            if result.success:
                props = ', '.join(p.name if p.required else f"{p.name}?" for p in result.props) or '(no props)'
                print(f"{result.component_path}: {props}")
                if result.unused_props:
                    print(f"  unused: {', '.join(result.unused_props)}")
            else:
                print(f"{result.component_path}: FAILED ({result.error})")
        print(f"{batch.successful}/{batch.total} components processed in {batch.total_duration:.2f}s")
    return 1 if batch.failed else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='structural-compare',
        description="Compare design trees with their markup + stylesheet implementation",
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest='command', required=True)

    compare = subparsers.add_parser('compare', help="Compare configured screens")
    compare.add_argument('-s', '--screen', help="Only compare the screen with this id or name")
    compare.add_argument('-v', '--verbose', action='store_true', help="Enable debug logging")
    compare.add_argument('-f', '--format', choices=REPORT_FORMATS, default='console', help="Report format")
    compare.add_argument('-o', '--output', help="Report output directory (defaults to outputDir)")
    compare.add_argument('-c', '--config', help="Path to the configuration file")
    compare.set_defaults(handler=_handle_compare)

    init = subparsers.add_parser('init', help="Write a starter configuration file")
    init.add_argument('--force', action='store_true', help="Overwrite an existing configuration file")
    init.set_defaults(handler=_handle_init)

    validate = subparsers.add_parser('validate', help="Validate the configuration file")
    validate.add_argument('-c', '--config', help="Path to the configuration file")
    validate.set_defaults(handler=_handle_validate)

    discover = subparsers.add_parser('discover', help="Map design files to their implementation files")
    discover.add_argument('root', nargs='?', default='.', help="Project root (default: current directory)")
    discover.add_argument('--design-root', default='docs/design', help="Design directory relative to root")
    discover.add_argument('--src-dir', default='src', help="Source directory relative to root")
    discover.set_defaults(handler=_handle_discover)

    components = subparsers.add_parser('components', help="Extract props of independent components")
    components.add_argument('-c', '--config', help="Path to the configuration file")
    components.add_argument('--root', default='.', help="Directory to search for component files")
    components.add_argument('-j', '--jobs', type=int, default=DEFAULT_CONCURRENCY, help="Worker count")
    components.add_argument('--json', action='store_true', help="Print the batch result as JSON")
    components.set_defaults(handler=_handle_components)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, 'verbose', False) else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        return args.handler(args)
    except StructuralCompareError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
