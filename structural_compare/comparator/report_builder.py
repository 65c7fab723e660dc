"""
Report Builder Module
Renders comparison outcomes as console text, markdown, JSON and CI summaries
using Jinja2 templates.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from jinja2 import Environment, FileSystemLoader

from structural_compare.comparator.results import ComparisonOutcome, OverallStatus
from structural_compare.comparator.style_diff import format_style_diff

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / 'templates'
MAX_DIFF_ROWS = 20

REPORT_FORMATS = ('console', 'markdown', 'json', 'ci-summary')

STATUS_LABELS = {
    'pass': ('PASS', ':white_check_mark: Pass'),
    'warning': ('WARNING', ':warning: Warning'),
    'fail': ('FAIL', ':x: Fail'),
}

STATUS_RANK = {OverallStatus.PASS: 0, OverallStatus.WARNING: 1, OverallStatus.FAIL: 2}


def status_label(status: str, markdown: bool = False) -> str:
    plain, md = STATUS_LABELS.get(status, ('UNKNOWN', ':question: Unknown'))
    return md if markdown else plain


def md_value(value: Any) -> str:
    if value is None:
        return '(none)'
    if isinstance(value, str):
        return f"`{value}`"
    return str(value)


class ReportBuilder:
    def __init__(self, template_dir: Union[str, Path, None] = None):
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir or TEMPLATE_DIR)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters['status_label'] = status_label
        self.env.filters['md_value'] = md_value
        self.env.filters['style_diff'] = format_style_diff

    def render_console(self, outcome: ComparisonOutcome) -> str:
        template = self.env.get_template('console.txt.j2')
        return template.render(outcome=outcome, max_rows=MAX_DIFF_ROWS)

    def render_markdown(self, outcomes: Union[ComparisonOutcome, Sequence[ComparisonOutcome]]) -> str:
        """One screen renders in full; several screens get an overview table first."""
        if isinstance(outcomes, ComparisonOutcome):
            outcomes = [outcomes]
        template = self.env.get_template('markdown.md.j2')
        return template.render(
            outcomes=list(outcomes),
            max_rows=MAX_DIFF_ROWS,
            generated_at=datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC'),
        )

    def render_json(self, outcomes: Union[ComparisonOutcome, Sequence[ComparisonOutcome]], minify: bool = False) -> str:
        if isinstance(outcomes, ComparisonOutcome):
            data = outcomes.to_dict()
        else:
            data = {
                'timestamp': datetime.now(timezone.utc).isoformat(),
                'screens': [o.to_dict() for o in outcomes],
            }
        if minify:
            return json.dumps(data, separators=(',', ':'), default=str)
        return json.dumps(data, indent=2, default=str)

    def ci_summary(self, outcome: ComparisonOutcome) -> Dict[str, Any]:
        verdict = outcome.verdict
        return {
            'status': verdict.status.value,
            'matchRate': verdict.match_rate_percent,
            'missingCount': verdict.missing_count,
            'extraCount': verdict.extra_count,
            'styleDiffCount': verdict.difference_count,
            'timestamp': outcome.timestamp,
        }

    def aggregate_ci_summary(self, outcomes: Sequence[ComparisonOutcome]) -> Dict[str, Any]:
        """Worst status, mean match rate and summed counts across screens."""
        if not outcomes:
            status = OverallStatus.PASS
            match_rate = 100.0
        else:
            status = max((o.verdict.status for o in outcomes), key=STATUS_RANK.get)
            match_rate = sum(o.verdict.match_rate_percent for o in outcomes) / len(outcomes)
        return {
            'status': status.value,
            'matchRate': match_rate,
            'missingCount': sum(o.verdict.missing_count for o in outcomes),
            'extraCount': sum(o.verdict.extra_count for o in outcomes),
            'styleDiffCount': sum(o.verdict.difference_count for o in outcomes),
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'screens': [dict(self.ci_summary(o), screen=o.screen.get('id')) for o in outcomes],
        }

    def write_report(self, outcomes: Sequence[ComparisonOutcome], report_format: str,
                     output_dir: Union[str, Path]) -> Optional[Path]:
        """Write the report file for `report_format`; console output writes nothing."""
        if report_format == 'console':
            return None

        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        if report_format == 'json':
            stamp = datetime.now(timezone.utc).strftime('%Y-%m-%dT%H-%M-%S')
            path = output_dir / f"comparison-report-{stamp}.json"
            content = self.render_json(list(outcomes))
        elif report_format == 'ci-summary':
            path = output_dir / '.structural-compare-results.json'
            content = json.dumps(self.aggregate_ci_summary(outcomes), indent=2)
        elif report_format == 'markdown':
            path = output_dir / 'comparison-report.md'
            content = self.render_markdown(outcomes)
        else:
            raise ValueError(f"Unknown report format: {report_format}")

        path.write_text(content, encoding='utf-8')
        logger.info("Wrote %s report to %s", report_format, path)
        return path
