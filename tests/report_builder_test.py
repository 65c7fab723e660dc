import sys
import os
import json
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from structural_compare.comparator.report_builder import MAX_DIFF_ROWS, ReportBuilder, md_value, status_label
from structural_compare.comparator.structure_comparator import compare_structures
from structural_compare.core.models import CanonicalElement, ElementKind, Origin, Provenance

def element(path, origin, text=None, styles=None, children=None, kind=ElementKind.TEXT):
    return CanonicalElement(
        id=f"{origin.value}:{path}",
        kind=kind,
        path=path,
        provenance=Provenance(origin),
        text_content=text,
        styles=styles or {},
        children=tuple(children) if children else None,
    )

def passing_outcome():
    design = [element('Home', Origin.DESIGN, kind=ElementKind.CONTAINER, children=[
        element('Home > title[0]', Origin.DESIGN, text='Hello', styles={'fontSize': 16}),
    ])]
    impl = [element('Home', Origin.IMPLEMENTATION, kind=ElementKind.CONTAINER, children=[
        element('Home > title[0]', Origin.IMPLEMENTATION, text='Hello', styles={'fontSize': 16}),
    ])]
    outcome = compare_structures(design, impl)
    outcome.screen = {'id': 'home', 'name': 'HomeView', 'frame_id': 'home-frame'}
    outcome.sources = {'design': 'd.json', 'markup': 'HomeView.tsx', 'stylesheet': 'HomeView.module.css'}
    return outcome

def failing_outcome():
    design = [element('Settings', Origin.DESIGN, kind=ElementKind.CONTAINER, children=[
        element('Settings > title[0]', Origin.DESIGN, text='Settings', styles={'fontSize': 20}),
        element('Settings > hint[1]', Origin.DESIGN, text='Choose wisely'),
    ])]
    impl = [element('Settings', Origin.IMPLEMENTATION, kind=ElementKind.CONTAINER, children=[
        element('Settings > title[0]', Origin.IMPLEMENTATION, text='Settings', styles={'fontSize': 24}),
    ])]
    outcome = compare_structures(design, impl)
    outcome.screen = {'id': 'settings', 'name': 'SettingsView', 'frame_id': 'settings-frame'}
    return outcome

def test_filters():
    assert status_label('pass') == 'PASS'
    assert status_label('fail', markdown=True) == ':x: Fail'
    assert md_value(None) == '(none)'
    assert md_value('#fff') == '`#fff`'
    assert md_value(16) == '16'

def test_console_report():
    text = ReportBuilder().render_console(failing_outcome())
    assert 'Structural comparison: SettingsView' in text
    assert 'Status:       FAIL' in text
    assert 'Settings > hint[1] (Add: "Choose wisely" text element)' in text
    assert 'Settings > title[0] -> fontSize: 20 vs 24 (diff: 4.00)' in text

def test_markdown_single_screen():
    text = ReportBuilder().render_markdown(passing_outcome())
    assert '## Target' in text
    assert '- **Name**: HomeView' in text
    assert '- **Markup**: `HomeView.tsx`' in text
    assert '| Match rate | 100.0% |' in text
    assert '| Status | :white_check_mark: Pass |' in text
    assert '## Overview' not in text

def test_markdown_multiple_screens():
    text = ReportBuilder().render_markdown([passing_outcome(), failing_outcome()])
    assert '## Overview' in text
    assert '## HomeView' in text
    assert '## SettingsView' in text
    assert '### Missing in implementation' in text
    assert '| Settings > title[0] | fontSize | 20 | 24 | error |' in text

def test_markdown_truncates_long_difference_tables():
    outcome = failing_outcome()
    extra = outcome.property_differences[0]
    outcome.property_differences = [extra] * (MAX_DIFF_ROWS + 3)
    text = ReportBuilder().render_markdown(outcome)
    assert '(3 more)' in text

def test_json_report():
    builder = ReportBuilder()
    single = json.loads(builder.render_json(passing_outcome()))
    assert single['verdict']['status'] == 'pass'
    assert single['meta']['screen']['id'] == 'home'
    assert single['meta']['options']['colorTolerance'] == 10

    minified = builder.render_json([passing_outcome(), failing_outcome()], minify=True)
    assert '\n' not in minified
    data = json.loads(minified)
    assert [s['verdict']['status'] for s in data['screens']] == ['pass', 'fail']

def test_ci_summary():
    summary = ReportBuilder().ci_summary(failing_outcome())
    assert set(summary) == {'status', 'matchRate', 'missingCount', 'extraCount', 'styleDiffCount', 'timestamp'}
    assert summary['status'] == 'fail'
    assert summary['missingCount'] == 1
    assert summary['styleDiffCount'] == 1

def test_aggregate_ci_summary():
    summary = ReportBuilder().aggregate_ci_summary([passing_outcome(), failing_outcome()])
    assert summary['status'] == 'fail'
    assert summary['missingCount'] == 1
    assert [s['screen'] for s in summary['screens']] == ['home', 'settings']
    empty = ReportBuilder().aggregate_ci_summary([])
    assert empty['status'] == 'pass'
    assert empty['matchRate'] == 100.0

def test_write_report(tmp_path):
    builder = ReportBuilder()
    outcomes = [passing_outcome()]
    assert builder.write_report(outcomes, 'console', tmp_path) is None

    json_path = builder.write_report(outcomes, 'json', tmp_path / 'out')
    assert json_path.name.startswith('comparison-report-')
    assert json_path.suffix == '.json'
    assert json.loads(json_path.read_text(encoding='utf-8'))['screens'][0]['meta']['screen']['name'] == 'HomeView'

    ci_path = builder.write_report(outcomes, 'ci-summary', tmp_path)
    assert ci_path.name == '.structural-compare-results.json'
    assert json.loads(ci_path.read_text(encoding='utf-8'))['status'] == 'pass'

    md_path = builder.write_report(outcomes, 'markdown', tmp_path)
    assert md_path.name == 'comparison-report.md'
    assert 'HomeView' in md_path.read_text(encoding='utf-8')

    with pytest.raises(ValueError):
        builder.write_report(outcomes, 'pdf', tmp_path)
