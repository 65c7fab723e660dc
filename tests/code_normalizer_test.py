import sys
import os
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from structural_compare.config.name_mapping import NameMapping
from structural_compare.core.code_normalizer import (
    CodeNormalizer, extract_component_name, extract_exported_component, normalize_code, normalize_code_file,
)
from structural_compare.core.models import ElementKind, Origin, count_elements, iter_elements
from structural_compare.utils.path_utils import build_path

HOME_TSX = """
import { useMemo } from 'react';
import styles from './HomeView.module.css';

export function HomeView({ active, list }: { active: boolean; list: string[] }) {
  const preview = useMemo(() => <span className={styles.ghost}>preview</span>, []);
  return (
    <div className={styles.homeView}>
      <h1 className={styles.title}>Welcome home</h1>
      <div className={`${styles.card} ${active ? styles.active : ''}`} style={{ padding: 24, marginTop: '2rem' }}>
        <button className={styles.settingsButton}>Open</button>
      </div>
      {list.map(item => <p key={item}>{item}</p>)}
    </div>
  );
}
"""

HOME_CSS = """
.homeView { display: flex; flex-direction: column; gap: 12px; }
.title { font-size: 24px; color: #111111; }
.card { padding: 16px; background-color: #ffffff; }
.active { border-radius: 8px; }
.ghost { color: red; }
"""

def test_render_tree_and_paths():
    result = normalize_code(HOME_TSX, HOME_CSS)
    assert result.ok
    assert len(result.elements) == 1
    root = result.elements[0]
    assert root.path == 'HomeView'
    assert root.provenance.origin == Origin.IMPLEMENTATION
    paths = [e.path for e in iter_elements(result.elements)]
    assert paths == [
        'HomeView',
        'HomeView > title[0]',
        'HomeView > card[1]',
        'HomeView > card[1] > settingsButton[0]',
    ]

def test_kinds_text_and_class_styles():
    root = normalize_code(HOME_TSX, HOME_CSS).elements[0]
    title, card = root.children
    assert title.kind == ElementKind.TEXT
    assert title.text_content == 'Welcome home'
    assert title.styles == {'fontSize': 24, 'color': '#111111'}
    button = card.children[0]
    assert button.kind == ElementKind.BUTTON
    assert button.text_content == 'Open'

def test_layout_from_stylesheet():
    root = normalize_code(HOME_TSX, HOME_CSS).elements[0]
    assert root.layout.arrangement == 'flex'
    assert root.layout.direction == 'column'
    assert root.styles['gap'] == 12

def test_template_classes_and_inline_styles_merge():
    card = normalize_code(HOME_TSX, HOME_CSS).elements[0].children[1]
    assert card.styles == {
        'padding': 24,
        'backgroundColor': '#ffffff',
        'borderRadius': 8,
        'marginTop': '2rem',
    }

def test_callback_markup_is_not_a_render_root():
    result = normalize_code(HOME_TSX, HOME_CSS)
    texts = [e.text_content for e in iter_elements(result.elements)]
    assert 'preview' not in texts
    assert count_elements(result.elements) == 4

def test_parse_error_yields_empty_result():
    result = normalize_code("export function Broken() { return <div className={styles.a}> }", '')
    assert not result.ok
    assert result.elements == []
    assert result.parse_error.startswith('Syntax error')
    assert normalize_code_file("export function Broken() { return <div> }") == []

def test_empty_markup_is_ok_and_empty():
    result = normalize_code("export const value = 1;", '')
    assert result.ok
    assert result.elements == []

def test_arrow_component_with_fragment():
    tsx = """
    const List = () => (
      <>
        <span className={styles.first}>A</span>
        <span className={styles.second}>B</span>
      </>
    );
    """
    result = normalize_code(tsx, '')
    assert [e.path for e in result.elements] == ['First', 'Second']
    assert [e.text_content for e in result.elements] == ['A', 'B']

def test_memo_wrapped_component_is_a_render_root():
    tsx = "export const Card = React.memo(() => <section className={styles.card}>Hi</section>);"
    result = normalize_code(tsx, '')
    assert [e.path for e in result.elements] == ['Card']

def test_string_class_names_and_tag_fallback():
    tsx = """
    function Page() {
      return (
        <main className="wrapper main">
          <p>plain</p>
          <img src="a.png" />
        </main>
      );
    }
    """
    root = normalize_code(tsx, '.wrapper { gap: 4px; }').elements[0]
    assert root.path == 'Wrapper'
    assert root.styles == {'gap': 4}
    p, img = root.children
    assert p.path == 'Wrapper > p[0]'
    assert img.path == 'Wrapper > img[1]'
    assert img.kind == ElementKind.IMAGE

def test_conditional_and_call_class_expressions():
    tsx = """
    function Item({ on }) {
      return (
        <div className={clsx(styles.item, on && styles.selected, { [styles.wide]: on })}>
          <span className={on ? styles.onLabel : styles.offLabel}>x</span>
        </div>
      );
    }
    """
    css = ".item { gap: 1px; } .selected { gap: 2px; } .wide { padding: 3px; } .onLabel { color: #000000; }"
    root = normalize_code(tsx, css).elements[0]
    assert root.path == 'Item'
    assert root.styles == {'gap': 2, 'padding': 3}
    assert root.children[0].path == 'Item > onLabel[0]'
    assert root.children[0].styles == {'color': '#000000'}

def test_text_content_rules():
    tsx = """
    function T({ name }) {
      return (
        <div>
          <p>
            Hello
            world
          </p>
          <span>{'Hi'} there {name}</span>
          <em>Tom &amp; Jerry</em>
          <strong>{`Total`}</strong>
        </div>
      );
    }
    """
    texts = [c.text_content for c in normalize_code(tsx, '').elements[0].children]
    assert texts == ['Hello world', 'Hi there', 'Tom & Jerry', 'Total']

def test_inline_style_keys_and_values():
    tsx = """
    function S() {
      return <div style={{ 'font-size': '14px', fontWeight: 600, marginLeft: -4, color: `#fff` }} />;
    }
    """
    element = normalize_code(tsx, '').elements[0]
    assert element.styles == {'fontSize': 14, 'fontWeight': 600, 'marginLeft': -4, 'color': '#fff'}

def test_layout_from_jsx_attributes():
    tsx = 'function L() { return <Stack flexDirection="row" justifyContent="flex-end" />; }'
    element = normalize_code(tsx, '').elements[0]
    assert element.layout.arrangement == 'flex'
    assert element.layout.direction == 'row'
    assert element.layout.main_axis_alignment == 'end'

def test_class_alias_is_applied_to_paths():
    mapping = NameMapping(code_class_to_design={'welcomeMessage': 'welcomeMsg'})
    tsx = """
    function V() {
      return <div className={styles.view}><p className={styles.welcomeMessage}>Hi</p></div>;
    }
    """
    root = normalize_code(tsx, '', mapping).elements[0]
    assert root.children[0].path == 'View > welcomeMsg[0]'

def test_independent_component_is_opaque():
    mapping = NameMapping(independent_components={'settingsButton': 'SettingsDropdown'})
    tsx = """
    function Header() {
      return (
        <header className={styles.header}>
          <SettingsDropdown>
            <span>inner</span>
          </SettingsDropdown>
        </header>
      );
    }
    """
    root = normalize_code(tsx, '', mapping).elements[0]
    dropdown = root.children[0]
    assert dropdown.provenance.is_opaque_component
    assert dropdown.provenance.opaque_component_counterpart_name == 'settingsButton'
    assert dropdown.children is None
    for element in iter_elements([root]):
        if element.provenance.is_opaque_component:
            assert element.children is None

def test_normalization_is_idempotent():
    def shape(elements):
        return [(e.path, e.kind, e.styles, e.text_content) for e in iter_elements(elements)]
    assert shape(normalize_code(HOME_TSX, HOME_CSS).elements) == shape(normalize_code(HOME_TSX, HOME_CSS).elements)

def test_paths_rebuild_from_parents():
    for element in iter_elements(normalize_code(HOME_TSX, HOME_CSS).elements):
        for idx, child in enumerate(element.children or ()):
            assert child.path == build_path(element.path, child.name, idx)

def test_component_name_extraction():
    tsx = "function A() { return <div />; }\nexport const B = () => <span />;"
    assert extract_component_name(tsx) == 'B'
    assert extract_component_name('const x = 1;') is None
    exported = extract_exported_component(HOME_TSX, HOME_CSS)
    assert exported['name'] == 'HomeView'
    assert exported['parse_error'] is None
    assert len(exported['elements']) == 1

def test_helper_arrow_inside_component_is_not_a_render_root():
    tsx = """
    export function Home() {
      const renderRow = (x) => <span className={styles.row}>{x}</span>;
      return <div className={styles.home}>{renderRow(1)}</div>;
    }
    """
    result = normalize_code(tsx, '')
    assert [e.path for e in result.elements] == ['Home']

def test_exported_arrow_components_are_render_roots():
    tsx = """
    export const Badge = () => <span className={styles.badge}>New</span>;
    export default () => <div className={styles.page} />;
    """
    result = normalize_code(tsx, '')
    assert [e.path for e in result.elements] == ['Badge', 'Page']

def test_one_normalizer_keeps_stylesheets_apart():
    normalizer = CodeNormalizer()
    tsx = "function A() { return <div className={styles.box} />; }"
    first = normalizer.normalize(tsx, '.box { gap: 4px; }')
    second = normalizer.normalize(tsx, '.box { gap: 12px; }')
    assert first.elements[0].styles['gap'] == 4
    assert second.elements[0].styles['gap'] == 12
    assert normalizer.normalize(tsx, '').elements[0].styles == {}
